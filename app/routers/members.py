from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from app.schemas.member import (MemberInvite, MemberRoleUpdate, MemberDelete, MemberRead,
                                MemberPublic, MemberResponse, MemberList)
from app.schemas.teams import SuccessResponse
from app.services.memberships import MembershipManager
from ..dependencies import user_dependency, get_membership_manager


router = APIRouter(prefix="/team-members", tags=["Team members"])
membership_manager = Depends(get_membership_manager)


@router.get("", response_model=MemberList)
async def list_members(current_user: user_dependency,
                       team_id: Optional[str] = Query(None, alias="teamId"),
                       manager: MembershipManager = membership_manager):
    members = manager.list_members(team_id, current_user.get("id"))
    return MemberList(
        members=[
            MemberPublic.model_validate({
                **member.model_dump(),
                "email": member.user.email if member.user else None,
                "first_name": member.user.first_name if member.user else None,
                "last_name": member.user.last_name if member.user else None,
            })
            for member in members
        ]
    )


@router.post("", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def invite_member(current_user: user_dependency, invite: MemberInvite,
                        manager: MembershipManager = membership_manager):
    """
    Add an existing user to a team by email.
    Only owners and admins of the team may invite.
    """
    new_member = manager.invite(invite.team_id, invite.email, invite.role, current_user.get("id"))
    return MemberResponse(member=MemberRead.model_validate(new_member))


@router.put("", response_model=MemberResponse)
async def update_member_role(current_user: user_dependency, member: MemberRoleUpdate,
                             manager: MembershipManager = membership_manager):
    updated_member = manager.update_role(member.member_id, member.role, current_user.get("id"))
    return MemberResponse(member=MemberRead.model_validate(updated_member))


@router.delete("", response_model=SuccessResponse)
async def remove_member(current_user: user_dependency, member: MemberDelete,
                        manager: MembershipManager = membership_manager):
    manager.remove(member.member_id, current_user.get("id"))
    return SuccessResponse(success=True)
