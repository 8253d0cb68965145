from typing import List
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from app.models import Member
from app.config import INVITABLE_ROLES
from .repository import TeamRepository
from .errors import (ValidationError, PermissionDenied, NotFoundError,
                     ConflictError, InternalError)
from . import policy
import logging

# Logger
logger = logging.getLogger(__name__)

ALREADY_MEMBER = "User is already a member of this team"
MEMBER_CHANGED = "Team member was changed by another request, please retry"


class MembershipManager:
    """Invite, role change and removal of team members."""

    def __init__(self, repository: TeamRepository):
        self.repository = repository

    def _load_target(self, member_id: str) -> Member:
        target = self.repository.get_membership(member_id)
        if not target:
            raise NotFoundError("Team member not found")
        return target

    def invite(self, team_id: str, email: str, role: str, actor_id: str) -> Member:
        if not team_id or not email or not role:
            raise ValidationError("Missing required fields")
        if role not in INVITABLE_ROLES:
            raise ValidationError(f"Invalid role '{role}'. Allowed roles: {', '.join(INVITABLE_ROLES)}")

        # Non-members must not learn whether the team exists
        membership = self.repository.get_membership_for(team_id, actor_id)
        if not membership:
            raise NotFoundError("Team not found")
        if not policy.can_invite(membership.role):
            raise PermissionDenied("Only team owners and admins can invite new members")

        user = self.repository.find_user_by_email(email)
        if not user:
            # TODO: pending invitations for people without an account
            raise NotFoundError("User not found")

        if self.repository.get_membership_for(team_id, user.id):
            raise ConflictError(ALREADY_MEMBER)

        new_member = Member(team_id=team_id, user_id=user.id, role=role)
        try:
            with self.repository.transaction():
                self.repository.put_membership(new_member)
        except IntegrityError:
            # A concurrent invite inserted the same (team, user) pair first
            logger.info(f"Duplicate membership rejected for user {user.id} in team {team_id}")
            raise ConflictError(ALREADY_MEMBER)
        except SQLAlchemyError:
            logger.exception(f"Error adding member {user.id} to team {team_id}")
            raise InternalError("Failed to add team member")

        logger.info(f"User {actor_id} added {user.id} to team {team_id} as {role}")
        return new_member

    def update_role(self, member_id: str, new_role: str, actor_id: str) -> Member:
        if not member_id or not new_role:
            raise ValidationError("Missing required fields")
        if not policy.is_known_role(new_role):
            raise ValidationError(f"Invalid role '{new_role}'")

        target = self._load_target(member_id)
        membership = self.repository.get_membership_for(target.team_id, actor_id)
        if not membership:
            raise PermissionDenied("You do not have permission to update members in this team")

        if not policy.can_manage_members(membership.role):
            raise PermissionDenied("Only team owners and admins can update member roles")
        if target.role == "owner":
            raise PermissionDenied("Cannot change the role of a team owner")
        if new_role == "owner":
            raise PermissionDenied("Cannot promote a member to owner")
        if not policy.can_change_role(membership.role, target.role, new_role):
            raise PermissionDenied("Only team owners and admins can update member roles")

        try:
            with self.repository.transaction():
                if not self.repository.update_membership_role(member_id, target.role, new_role):
                    raise PermissionDenied(MEMBER_CHANGED)
        except SQLAlchemyError:
            logger.exception(f"Error updating role of member {member_id}")
            raise InternalError("Failed to update team member")

        self.repository.session.refresh(target)
        logger.info(f"User {actor_id} changed member {member_id} role to {new_role}")
        return target

    def remove(self, member_id: str, actor_id: str) -> None:
        if not member_id:
            raise ValidationError("Missing required fields")

        target = self._load_target(member_id)
        membership = self.repository.get_membership_for(target.team_id, actor_id)
        if not membership:
            raise PermissionDenied("You do not have permission to remove members from this team")

        actor_is_target = membership.id == target.id
        if target.role == "owner":
            raise PermissionDenied("Cannot remove the team owner")
        if actor_is_target:
            raise PermissionDenied("You cannot remove yourself from the team")
        if not policy.can_remove(membership.role, target.role, actor_is_target):
            raise PermissionDenied(
                "You do not have permission to remove this member. "
                "Admins can only remove regular members."
            )

        team_id, checked_role = target.team_id, target.role
        try:
            with self.repository.transaction():
                if not self.repository.delete_membership(member_id, expected_role=checked_role):
                    raise PermissionDenied(MEMBER_CHANGED)
        except SQLAlchemyError:
            logger.exception(f"Error removing member {member_id}")
            raise InternalError("Failed to remove team member")

        logger.info(f"User {actor_id} removed member {member_id} from team {team_id}")

    def list_members(self, team_id: str, actor_id: str) -> List[Member]:
        if not team_id:
            raise ValidationError("Team ID is required")
        if not self.repository.get_membership_for(team_id, actor_id):
            raise NotFoundError("Team not found")
        return self.repository.list_members(team_id)
