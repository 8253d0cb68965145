"""FastAPI dependency wiring for the team and membership managers."""
from fastapi import Depends
from sqlmodel import Session
from typing import Annotated
from app.database import get_session
from app.services.auth import get_current_user
from app.services.repository import TeamRepository
from app.services.teams import TeamManager
from app.services.memberships import MembershipManager


user_dependency = Annotated[dict, Depends(get_current_user)]


def get_repository(session: Session = Depends(get_session)) -> TeamRepository:
    return TeamRepository(session)


def get_team_manager(repository: TeamRepository = Depends(get_repository)) -> TeamManager:
    return TeamManager(repository)


def get_membership_manager(repository: TeamRepository = Depends(get_repository)) -> MembershipManager:
    return MembershipManager(repository)
