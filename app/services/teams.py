from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from app.models import Member, Team
from app.utils.time import get_time_stamp
from .repository import TeamRepository
from .errors import (ValidationError, UnauthenticatedError, PermissionDenied, NotFoundError,
                     InternalError, OrphanedTeamError)
from . import policy
import logging

# Logger
logger = logging.getLogger(__name__)


class TeamManager:
    """
    Team creation, update and deletion.

    Creation and deletion each touch two tables and run inside a single
    transaction. A team must never be visible without its owner membership.
    """

    def __init__(self, repository: TeamRepository):
        self.repository = repository

    def create_team(self, name: Optional[str], description: Optional[str], actor_id: str,
                    actor_email: Optional[str] = None) -> Team:
        if not name or not name.strip():
            raise ValidationError("Team name is required")
        if not policy.can_create_team(actor_id):
            raise UnauthenticatedError("Not authenticated")

        new_team = Team(name=name.strip(), description=description or None, owner_id=actor_id)
        team_owner = Member(team_id=new_team.id, user_id=actor_id, role="owner")
        try:
            with self.repository.transaction():
                # The identity provider owns accounts, the users row may not exist yet
                self.repository.ensure_user(actor_id, actor_email)
                self.repository.put_team(new_team)
                self.repository.put_membership(team_owner)
        except SQLAlchemyError:
            logger.exception(f"Error creating team '{name}' for user {actor_id}")
            raise InternalError("Failed to create team")

        self.repository.session.refresh(new_team)
        logger.info(f"User {actor_id} created team {new_team.id}")
        return new_team

    def list_teams(self, actor_id: str) -> List[Team]:
        try:
            return self.repository.list_teams_for_user(actor_id)
        except SQLAlchemyError:
            logger.exception(f"Error fetching teams for user {actor_id}")
            raise InternalError("Failed to fetch teams")

    def update_team(self, team_id: Optional[str], name: Optional[str],
                    description: Optional[str], actor_id: str) -> Team:
        if not team_id or not name or not name.strip():
            raise ValidationError("Team ID and name are required")

        membership = self.repository.get_membership_for(team_id, actor_id)
        if not membership:
            raise PermissionDenied("You do not have permission to update this team")
        if not policy.can_update_team(membership.role):
            raise PermissionDenied("Only team owners and admins can update team details")

        team_to_update = self.repository.get_team(team_id)
        if not team_to_update:
            raise NotFoundError("Team not found")
        try:
            with self.repository.transaction():
                team_to_update.name = name.strip()
                team_to_update.description = description or None
                team_to_update.updated_at = get_time_stamp()
                self.repository.put_team(team_to_update)
        except SQLAlchemyError:
            logger.exception(f"Error updating team {team_id}")
            raise InternalError("Failed to update team")

        self.repository.session.refresh(team_to_update)
        return team_to_update

    def delete_team(self, team_id: Optional[str], actor_id: str) -> None:
        if not team_id:
            raise ValidationError("Team ID is required")

        membership = self.repository.get_membership_for(team_id, actor_id)
        if not membership:
            raise PermissionDenied("You do not have permission to delete this team")
        if not policy.can_delete_team(membership.role):
            raise PermissionDenied("Only team owners can delete teams")

        try:
            with self.repository.transaction():
                # Phase 1: memberships, phase 2: the team row
                removed = self.repository.delete_memberships_for_team(team_id)
                self.repository.delete_team(team_id)
        except SQLAlchemyError:
            self._report_failed_delete(team_id)

        logger.info(f"User {actor_id} deleted team {team_id} and {removed} memberships")

    def _report_failed_delete(self, team_id: str):
        # The transaction was rolled back, check whether the store kept phase 1 anyway
        try:
            orphaned = (self.repository.get_team(team_id) is not None
                        and self.repository.count_members(team_id) == 0)
        except SQLAlchemyError:
            logger.exception(f"Could not verify state of team {team_id} after failed delete")
            orphaned = False

        if orphaned:
            logger.critical(
                f"ORPHANED TEAM {team_id}: memberships deleted but team row remains. "
                f"The orphan sweep will retry the team deletion.",
                exc_info=True,
            )
            raise OrphanedTeamError(team_id)

        logger.error(f"Error deleting team {team_id}, no changes were kept", exc_info=True)
        raise InternalError("Failed to delete team")
