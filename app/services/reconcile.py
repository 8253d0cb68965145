from sqlmodel import Session
from sqlalchemy.exc import SQLAlchemyError
from app.database import engine
from .repository import TeamRepository
import logging

# Logger
logger = logging.getLogger(__name__)


def reconcile_orphaned_teams(repository: TeamRepository) -> int:
    """
    Finish cascading deletes that stopped after the memberships were gone.

    A team without any membership can only come from an interrupted
    delete, so the team row is removed. Returns the number of teams repaired.
    """
    repaired = 0
    for team in repository.find_orphaned_teams():
        team_id = team.id
        try:
            with repository.transaction():
                repository.delete_team(team_id)
        except SQLAlchemyError:
            logger.exception(f"Orphan sweep could not delete team {team_id}")
            continue
        logger.warning(f"Orphan sweep deleted team {team_id} which had no members")
        repaired += 1
    return repaired


def sweep_orphaned_teams():
    with Session(engine, autoflush=False) as session:
        repaired = reconcile_orphaned_teams(TeamRepository(session))
    if repaired:
        logger.info(f"Orphan sweep repaired {repaired} teams")
    return repaired
