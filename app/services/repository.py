from contextlib import contextmanager
from typing import List, Optional
from sqlalchemy import delete, update
from sqlmodel import Session, select, and_, func
from app.models import Member, Team, User
from app.utils.time import get_time_stamp


class TeamRepository:
    """
    Persistence access for teams and memberships.

    Reads go straight to the session. Writes are flushed immediately so
    constraint violations surface inside the caller's ``transaction()``
    block, which commits on success and rolls back on any error.
    """

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def transaction(self):
        try:
            yield self.session
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    # Teams

    def get_team(self, team_id: str) -> Optional[Team]:
        return self.session.get(Team, team_id)

    def put_team(self, team: Team) -> Team:
        self.session.add(team)
        self.session.flush()
        return team

    def delete_team(self, team_id: str) -> bool:
        team = self.session.get(Team, team_id)
        if not team:
            return False
        self.session.delete(team)
        self.session.flush()
        return True

    def list_teams_for_user(self, user_id: str) -> List[Team]:
        statement = (
            select(Team)
            .join(Member, Member.team_id == Team.id)
            .where(Member.user_id == user_id)
            .order_by(Team.created_at)
        )
        return list(self.session.exec(statement).all())

    def find_orphaned_teams(self) -> List[Team]:
        has_members = select(Member.id).where(Member.team_id == Team.id).exists()
        statement = select(Team).where(~has_members)
        return list(self.session.exec(statement).all())

    # Memberships

    def get_membership(self, member_id: str) -> Optional[Member]:
        return self.session.get(Member, member_id)

    def get_membership_for(self, team_id: str, user_id: str) -> Optional[Member]:
        statement = select(Member).where(and_(
            Member.team_id == team_id,
            Member.user_id == user_id
        ))
        return self.session.exec(statement).first()

    def put_membership(self, member: Member) -> Member:
        self.session.add(member)
        self.session.flush()
        return member

    def update_membership_role(self, member_id: str, expected_role: str, new_role: str) -> bool:
        # Only writes if the row still holds the role the caller checked
        statement = (
            update(Member)
            .where(and_(Member.id == member_id, Member.role == expected_role))
            .values(role=new_role, updated_at=get_time_stamp())
        )
        result = self.session.execute(statement)
        return result.rowcount > 0

    def delete_membership(self, member_id: str, expected_role: Optional[str] = None) -> bool:
        statement = delete(Member).where(Member.id == member_id)
        if expected_role is not None:
            statement = statement.where(Member.role == expected_role)
        result = self.session.execute(statement)
        return result.rowcount > 0

    def delete_memberships_for_team(self, team_id: str) -> int:
        members = self.session.exec(select(Member).where(Member.team_id == team_id)).all()
        for member in members:
            self.session.delete(member)
        self.session.flush()
        return len(members)

    def list_members(self, team_id: str) -> List[Member]:
        statement = (
            select(Member)
            .where(Member.team_id == team_id)
            .order_by(Member.created_at)
        )
        return list(self.session.exec(statement).all())

    def count_members(self, team_id: str) -> int:
        statement = select(func.count(Member.id)).where(Member.team_id == team_id)
        return self.session.exec(statement).one()

    # Users

    def ensure_user(self, user_id: str, email: Optional[str] = None) -> User:
        user = self.session.get(User, user_id)
        if user:
            return user
        # The address may already belong to another account, keep the row without it
        if email and self.find_user_by_email(email):
            email = None
        user = User(id=user_id, email=email.strip().lower() if email else None)
        self.session.add(user)
        self.session.flush()
        return user

    def find_user_by_email(self, email: str) -> Optional[User]:
        statement = select(User).where(func.lower(User.email) == email.strip().lower())
        return self.session.exec(statement).first()
