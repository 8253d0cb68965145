import os

# Settings are read at import time, point them at a throwaway database first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ALGORITHM"] = "HS256"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["ENABLE_SCHEDULER"] = "false"

import pytest
from types import SimpleNamespace
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from app.config import SECRET_KEY, ALGORITHM
from app.database import get_session
from app.main import app
from app.models import Member, User
from app.services.memberships import MembershipManager
from app.services.repository import TeamRepository
from app.services.teams import TeamManager


def _memory_engine(foreign_keys: bool = False):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    if foreign_keys:
        @event.listens_for(engine, "connect")
        def enable_foreign_keys(dbapi_connection, _):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def engine():
    engine = _memory_engine()
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def fk_engine():
    """Like engine, but SQLite enforces foreign keys as Postgres would."""
    engine = _memory_engine(foreign_keys=True)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine, autoflush=False) as session:
        yield session


@pytest.fixture
def fk_session(fk_engine):
    with Session(fk_engine, autoflush=False) as session:
        yield session


@pytest.fixture
def repository(session):
    return TeamRepository(session)


@pytest.fixture
def team_manager(repository):
    return TeamManager(repository)


@pytest.fixture
def membership_manager(repository):
    return MembershipManager(repository)


@pytest.fixture
def make_user(session):
    def _make_user(name: str) -> User:
        user = User(email=f"{name}@x.com", first_name=name.capitalize(), last_name="Tester")
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def users(make_user):
    return SimpleNamespace(**{
        name: make_user(name)
        for name in ("alice", "bob", "carol", "dave", "erin", "frank")
    })


@pytest.fixture
def team(team_manager, repository, session, users):
    """
    A team owned by alice with carol and dave as admins,
    bob as editor and erin as viewer. frank is not a member.
    """
    new_team = team_manager.create_team("Engineering", "", users.alice.id)
    team_id = new_team.id
    memberships = {"alice": repository.get_membership_for(team_id, users.alice.id).id}
    for name, role in (("carol", "admin"), ("dave", "admin"), ("bob", "editor"), ("erin", "viewer")):
        member = Member(team_id=team_id, user_id=getattr(users, name).id, role=role)
        memberships[name] = member.id
        session.add(member)
    session.commit()
    return SimpleNamespace(id=team_id, members=SimpleNamespace(**memberships))


@pytest.fixture
def client(session):
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_token(user: User) -> str:
    return jwt.encode({"sub": user.id, "email": user.email}, SECRET_KEY, algorithm=ALGORITHM)


@pytest.fixture
def auth():
    def _auth(user: User) -> dict:
        return {"Authorization": f"Bearer {make_token(user)}"}
    return _auth
