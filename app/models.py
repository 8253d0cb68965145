from datetime import datetime
from sqlalchemy import (UniqueConstraint, CheckConstraint,
                        Column, String, ForeignKey, event)
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List
from uuid import uuid4
from .utils.time import get_time_stamp


class User(SQLModel, table=True):
    __tablename__ = 'users'
    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    email: Optional[str] = Field(default=None, unique=True, index=True, max_length=255)
    first_name: Optional[str] = Field(default=None, max_length=255)
    last_name: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=get_time_stamp)
    updated_at: datetime = Field(default_factory=get_time_stamp)

    # Relationships
    teams: List["Member"] = Relationship(back_populates='user', passive_deletes=True)




class Team(SQLModel, table=True):
    __tablename__ = 'teams'
    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    name: str = Field(max_length=255,
                      index=True,
                      sa_column_kwargs={"nullable": False})
    description: Optional[str] = Field(default=None)
    owner_id: str = Field(
        sa_column=Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    )
    created_at: datetime = Field(default_factory=get_time_stamp)
    updated_at: datetime = Field(default_factory=get_time_stamp)

    # Relationships
    members: List["Member"] = Relationship(back_populates='team', passive_deletes=True)




class Member(SQLModel, table=True):
    __tablename__ = 'members'
    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    team_id: str = Field(
        sa_column=Column(String(36), ForeignKey("teams.id", ondelete="CASCADE"),
                         nullable=False, index=True)
    )
    user_id: str = Field(
        sa_column=Column(String(36), ForeignKey("users.id", ondelete="CASCADE"),
                         nullable=False, index=True)
    )

    role: str = Field(
        default="editor",
        max_length=50,
        sa_column=Column(
            String(50),
            CheckConstraint("role IN ('owner', 'admin', 'editor', 'member', 'viewer')",
                            name="member_role_check"),
            nullable=False,
        )
    )
    created_at: datetime = Field(default_factory=get_time_stamp)
    updated_at: datetime = Field(default_factory=get_time_stamp)

    # A user holds at most one membership per team
    __table_args__ = (
        UniqueConstraint("team_id", "user_id", name="unique_team_user"),
    )

    # Relationships
    user: Optional["User"] = Relationship(back_populates='teams')
    team: Optional["Team"] = Relationship(back_populates='members')




@event.listens_for(SQLModel, "before_update", propagate=True)
def auto_update_timestamp(_, __, target):
    if hasattr(target, "updated_at"):
        target.updated_at = get_time_stamp()
