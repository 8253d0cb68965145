from datetime import datetime
from typing import Optional, List
from pydantic import EmailStr
from sqlmodel import SQLModel, Field


# Request bodies use the camelCase keys of the web client

class MemberInvite(SQLModel):
    team_id: Optional[str] = Field(default=None, alias="teamId")
    email: Optional[EmailStr] = None
    role: Optional[str] = None




class MemberRoleUpdate(SQLModel):
    member_id: Optional[str] = Field(default=None, alias="memberId")
    role: Optional[str] = None




class MemberDelete(SQLModel):
    member_id: Optional[str] = Field(default=None, alias="memberId")




class MemberRead(SQLModel):
    id: str
    team_id: str
    user_id: str
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None




class MemberPublic(MemberRead):
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None




class MemberResponse(SQLModel):
    member: MemberRead




class MemberList(SQLModel):
    members: List[MemberPublic]
