from datetime import datetime
from typing import Optional, List
from sqlmodel import SQLModel


class TeamCreate(SQLModel):
    name: Optional[str] = None
    description: Optional[str] = None




class TeamUpdate(TeamCreate):
    id: Optional[str] = None




class TeamDelete(SQLModel):
    id: Optional[str] = None




class TeamRead(SQLModel):
    id: str
    name: str
    description: Optional[str] = None
    owner_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None




class TeamResponse(SQLModel):
    team: TeamRead




class TeamList(SQLModel):
    teams: List[TeamRead]




class SuccessResponse(SQLModel):
    success: bool = True
