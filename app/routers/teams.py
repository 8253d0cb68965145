from fastapi import APIRouter, Depends, status
from app.schemas.teams import (TeamCreate, TeamUpdate, TeamDelete, TeamRead,
                               TeamResponse, TeamList, SuccessResponse)
from app.services.teams import TeamManager
from ..dependencies import user_dependency, get_team_manager


router = APIRouter(prefix="/teams", tags=["Teams"])
team_manager = Depends(get_team_manager)


@router.get("", response_model=TeamList)
async def list_teams(current_user: user_dependency, manager: TeamManager = team_manager):
    teams = manager.list_teams(current_user.get("id"))
    return TeamList(teams=[TeamRead.model_validate(team) for team in teams])


@router.post("", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
async def create_team(current_user: user_dependency, team: TeamCreate,
                      manager: TeamManager = team_manager):
    new_team = manager.create_team(team.name, team.description,
                                   current_user.get("id"), current_user.get("email"))
    return TeamResponse(team=TeamRead.model_validate(new_team))


@router.put("", response_model=TeamResponse)
async def update_team(current_user: user_dependency, team: TeamUpdate,
                      manager: TeamManager = team_manager):
    updated_team = manager.update_team(team.id, team.name, team.description, current_user.get("id"))
    return TeamResponse(team=TeamRead.model_validate(updated_team))


@router.delete("", response_model=SuccessResponse)
async def delete_team(current_user: user_dependency, team: TeamDelete,
                      manager: TeamManager = team_manager):
    manager.delete_team(team.id, current_user.get("id"))
    return SuccessResponse(success=True)
