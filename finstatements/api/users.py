"""User and team management endpoints (admin only)."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from finstatements.database import get_db
from finstatements.dependencies import require_admin
from finstatements.logging_config import get_logger
from finstatements.models.user import TeamModel, UserModel
from finstatements.repositories.user_repo import TeamRepository, UserRepository
from finstatements.schemas.user import Team, TeamCreate, User, UserCreate, UserUpdate

logger = get_logger(__name__)
router = APIRouter()


def _user_out(user: UserModel) -> User:
    out = User.model_validate(user)
    out.team_name = user.team.name if user.team else None
    return out


def _check_team(db: Session, team_id) -> None:
    if team_id is not None and not TeamRepository(db).exists(team_id):
        raise HTTPException(status_code=404, detail=f"Team {team_id} not found")


# ── teams ────────────────────────────────────────────────────────────

@router.get("/teams", response_model=List[Team])
def list_teams(
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
) -> List[Team]:
    return [Team.model_validate(t) for t in TeamRepository(db).list_by_name()]


@router.post("/teams", response_model=Team, status_code=201)
def create_team(
    body: TeamCreate,
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
) -> Team:
    team = TeamRepository(db).create(TeamModel(name=body.name, description=body.description))
    db.commit()
    logger.info("team_created", team_id=team.id, admin_id=admin.id)
    return Team.model_validate(team)


# ── users ────────────────────────────────────────────────────────────

@router.get("/", response_model=List[User])
def list_users(
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
) -> List[User]:
    """All users, newest first, with their team names."""
    return [_user_out(u) for u in UserRepository(db).list_with_teams()]


@router.post("/", response_model=User, status_code=201)
def create_user(
    body: UserCreate,
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
) -> User:
    repo = UserRepository(db)
    if repo.get_by_email(body.email) is not None:
        raise HTTPException(status_code=409, detail=f"User {body.email} already exists")
    _check_team(db, body.team_id)

    user = repo.create(UserModel(email=body.email, role=body.role.value, team_id=body.team_id))
    db.commit()
    logger.info("user_created", user_id=user.id, role=user.role, admin_id=admin.id)
    return _user_out(user)


@router.put("/{user_id}", response_model=User)
def update_user(
    user_id: int,
    body: UserUpdate,
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
) -> User:
    """Change a user's role and team."""
    repo = UserRepository(db)
    user = repo.get(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    _check_team(db, body.team_id)

    user.role = body.role.value
    user.team_id = body.team_id
    repo.update(user)
    db.commit()
    db.refresh(user)
    logger.info("user_updated", user_id=user_id, role=user.role, admin_id=admin.id)
    return _user_out(user)


@router.delete("/{user_id}", status_code=204)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
) -> Response:
    if user_id == admin.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    repo = UserRepository(db)
    if repo.get(user_id) is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    if repo.has_authored_records(user_id):
        raise HTTPException(
            status_code=409,
            detail=f"User {user_id} still owns statements or reports",
        )

    repo.delete(user_id)
    db.commit()
    logger.info("user_deleted", user_id=user_id, admin_id=admin.id)
    return Response(status_code=204)
