from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.auth import get_current_user
from app.models.user import User
from app.models.structure import Level
from app.schemas.structure import LevelCreate, LevelResponse


router = APIRouter(prefix="/api/levels", tags=["Levels"])


@router.get("/", response_model=List[LevelResponse], status_code=status.HTTP_200_OK)
def get_all_levels(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get all study levels in their configured order."""
    levels = db.query(Level).order_by(Level.order).all()
    return [LevelResponse.model_validate(level) for level in levels]


@router.post("/", response_model=LevelResponse, status_code=status.HTTP_201_CREATED)
def create_level(
    level_data: LevelCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    new_level = Level(**level_data.model_dump())
    db.add(new_level)
    db.commit()
    db.refresh(new_level)

    return LevelResponse.model_validate(new_level)
