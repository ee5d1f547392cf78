from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.core.database import get_db
from app.core.auth import get_current_user
from app.models.user import User
from app.models.structure import College
from app.schemas.structure import CollegeCreate, CollegeUpdate, CollegeResponse


router = APIRouter(prefix="/api/colleges", tags=["Colleges"])


def _get_college_or_404(db: Session, college_id: int) -> College:
    college = db.query(College).filter(College.id == college_id).first()
    if not college:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"College with ID {college_id} not found"
        )
    return college


def _ensure_code_available(db: Session, code: str):
    if db.query(College).filter(College.code == code).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"College with code '{code}' already exists"
        )


@router.get("/", response_model=List[CollegeResponse], status_code=status.HTTP_200_OK)
def get_all_colleges(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get all colleges ordered by English name."""
    colleges = db.query(College).order_by(College.name_en).all()
    return [CollegeResponse.model_validate(college) for college in colleges]


@router.get("/{college_id}", response_model=CollegeResponse, status_code=status.HTTP_200_OK)
def get_college_by_id(
    college_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return CollegeResponse.model_validate(_get_college_or_404(db, college_id))


@router.post("/", response_model=CollegeResponse, status_code=status.HTTP_201_CREATED)
def create_college(
    college_data: CollegeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Create a new college.

    Raises:
        HTTPException: If the college code already exists
    """
    _ensure_code_available(db, college_data.code)

    new_college = College(**college_data.model_dump())
    db.add(new_college)
    db.commit()
    db.refresh(new_college)

    return CollegeResponse.model_validate(new_college)


@router.put("/{college_id}", response_model=CollegeResponse, status_code=status.HTTP_200_OK)
def update_college(
    college_id: int,
    college_data: CollegeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    college = _get_college_or_404(db, college_id)

    if college_data.code and college_data.code != college.code:
        _ensure_code_available(db, college_data.code)

    for field, value in college_data.model_dump(exclude_unset=True).items():
        setattr(college, field, value)

    db.commit()
    db.refresh(college)

    return CollegeResponse.model_validate(college)


@router.delete("/{college_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_college(
    college_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Delete a college.

    Raises:
        HTTPException: If college not found or still referenced by departments or persons
    """
    college = _get_college_or_404(db, college_id)

    try:
        db.delete(college)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"College '{college.code}' is still referenced by departments or persons"
        )

    return None
