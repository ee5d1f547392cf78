from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.core.database import get_db
from app.core.auth import get_current_user
from app.models.user import User
from app.models.structure import College, Department
from app.schemas.structure import DepartmentCreate, DepartmentUpdate, DepartmentResponse


router = APIRouter(prefix="/api/departments", tags=["Departments"])


def _get_department_or_404(db: Session, department_id: int) -> Department:
    department = db.query(Department).filter(Department.id == department_id).first()
    if not department:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Department with ID {department_id} not found"
        )
    return department


def _ensure_college_exists(db: Session, college_id: int):
    if not db.query(College).filter(College.id == college_id).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"College with ID {college_id} not found"
        )


def _ensure_code_available(db: Session, code: str):
    if db.query(Department).filter(Department.code == code).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Department with code '{code}' already exists"
        )


@router.get("/", response_model=List[DepartmentResponse], status_code=status.HTTP_200_OK)
def get_all_departments(
    college_id: Optional[int] = Query(None, description="Filter by college"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get departments ordered by English name, optionally for one college."""
    query = db.query(Department)

    if college_id is not None:
        query = query.filter(Department.college_id == college_id)

    departments = query.order_by(Department.name_en).all()
    return [DepartmentResponse.model_validate(department) for department in departments]


@router.get("/{department_id}", response_model=DepartmentResponse, status_code=status.HTTP_200_OK)
def get_department_by_id(
    department_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return DepartmentResponse.model_validate(_get_department_or_404(db, department_id))


@router.post("/", response_model=DepartmentResponse, status_code=status.HTTP_201_CREATED)
def create_department(
    department_data: DepartmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Create a new department under an existing college.

    Raises:
        HTTPException: If the college does not exist or the code is taken
    """
    _ensure_college_exists(db, department_data.college_id)
    _ensure_code_available(db, department_data.code)

    new_department = Department(**department_data.model_dump())
    db.add(new_department)
    db.commit()
    db.refresh(new_department)

    return DepartmentResponse.model_validate(new_department)


@router.put("/{department_id}", response_model=DepartmentResponse, status_code=status.HTTP_200_OK)
def update_department(
    department_id: int,
    department_data: DepartmentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    department = _get_department_or_404(db, department_id)

    if department_data.college_id is not None and department_data.college_id != department.college_id:
        _ensure_college_exists(db, department_data.college_id)
    if department_data.code and department_data.code != department.code:
        _ensure_code_available(db, department_data.code)

    for field, value in department_data.model_dump(exclude_unset=True).items():
        setattr(department, field, value)

    db.commit()
    db.refresh(department)

    return DepartmentResponse.model_validate(department)


@router.delete("/{department_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_department(
    department_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    department = _get_department_or_404(db, department_id)

    try:
        db.delete(department)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Department '{department.code}' is still referenced by programs or persons"
        )

    return None
