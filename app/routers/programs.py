from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.core.database import get_db
from app.core.auth import get_current_user
from app.models.user import User
from app.models.structure import Department, Program
from app.schemas.structure import ProgramCreate, ProgramUpdate, ProgramResponse


router = APIRouter(prefix="/api/programs", tags=["Programs"])


def _get_program_or_404(db: Session, program_id: int) -> Program:
    program = db.query(Program).filter(Program.id == program_id).first()
    if not program:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Program with ID {program_id} not found"
        )
    return program


def _ensure_department_exists(db: Session, department_id: int):
    if not db.query(Department).filter(Department.id == department_id).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Department with ID {department_id} not found"
        )


def _ensure_code_available(db: Session, code: str):
    if db.query(Program).filter(Program.code == code).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Program with code '{code}' already exists"
        )


@router.get("/", response_model=List[ProgramResponse], status_code=status.HTTP_200_OK)
def get_all_programs(
    department_id: Optional[int] = Query(None, description="Filter by department"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    query = db.query(Program)

    if department_id is not None:
        query = query.filter(Program.department_id == department_id)

    programs = query.order_by(Program.name_en).all()
    return [ProgramResponse.model_validate(program) for program in programs]


@router.get("/{program_id}", response_model=ProgramResponse, status_code=status.HTTP_200_OK)
def get_program_by_id(
    program_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return ProgramResponse.model_validate(_get_program_or_404(db, program_id))


@router.post("/", response_model=ProgramResponse, status_code=status.HTTP_201_CREATED)
def create_program(
    program_data: ProgramCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    _ensure_department_exists(db, program_data.department_id)
    _ensure_code_available(db, program_data.code)

    new_program = Program(**program_data.model_dump())
    db.add(new_program)
    db.commit()
    db.refresh(new_program)

    return ProgramResponse.model_validate(new_program)


@router.put("/{program_id}", response_model=ProgramResponse, status_code=status.HTTP_200_OK)
def update_program(
    program_id: int,
    program_data: ProgramUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    program = _get_program_or_404(db, program_id)

    if program_data.department_id is not None and program_data.department_id != program.department_id:
        _ensure_department_exists(db, program_data.department_id)
    if program_data.code and program_data.code != program.code:
        _ensure_code_available(db, program_data.code)

    for field, value in program_data.model_dump(exclude_unset=True).items():
        setattr(program, field, value)

    db.commit()
    db.refresh(program)

    return ProgramResponse.model_validate(program)


@router.delete("/{program_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_program(
    program_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    program = _get_program_or_404(db, program_id)

    try:
        db.delete(program)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Program '{program.code}' is still referenced by persons"
        )

    return None
