from typing import List, Optional
from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends, HTTPException, status, Query, UploadFile, File
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.core.config import settings
from app.core.database import get_db, is_unique_violation
from app.core.auth import get_current_user
from app.models.user import User
from app.models.person import Person, PersonType, PersonStatus
from app.models.structure import College, Department, Program, Level
from app.schemas.person import (
    PersonCreate,
    PersonBulkItem,
    PersonUpdate,
    PersonResponse,
)
from app.schemas.validation import ValidationReport
from app.services.completeness import validate_person_by_id
from app.services.id_generator import id_allocator, SequenceAllocationError
from app.services.s3_service import s3_service, PhotoUploadError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/persons", tags=["Persons"])

DUPLICATE_UNIVERSITY_ID = "A person with this University ID already exists"

# Organizational links a person may carry, checked before any write
REFERENCES = {
    "college_id": (College, "College"),
    "department_id": (Department, "Department"),
    "program_id": (Program, "Program"),
    "level_id": (Level, "Level"),
}


def _get_person_or_404(db: Session, person_id: int) -> Person:
    person = db.query(Person).filter(Person.id == person_id).first()
    if not person:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Person with ID {person_id} not found"
        )
    return person


def _ensure_university_id_available(db: Session, university_id: str):
    if db.query(Person).filter(Person.university_id == university_id).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=DUPLICATE_UNIVERSITY_ID
        )


def _ensure_references_exist(db: Session, values: dict):
    for field, (model, label) in REFERENCES.items():
        reference_id = values.get(field)
        if reference_id is not None and db.get(model, reference_id) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{label} with ID {reference_id} not found"
            )


def _write_rejected(error: IntegrityError, duplicate_detail: str) -> HTTPException:
    if is_unique_violation(error):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=duplicate_detail
        )
    logger.error(f"Person write rejected by the database: {error.orig}")
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Person data violates a database constraint"
    )


def _generate_university_id(db: Session, person_data: PersonCreate) -> str:
    """Allocate an ID for a new person, using the college code as prefix for students."""
    college_code = None
    if person_data.type == PersonType.STUDENT and person_data.college_id is not None:
        college_code = db.get(College, person_data.college_id).code

    try:
        return id_allocator.allocate(db, person_data.type, college_code)
    except SequenceAllocationError as e:
        logger.error(f"University ID generation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate University ID"
        )

@router.get("/", response_model=List[PersonResponse], status_code=status.HTTP_200_OK)
def get_all_persons(
    search: Optional[str] = Query(None, description="Search by name, University ID or email"),
    type: Optional[PersonType] = Query(None, description="Filter by person type"),
    status_filter: Optional[PersonStatus] = Query(None, alias="status", description="Filter by status"),
    college_id: Optional[int] = Query(None, description="Filter by college"),
    department_id: Optional[int] = Query(None, description="Filter by department"),
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Get persons, newest first, with optional search and filters.

    Args:
        search: Case-insensitive match on English/Arabic name, University ID or email
        type: Optional filter by person type
        status_filter: Optional filter by status
        college_id: Optional filter by college
        department_id: Optional filter by department
        skip: Number of records to skip
        limit: Maximum number of records to return
        db: Database session
        current_user: Current authenticated user

    Returns:
        List of persons
    """
    query = db.query(Person)

    if search:
        search_term = f"%{search}%"
        query = query.filter(
            (Person.full_name_en.ilike(search_term)) |
            (Person.full_name_ar.ilike(search_term)) |
            (Person.university_id.ilike(search_term)) |
            (Person.email.ilike(search_term))
        )

    if type is not None:
        query = query.filter(Person.type == type)

    if status_filter is not None:
        query = query.filter(Person.status == status_filter)

    if college_id is not None:
        query = query.filter(Person.college_id == college_id)

    if department_id is not None:
        query = query.filter(Person.department_id == department_id)

    persons = query.order_by(Person.created_at.desc(), Person.id.desc()).offset(skip).limit(limit).all()
    return [PersonResponse.model_validate(person) for person in persons]


@router.post("/", response_model=PersonResponse, status_code=status.HTTP_201_CREATED)
def create_person(
    person_data: PersonCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Create a new person.

    When no University ID is supplied one is generated from the person type
    (and the college code for students).

    Raises:
        HTTPException: If the University ID already exists, a referenced
            college/department/program/level is unknown or ID generation fails
    """
    _ensure_references_exist(db, person_data.model_dump())

    university_id = (person_data.university_id or "").strip()
    if university_id:
        _ensure_university_id_available(db, university_id)
    else:
        university_id = _generate_university_id(db, person_data)

    new_person = Person(
        university_id=university_id,
        **person_data.model_dump(exclude={"university_id"})
    )

    try:
        db.add(new_person)
        db.commit()
        db.refresh(new_person)
    except IntegrityError as e:
        db.rollback()
        raise _write_rejected(e, DUPLICATE_UNIVERSITY_ID)

    logger.info(f"Person {new_person.university_id} created by '{current_user.username}'")
    return PersonResponse.model_validate(new_person)


@router.post("/bulk", response_model=List[PersonResponse], status_code=status.HTTP_201_CREATED)
def bulk_create_persons(
    persons_data: List[PersonBulkItem],
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Create many persons in a single transaction. Either all rows are stored or none.

    Raises:
        HTTPException: If any University ID is duplicated or any row
            references an unknown college/department/program/level
    """
    if not persons_data:
        return []

    rows = [item.model_dump() for item in persons_data]
    for row in rows:
        _ensure_references_exist(db, row)

    new_persons = [Person(**row) for row in rows]

    try:
        db.add_all(new_persons)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise _write_rejected(e, "One or more persons have duplicate University IDs")

    for person in new_persons:
        db.refresh(person)

    logger.info(f"Bulk imported {len(new_persons)} persons")
    return [PersonResponse.model_validate(person) for person in new_persons]


@router.get("/{person_id}", response_model=PersonResponse, status_code=status.HTTP_200_OK)
def get_person_by_id(
    person_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return PersonResponse.model_validate(_get_person_or_404(db, person_id))


@router.put("/{person_id}", response_model=PersonResponse, status_code=status.HTTP_200_OK)
def update_person(
    person_id: int,
    person_data: PersonUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Partially update a person.

    Raises:
        HTTPException: If person not found, the new University ID is taken
            or a referenced college/department/program/level is unknown
    """
    person = _get_person_or_404(db, person_id)

    if person_data.university_id and person_data.university_id != person.university_id:
        _ensure_university_id_available(db, person_data.university_id)

    update_data = person_data.model_dump(exclude_unset=True)
    _ensure_references_exist(db, update_data)

    for field, value in update_data.items():
        setattr(person, field, value)
    person.updated_at = datetime.now(timezone.utc)

    try:
        db.commit()
        db.refresh(person)
    except IntegrityError as e:
        db.rollback()
        raise _write_rejected(e, DUPLICATE_UNIVERSITY_ID)

    return PersonResponse.model_validate(person)


@router.delete("/{person_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_person(
    person_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Delete a person together with the cards issued to them.

    Raises:
        HTTPException: If person not found
    """
    person = _get_person_or_404(db, person_id)

    db.delete(person)
    db.commit()

    logger.info(f"Person {person.university_id} deleted by '{current_user.username}'")
    return None


@router.post("/{person_id}/validate", response_model=ValidationReport, status_code=status.HTTP_200_OK)
def validate_person(
    person_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Check whether a person has everything needed to print a card.

    An unknown ID is reported inside the response rather than as a 404.
    """
    return validate_person_by_id(db, person_id)


@router.post("/{person_id}/photo", response_model=PersonResponse, status_code=status.HTTP_200_OK)
def upload_person_photo(
    person_id: int,
    photo: UploadFile = File(..., description="Person photo (JPEG, PNG or WebP)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Upload a person's photo to S3 and store its URL on the person.

    Raises:
        HTTPException: If person not found, the file is not a supported image,
            or the upload fails
    """
    person = _get_person_or_404(db, person_id)

    content_type = photo.content_type or ""
    if not s3_service.is_supported(content_type):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported image type '{content_type}'"
        )

    file_content = photo.file.read()
    if not file_content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded photo is empty"
        )
    if len(file_content) > settings.max_photo_size:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Photo exceeds the maximum size of {settings.max_photo_size} bytes"
        )

    try:
        photo_url = s3_service.upload_person_photo(file_content, person.university_id, content_type)
    except PhotoUploadError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e)
        )

    person.photo_url = photo_url
    person.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(person)

    return PersonResponse.model_validate(person)
