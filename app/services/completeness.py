"""
Completeness checks used to decide whether a person or card is ready to print.

Missing photo, name or ID are errors and make the record incomplete; missing
department or Arabic name are only warnings. A record that cannot be found
still yields a report, with a single "not found" error.
"""
from datetime import datetime, time, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.models.card import Card
from app.models.person import Person
from app.schemas.validation import ValidationReport


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _not_found(message: str) -> ValidationReport:
    return ValidationReport(
        has_photo=False,
        has_name=False,
        has_valid_id=False,
        has_valid_expiry=False,
        has_department=False,
        is_complete=False,
        errors=[message],
        warnings=[],
    )


def _expiry_instant(expiry) -> datetime:
    # A bare date expires at the start of that day (UTC)
    if isinstance(expiry, datetime):
        return expiry if expiry.tzinfo else expiry.replace(tzinfo=timezone.utc)
    return datetime.combine(expiry, time.min, tzinfo=timezone.utc)


def validate_person(person: Optional[Person]) -> ValidationReport:
    if person is None:
        return _not_found("Person not found")

    errors = []
    warnings = []

    has_photo = bool(person.photo_url)
    has_name = not _is_blank(person.full_name_en)
    has_valid_id = not _is_blank(person.university_id)
    has_department = person.department_id is not None

    if not has_photo:
        errors.append("Photo is missing")
    if not has_name:
        errors.append("Name is required")
    if not has_valid_id:
        errors.append("University ID is required")
    if not has_department:
        warnings.append("Department not assigned")
    if not person.full_name_ar:
        warnings.append("Arabic name is missing")

    return ValidationReport(
        has_photo=has_photo,
        has_name=has_name,
        has_valid_id=has_valid_id,
        # Persons have no expiry; only cards do
        has_valid_expiry=True,
        has_department=has_department,
        is_complete=not errors,
        errors=errors,
        warnings=warnings,
    )


def validate_card(card: Optional[Card], now: Optional[datetime] = None) -> ValidationReport:
    """
    Check a card's printable fields and its expiry date.

    Args:
        card: Card to check, or None if the lookup found nothing
        now: Reference time for the expiry check (defaults to the current UTC time)
    """
    if card is None:
        return _not_found("Card not found")

    now = now or datetime.now(timezone.utc)
    errors = []
    warnings = []

    has_photo = bool(card.photo_url)
    has_name = not _is_blank(card.name)
    has_valid_id = not _is_blank(card.id_number)
    has_department = not _is_blank(card.department)
    expired = card.expiry_date is not None and _expiry_instant(card.expiry_date) <= now

    if not has_photo:
        errors.append("Photo is missing")
    if not has_name:
        errors.append("Name is required")
    if not has_valid_id:
        errors.append("ID Number is required")
    if not has_department:
        warnings.append("Department not specified")
    if expired:
        errors.append("Card has expired")

    return ValidationReport(
        has_photo=has_photo,
        has_name=has_name,
        has_valid_id=has_valid_id,
        has_valid_expiry=not expired,
        has_department=has_department,
        is_complete=not errors,
        errors=errors,
        warnings=warnings,
    )


def validate_person_by_id(db: Session, person_id: int) -> ValidationReport:
    return validate_person(db.get(Person, person_id))


def validate_card_by_id(db: Session, card_id: int) -> ValidationReport:
    return validate_card(db.get(Card, card_id))
