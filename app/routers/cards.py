from typing import List, Optional
from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.core.config import settings
from app.core.database import get_db, is_unique_violation
from app.core.auth import get_current_user
from app.models.user import User
from app.models.card import Card
from app.models.person import Person, PersonType
from app.schemas.card import CardCreate, CardUpdate, CardResponse
from app.schemas.validation import ValidationReport
from app.services.completeness import validate_card_by_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cards", tags=["Cards"])

DUPLICATE_ID_NUMBER = "A card with this ID Number already exists"


def _get_card_or_404(db: Session, card_id: int) -> Card:
    card = db.query(Card).filter(Card.id == card_id).first()
    if not card:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Card with ID {card_id} not found"
        )
    return card


def _ensure_person_exists(db: Session, person_id: Optional[int]):
    if person_id is not None and not db.query(Person).filter(Person.id == person_id).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Person with ID {person_id} not found"
        )


def _write_rejected(error: IntegrityError, duplicate_detail: str) -> HTTPException:
    if is_unique_violation(error):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=duplicate_detail
        )
    logger.error(f"Card write rejected by the database: {error.orig}")
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Card data violates a database constraint"
    )


@router.get("/", response_model=List[CardResponse], status_code=status.HTTP_200_OK)
def get_all_cards(
    search: Optional[str] = Query(None, description="Search by name, ID number or department"),
    type: Optional[PersonType] = Query(None, description="Filter by card type"),
    department: Optional[str] = Query(None, description="Filter by department (case-insensitive)"),
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Get cards, newest first, with optional search and filters.
    """
    query = db.query(Card)

    if search:
        search_term = f"%{search}%"
        query = query.filter(
            (Card.name.ilike(search_term)) |
            (Card.id_number.ilike(search_term)) |
            (Card.department.ilike(search_term))
        )

    if type is not None:
        query = query.filter(Card.type == type)

    if department:
        query = query.filter(Card.department.ilike(department))

    cards = query.order_by(Card.created_at.desc(), Card.id.desc()).offset(skip).limit(limit).all()
    return [CardResponse.model_validate(card) for card in cards]


@router.post("/", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
def create_card(
    card_data: CardCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Create a new card.

    Raises:
        HTTPException: If the ID number already exists or the person is unknown
    """
    if db.query(Card).filter(Card.id_number == card_data.id_number).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=DUPLICATE_ID_NUMBER
        )
    _ensure_person_exists(db, card_data.person_id)

    new_card = Card(**card_data.model_dump())

    try:
        db.add(new_card)
        db.commit()
        db.refresh(new_card)
    except IntegrityError as e:
        db.rollback()
        raise _write_rejected(e, DUPLICATE_ID_NUMBER)

    return CardResponse.model_validate(new_card)


@router.post("/bulk", response_model=List[CardResponse], status_code=status.HTTP_201_CREATED)
def bulk_create_cards(
    cards_data: List[CardCreate],
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Create many cards in a single transaction. Either all rows are stored or none.

    Raises:
        HTTPException: If any ID number is duplicated or any row names an unknown person
    """
    if not cards_data:
        return []

    for person_id in sorted({item.person_id for item in cards_data if item.person_id is not None}):
        _ensure_person_exists(db, person_id)

    new_cards = [Card(**item.model_dump()) for item in cards_data]

    try:
        db.add_all(new_cards)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise _write_rejected(e, "One or more cards have duplicate ID Numbers")

    for card in new_cards:
        db.refresh(card)

    logger.info(f"Bulk imported {len(new_cards)} cards")
    return [CardResponse.model_validate(card) for card in new_cards]


@router.get("/{card_id}", response_model=CardResponse, status_code=status.HTTP_200_OK)
def get_card_by_id(
    card_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return CardResponse.model_validate(_get_card_or_404(db, card_id))


@router.put("/{card_id}", response_model=CardResponse, status_code=status.HTTP_200_OK)
def update_card(
    card_id: int,
    card_data: CardUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Update card information.

    Raises:
        HTTPException: If card not found or the new ID number already exists
    """
    card = _get_card_or_404(db, card_id)

    if card_data.id_number and card_data.id_number != card.id_number:
        if db.query(Card).filter(Card.id_number == card_data.id_number).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=DUPLICATE_ID_NUMBER
            )
    if card_data.person_id is not None and card_data.person_id != card.person_id:
        _ensure_person_exists(db, card_data.person_id)

    for field, value in card_data.model_dump(exclude_unset=True).items():
        setattr(card, field, value)

    try:
        db.commit()
        db.refresh(card)
    except IntegrityError as e:
        db.rollback()
        raise _write_rejected(e, DUPLICATE_ID_NUMBER)

    return CardResponse.model_validate(card)


@router.delete("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_card(
    card_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    card = _get_card_or_404(db, card_id)

    db.delete(card)
    db.commit()

    return None


@router.post("/{card_id}/validate", response_model=ValidationReport, status_code=status.HTTP_200_OK)
def validate_card(
    card_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Check whether a card is complete and unexpired.

    An unknown ID is reported inside the response rather than as a 404.
    """
    return validate_card_by_id(db, card_id)


@router.post("/{card_id}/print", response_model=CardResponse, status_code=status.HTTP_200_OK)
def record_card_print(
    card_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Record that a card was sent to the printer.

    Increments the card's print count and stamps the print time.
    """
    card = _get_card_or_404(db, card_id)

    card.print_count = Card.print_count + 1
    card.last_printed_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(card)

    logger.info(f"Card {card.id_number} printed by '{current_user.username}' (print #{card.print_count})")
    return CardResponse.model_validate(card)
