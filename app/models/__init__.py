from app.models.user import User
from app.models.structure import College, Department, Program, Level
from app.models.person import Person, PersonType, PersonStatus
from app.models.card import Card, CardStatus
from app.models.id_sequence import IdSequence

__all__ = [
    "User",
    "College",
    "Department",
    "Program",
    "Level",
    "Person",
    "PersonType",
    "PersonStatus",
    "Card",
    "CardStatus",
    "IdSequence",
]
