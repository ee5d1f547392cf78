"""
Sequential university ID generation.

IDs look like ``ENG-2024-00007``: a prefix chosen from the person type (or the
student's college code), the current calendar year and a counter that is kept
per (prefix, year) in the ``id_sequences`` table.
"""
import logging
import threading
import weakref
from datetime import datetime
from typing import Callable, Optional, Tuple, Union

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.id_sequence import IdSequence
from app.models.person import PersonType

logger = logging.getLogger(__name__)

DEFAULT_STUDENT_PREFIX = "STU"

PREFIX_BY_TYPE = {
    PersonType.STAFF: "EMP",
    PersonType.VISITOR: "VIS",
}

NUMBER_WIDTH = 5


class SequenceAllocationError(Exception):
    """Raised when the counter row cannot be read or written."""


def resolve_prefix(person_type: Union[PersonType, str], college_code: Optional[str] = None) -> str:
    """
    Map a person type to its ID prefix.

    Students use their college code when one is given and fall back to STU.
    Staff and visitors always get EMP and VIS, whatever code is passed.
    """
    person_type = PersonType(person_type)
    if person_type is PersonType.STUDENT:
        code = (college_code or "").strip()
        return code or DEFAULT_STUDENT_PREFIX
    return PREFIX_BY_TYPE[person_type]


def format_identifier(prefix: str, year: int, number: int) -> str:
    # Numbers past 99999 widen the field rather than being truncated
    return f"{prefix}-{year}-{number:0{NUMBER_WIDTH}d}"


class SequenceAllocator:
    """
    Hands out strictly increasing numbers per (prefix, year).

    The counter is advanced with a single ``UPDATE ... SET next_number =
    next_number + 1`` so the database serializes concurrent writers on the row.
    The first allocation for a key inserts the row; if another writer inserts
    it first the unique constraint fails and the allocation is retried. Calls in
    the same process are additionally serialized per key.
    """

    def __init__(
        self,
        max_retries: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.max_retries = settings.id_sequence_max_retries if max_retries is None else max_retries
        self.clock = clock or datetime.now
        # A key's lock is dropped once no caller holds it
        self._locks = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()

    def _lock_for(self, key: Tuple[str, int]) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def _reserve(self, db: Session, prefix: str, year: int) -> int:
        result = db.execute(
            update(IdSequence)
            .where(IdSequence.prefix == prefix, IdSequence.year == year)
            .values(next_number=IdSequence.next_number + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            advanced = db.execute(
                select(IdSequence.next_number).where(
                    IdSequence.prefix == prefix, IdSequence.year == year
                )
            ).scalar_one()
            return advanced - 1

        # First allocation for this key: hand out 1 and leave the cursor on 2
        db.add(IdSequence(prefix=prefix, year=year, next_number=2))
        db.flush()
        return 1

    def next_number(self, db: Session, prefix: str, year: int) -> int:
        """
        Reserve and commit the next number for (prefix, year).

        The reservation is committed on ``db`` before returning, so call this
        before staging other changes on the same session.

        Raises:
            SequenceAllocationError: If the counter cannot be updated
        """
        with self._lock_for((prefix, year)):
            attempts = self.max_retries + 1
            for attempt in range(1, attempts + 1):
                try:
                    number = self._reserve(db, prefix, year)
                    db.commit()
                    return number
                except IntegrityError:
                    db.rollback()
                    logger.warning(
                        f"Sequence row for {prefix}-{year} was created concurrently "
                        f"(attempt {attempt}/{attempts})"
                    )
                except SQLAlchemyError as e:
                    db.rollback()
                    logger.error(f"Failed to allocate number for {prefix}-{year}: {e}")
                    raise SequenceAllocationError(
                        f"Could not allocate a number for {prefix}-{year}"
                    ) from e

        raise SequenceAllocationError(
            f"Could not allocate a number for {prefix}-{year} after {self.max_retries} retries"
        )

    def allocate(
        self,
        db: Session,
        person_type: Union[PersonType, str],
        college_code: Optional[str] = None,
    ) -> str:
        """
        Generate the next university ID for a person type.

        Args:
            db: Database session
            person_type: student, staff or visitor
            college_code: College code, only used for students

        Returns:
            Formatted identifier, e.g. ENG-2024-00001

        Raises:
            SequenceAllocationError: If the counter cannot be updated
        """
        prefix = resolve_prefix(person_type, college_code)
        year = self.clock().year
        number = self.next_number(db, prefix, year)
        identifier = format_identifier(prefix, year, number)
        logger.info(f"Allocated university ID {identifier}")
        return identifier


# Create a singleton instance
id_allocator = SequenceAllocator()
