from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from app.core.database import Base


class IdSequence(Base):
    """
    Counter for generated university IDs, one row per (prefix, year).
    Rows are never deleted so numbers are never reissued.
    """
    __tablename__ = "id_sequences"

    id = Column(Integer, primary_key=True, index=True)
    prefix = Column(String(20), nullable=False)
    year = Column(Integer, nullable=False)
    next_number = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint('prefix', 'year', name='uq_id_sequences_prefix_year'),
    )

    def __repr__(self):
        return f"<IdSequence(prefix='{self.prefix}', year={self.year}, next_number={self.next_number})>"
