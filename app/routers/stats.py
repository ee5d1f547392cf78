from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from sqlalchemy import func

from app.core.database import get_db
from app.core.auth import get_current_user
from app.models.user import User
from app.models.card import Card, CardStatus
from app.models.person import Person, PersonType
from app.models.structure import College, Department
from app.schemas.stats import CollegeCount, DashboardStatsResponse


router = APIRouter(prefix="/api/stats", tags=["Statistics"])


@router.get("/dashboard", response_model=DashboardStatsResponse, status_code=status.HTTP_200_OK)
def get_dashboard_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Get person, card and structure counts for the dashboard.

    Returns:
        Totals plus the number of persons in each college
    """
    by_college = (
        db.query(College.name_en, func.count(Person.id))
        .outerjoin(Person, Person.college_id == College.id)
        .group_by(College.id, College.name_en)
        .order_by(College.name_en)
        .all()
    )

    return DashboardStatsResponse(
        total_persons=db.query(Person).count(),
        total_students=db.query(Person).filter(Person.type == PersonType.STUDENT).count(),
        total_staff=db.query(Person).filter(Person.type == PersonType.STAFF).count(),
        total_visitors=db.query(Person).filter(Person.type == PersonType.VISITOR).count(),
        total_cards=db.query(Card).count(),
        active_cards=db.query(Card).filter(Card.status == CardStatus.ACTIVE).count(),
        expired_cards=db.query(Card).filter(Card.status == CardStatus.EXPIRED).count(),
        total_colleges=db.query(College).count(),
        total_departments=db.query(Department).count(),
        by_college=[CollegeCount(name=name, count=count) for name, count in by_college],
    )
