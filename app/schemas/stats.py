from pydantic import BaseModel
from typing import List


class CollegeCount(BaseModel):
    name: str
    count: int


class DashboardStatsResponse(BaseModel):
    """Schema for dashboard statistics"""
    total_persons: int
    total_students: int
    total_staff: int
    total_visitors: int
    total_cards: int
    active_cards: int
    expired_cards: int
    total_colleges: int
    total_departments: int
    by_college: List[CollegeCount]
