import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.auth import get_current_user
from app.models.user import User
from app.schemas.id_generation import GenerateIdRequest, GenerateIdResponse
from app.services.id_generator import id_allocator, SequenceAllocationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/generate-id", tags=["ID Generation"])


@router.post("", response_model=GenerateIdResponse, status_code=status.HTTP_200_OK)
def generate_university_id(
    request: GenerateIdRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Reserve the next university ID for a person type.

    Students are numbered per college code (STU when no code is given), staff
    under EMP and visitors under VIS. Each call consumes a number, so the ID
    should be used for the person being created.

    Raises:
        HTTPException: If the sequence cannot be updated
    """
    try:
        university_id = id_allocator.allocate(db, request.type, request.college_code)
    except SequenceAllocationError as e:
        logger.error(f"University ID generation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate ID"
        )

    return GenerateIdResponse(university_id=university_id)
