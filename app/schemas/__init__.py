from app.schemas.user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserLogin,
    UserLoginResponse,
    TokenData,
)
from app.schemas.structure import (
    CollegeCreate,
    CollegeUpdate,
    CollegeResponse,
    DepartmentCreate,
    DepartmentUpdate,
    DepartmentResponse,
    ProgramCreate,
    ProgramUpdate,
    ProgramResponse,
    LevelCreate,
    LevelResponse,
)
from app.schemas.person import (
    PersonCreate,
    PersonBulkItem,
    PersonUpdate,
    PersonResponse,
)
from app.schemas.card import (
    CardCreate,
    CardUpdate,
    CardResponse,
)
from app.schemas.validation import ValidationReport
from app.schemas.id_generation import GenerateIdRequest, GenerateIdResponse
from app.schemas.stats import CollegeCount, DashboardStatsResponse

__all__ = [
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserLogin",
    "UserLoginResponse",
    "TokenData",
    "CollegeCreate",
    "CollegeUpdate",
    "CollegeResponse",
    "DepartmentCreate",
    "DepartmentUpdate",
    "DepartmentResponse",
    "ProgramCreate",
    "ProgramUpdate",
    "ProgramResponse",
    "LevelCreate",
    "LevelResponse",
    "PersonCreate",
    "PersonBulkItem",
    "PersonUpdate",
    "PersonResponse",
    "CardCreate",
    "CardUpdate",
    "CardResponse",
    "ValidationReport",
    "GenerateIdRequest",
    "GenerateIdResponse",
    "CollegeCount",
    "DashboardStatsResponse",
]
