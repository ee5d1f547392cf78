from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime


class CollegeBase(BaseModel):
    name_en: str = Field(..., min_length=1, max_length=255, description="College name in English")
    name_ar: str = Field(..., min_length=1, max_length=255, description="College name in Arabic")
    code: str = Field(..., min_length=1, max_length=20, description="Unique college code, used as student ID prefix")


class CollegeCreate(CollegeBase):
    pass


class CollegeUpdate(BaseModel):
    name_en: Optional[str] = Field(None, min_length=1, max_length=255)
    name_ar: Optional[str] = Field(None, min_length=1, max_length=255)
    code: Optional[str] = Field(None, min_length=1, max_length=20)


class CollegeResponse(CollegeBase):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DepartmentBase(BaseModel):
    college_id: int = Field(..., description="ID of the owning college")
    name_en: str = Field(..., min_length=1, max_length=255)
    name_ar: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=1, max_length=20, description="Unique department code")


class DepartmentCreate(DepartmentBase):
    pass


class DepartmentUpdate(BaseModel):
    college_id: Optional[int] = None
    name_en: Optional[str] = Field(None, min_length=1, max_length=255)
    name_ar: Optional[str] = Field(None, min_length=1, max_length=255)
    code: Optional[str] = Field(None, min_length=1, max_length=20)


class DepartmentResponse(DepartmentBase):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProgramBase(BaseModel):
    department_id: int = Field(..., description="ID of the owning department")
    name_en: str = Field(..., min_length=1, max_length=255)
    name_ar: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=1, max_length=20, description="Unique program code")
    duration_years: Optional[int] = Field(4, ge=1, le=10, description="Program length in years")


class ProgramCreate(ProgramBase):
    pass


class ProgramUpdate(BaseModel):
    department_id: Optional[int] = None
    name_en: Optional[str] = Field(None, min_length=1, max_length=255)
    name_ar: Optional[str] = Field(None, min_length=1, max_length=255)
    code: Optional[str] = Field(None, min_length=1, max_length=20)
    duration_years: Optional[int] = Field(None, ge=1, le=10)


class ProgramResponse(ProgramBase):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LevelCreate(BaseModel):
    name_en: str = Field(..., min_length=1, max_length=255)
    name_ar: str = Field(..., min_length=1, max_length=255)
    order: int = Field(..., ge=0, description="Sort position of the level")


class LevelResponse(LevelCreate):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
