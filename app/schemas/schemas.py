"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.

Documents are stored with snake_case keys; the API speaks camelCase
(and "_id" for identifiers), which is what the frontend expects.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Union
from datetime import datetime
from enum import Enum


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    recruiter = "recruiter"


class ApplicationStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


# ============================================================
# USER SCHEMAS
# ============================================================

_email_adapter = TypeAdapter(EmailStr)


def normalize_email(value: str) -> str:
    """Validate an address the way LoginRequest does and return the stored form."""
    return _email_adapter.validate_python(value)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: UserRole


class ProfileOut(CamelModel):
    bio: Optional[str] = None
    skills: List[str] = []
    resume: Optional[str] = None
    resume_original_name: Optional[str] = None
    company: Optional[str] = None
    profile_photo: Optional[str] = None


class UserSummary(CamelModel):
    id: str = Field(alias="_id")
    fullname: str
    email: str
    role: UserRole


class UserOut(UserSummary):
    phone_number: Optional[str] = None
    profile: ProfileOut = ProfileOut()


class RegisterResponse(MessageResponse):
    user: UserSummary


class UserResponse(MessageResponse):
    user: UserOut


# ============================================================
# COMPANY SCHEMAS
# ============================================================

class CompanyRegisterRequest(CamelModel):
    # Presence checked by the handler to keep its own message
    company_name: Optional[str] = None


class CompanyOut(CamelModel):
    id: str = Field(alias="_id")
    name: str
    description: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    logo: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CompanyResponse(MessageResponse):
    company: CompanyOut


class CompanyListResponse(MessageResponse):
    companies: List[CompanyOut]


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    requirements: List[str] = Field(..., min_length=1)
    salary: float
    location: str = Field(..., min_length=1)
    job_type: str = Field(..., min_length=1)
    experience: float
    position: int = Field(..., ge=1)
    company_id: str = Field(..., min_length=1)

    @field_validator("requirements", mode="before")
    @classmethod
    def split_requirements(cls, value):
        """Accept "a, b,c" as well as a list; keep order, drop blanks."""
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, list):
            return [str(item).strip() for item in value if str(item).strip()]
        return value


class ApplicantOut(CamelModel):
    id: str = Field(alias="_id")
    fullname: str
    email: str
    phone_number: Optional[str] = None
    profile: ProfileOut = ProfileOut()


class ApplicationOut(CamelModel):
    id: str = Field(alias="_id")
    job: Union["JobOut", str]
    applicant: Union[ApplicantOut, str]
    status: ApplicationStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class JobOut(CamelModel):
    id: str = Field(alias="_id")
    title: str
    description: str
    requirements: List[str] = []
    salary: float
    location: str
    job_type: str
    experience_level: float
    position: int
    company: Union[CompanyOut, str]
    created_by: Optional[str] = None
    applications: List[Union[ApplicationOut, str]] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


ApplicationOut.model_rebuild()
JobOut.model_rebuild()


class JobResponse(MessageResponse):
    job: JobOut


class JobListResponse(MessageResponse):
    jobs: List[JobOut]


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationStatusUpdate(BaseModel):
    # Presence checked by the handler; value is lowercased before validation
    status: Optional[str] = None


class ApplicationResponse(MessageResponse):
    application: ApplicationOut


class ApplicationListResponse(MessageResponse):
    applications: List[ApplicationOut]
