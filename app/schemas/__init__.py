# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Pydantic request/response schemas."""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ── Member views ──

class MemberSummary(BaseModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    spouse_first_name: Optional[str] = None
    spouse_last_name: Optional[str] = None
    city: Optional[str] = None
    native_place: Optional[str] = None


class MemberCategoryView(MemberSummary):
    kovil: Optional[str] = None
    year_since: Optional[str] = None
    email: Optional[str] = None
    spouse_email: Optional[str] = None
    mobile: Optional[str] = None
    spouse_mobile: Optional[str] = None


class MemberDetail(MemberCategoryView):
    photo_link: Optional[str] = None
    user_updated: Optional[datetime] = None


class MemberUpdateResponse(BaseModel):
    message: str
    member: MemberDetail


# ── Requests ──

class MemberUpdate(BaseModel):
    """Partial profile update. Unknown keys, including ``id``, are ignored."""
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    spouse_first_name: Optional[str] = Field(None, max_length=255)
    spouse_last_name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=320)
    spouse_email: Optional[str] = Field(None, max_length=320)
    mobile: Optional[str] = Field(None, max_length=50)
    spouse_mobile: Optional[str] = Field(None, max_length=50)
    city: Optional[str] = Field(None, max_length=255)
    native_place: Optional[str] = Field(None, max_length=255)
    kovil: Optional[str] = Field(None, max_length=255)
    year_since: Optional[str] = Field(None, max_length=20)
    photo_link: Optional[str] = Field(None, max_length=2048)


class PhotoUpdate(BaseModel):
    photo_link: Optional[str] = None


class WhitelistRequest(BaseModel):
    email: Optional[str] = None


class WhitelistResponse(BaseModel):
    isWhitelisted: bool
    message: str


class EmailRequest(BaseModel):
    recipients: Optional[str] = Field(None, description="Comma-separated addresses")
    subject: str = ""
    body: Optional[str] = None


# ── Statistics ──

class GroupCount(BaseModel):
    name: str
    count: int


class Analytics(BaseModel):
    nativeVillage: List[GroupCount]
    cityResidence: List[GroupCount]
    nagaraKovil: List[GroupCount]
    yearMoved: List[GroupCount]


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None


__all__ = [
    "MemberSummary", "MemberCategoryView", "MemberDetail", "MemberUpdateResponse",
    "MemberUpdate", "PhotoUpdate", "WhitelistRequest", "WhitelistResponse",
    "EmailRequest", "GroupCount", "Analytics", "ErrorResponse",
]
