# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: member search, lookup and profile updates.
Thin HTTP layer — delegates ALL logic to MemberService.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.config import settings
from app.core.dependencies import get_member_service
from app.models.domain import canonical_id
from app.query.pagination import PageRequest
from app.schemas import (
    MemberCategoryView, MemberDetail, MemberSummary, MemberUpdate,
    MemberUpdateResponse, PhotoUpdate,
)
from app.services.member_service import MemberService

router = APIRouter(tags=["Members"])


def _member_id(member_id: str) -> str:
    try:
        return canonical_id(member_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid ID format")


@router.get("/members", response_model=List[MemberSummary])
def search_members(
    search: str = "",
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    service: MemberService = Depends(get_member_service),
):
    """Members whose names, city or native village contain ``search``."""
    return service.search_members(search, PageRequest(page=page, limit=limit))


@router.get("/members/by-category", response_model=List[MemberCategoryView])
def list_members_by_category(
    category: Optional[str] = None,
    value: Optional[str] = None,
    search: str = "",
    service: MemberService = Depends(get_member_service),
):
    """Members pinned to one category value, optionally narrowed by name."""
    try:
        return service.list_by_category(category, value, search)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/members/by-email/{email}", response_model=MemberDetail)
def get_member_by_email(email: str,
                        service: MemberService = Depends(get_member_service)):
    try:
        return service.get_by_email(email)
    except KeyError:
        raise HTTPException(status_code=404, detail="Member not found")


@router.get("/members/get/{member_id}", response_model=MemberDetail)
def get_member(member_id: str,
               service: MemberService = Depends(get_member_service)):
    member_id = _member_id(member_id)
    try:
        return service.get_member(member_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Not found")


@router.put("/members/{member_id}", response_model=MemberUpdateResponse)
def update_member(member_id: str, body: MemberUpdate,
                  service: MemberService = Depends(get_member_service)):
    member_id = _member_id(member_id)
    try:
        member = service.update_member(member_id, body.model_dump(exclude_unset=True))
    except KeyError:
        raise HTTPException(status_code=404, detail="Member not found")
    return {"message": "Profile updated successfully", "member": member}


@router.put("/members/{member_id}/photo", response_model=MemberUpdateResponse)
def update_member_photo(member_id: str, body: PhotoUpdate,
                        service: MemberService = Depends(get_member_service)):
    member_id = _member_id(member_id)
    try:
        member = service.update_photo(member_id, body.photo_link)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except KeyError:
        raise HTTPException(status_code=404, detail="Member not found")
    return {"message": "Photo updated successfully", "member": member}
