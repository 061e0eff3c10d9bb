# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: roster statistics — combined dashboard and per-category tables."""
from typing import List

from fastapi import APIRouter, Depends

from app.core.dependencies import get_stats_service
from app.models.domain import Category
from app.schemas import Analytics, GroupCount
from app.services.stats_service import StatsService

router = APIRouter(tags=["Statistics"])


@router.get("/analytics", response_model=Analytics)
def get_analytics(service: StatsService = Depends(get_stats_service)):
    return service.analytics()


@router.get("/stats/native-village", response_model=List[GroupCount])
def native_village_stats(service: StatsService = Depends(get_stats_service)):
    return service.category_stats(Category.NATIVE_VILLAGE)


@router.get("/stats/city", response_model=List[GroupCount])
def city_stats(service: StatsService = Depends(get_stats_service)):
    return service.category_stats(Category.CITY_RESIDENCE)


@router.get("/stats/kovil", response_model=List[GroupCount])
def kovil_stats(service: StatsService = Depends(get_stats_service)):
    return service.category_stats(Category.NAGARA_KOVIL)


@router.get("/stats/year", response_model=List[GroupCount])
def year_stats(service: StatsService = Depends(get_stats_service)):
    return service.category_stats(Category.YEAR_MOVED)
