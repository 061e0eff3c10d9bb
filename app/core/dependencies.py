# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency functions.
The repository, services and email client are built by ``create_app`` and
parked on ``app.state``; these accessors hand them to the controllers.
"""

from fastapi import Request

from app.services.email_client import EmailClient
from app.services.member_service import MemberService
from app.services.stats_service import StatsService


def get_member_repo(request: Request):
    return request.app.state.member_repo


def get_member_service(request: Request) -> MemberService:
    return request.app.state.member_service


def get_stats_service(request: Request) -> StatsService:
    return request.app.state.stats_service


def get_email_client(request: Request) -> EmailClient:
    return request.app.state.email_client
