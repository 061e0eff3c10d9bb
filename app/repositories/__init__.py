# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Repository package — re-exports both member store backends."""
from app.repositories.member_repository import MemberRepository
from app.repositories.memory_repository import InMemoryMemberRepository

__all__ = ["MemberRepository", "InMemoryMemberRepository"]
