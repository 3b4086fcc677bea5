"""SQLModel implementation of the member repository."""

from __future__ import annotations

from typing import Callable, ContextManager, Optional

from sqlmodel import Session, select

from ...models.member import Member
from ...services.identity import find_by_email, normalize_email

SessionFactory = Callable[[], ContextManager[Session]]


class SQLModelMemberRepository:
    """SQLModel-based member repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def list_all(self) -> list[Member]:
        """List all members ordered by name."""
        with self.session_factory() as session:
            rows = list(session.exec(select(Member).order_by(Member.name)).all())
            session.expunge_all()
            return rows

    def get_by_email(self, email: Optional[str]) -> Optional[Member]:
        return find_by_email(self.list_all(), email)

    def create(self, member: Member) -> Member:
        """Create a member, storing its email normalized."""
        member.email = normalize_email(member.email)
        with self.session_factory() as session:
            session.add(member)
            session.commit()
            session.refresh(member)
            session.expunge(member)
            return member
