"""Member repository protocol."""

from __future__ import annotations

from typing import Protocol

from ...models.member import Member


class MemberRepository(Protocol):
    """Read access to known members for identity matching."""

    def list_all(self) -> list[Member]:
        """List all members."""
        ...

    def create(self, member: Member) -> Member:
        """Create a member, storing its email normalized."""
        ...
