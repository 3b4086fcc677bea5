"""Church member records used for donor identity matching."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Member(SQLModel, table=True):
    """A known person; only the fields identity matching needs."""

    __tablename__: ClassVar[str] = "member"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, index=True, max_length=128)
    email: Optional[str] = Field(default=None, index=True, max_length=320)
