"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, ContextManager, Optional

from sqlmodel import Session

from .config import BaseConfig
from .domain.repositories import BudgetStore, LedgerStore, MemberRepository
from .infra.database import bootstrap_database
from .infra.repositories import (
    SQLModelBudgetStore,
    SQLModelLedgerStore,
    SQLModelMemberRepository,
)
from .services.clock import Clock, SystemClock


@dataclass
class AppContext:
    """Configuration, stores and the clock, wired once per process."""

    config: BaseConfig
    session_factory: Callable[[], ContextManager[Session]]
    ledger: LedgerStore
    budgets: BudgetStore
    members: MemberRepository
    clock: Clock


def create_app_context(
    config: Optional[BaseConfig] = None, *, clock: Optional[Clock] = None
) -> AppContext:
    """Create the engine, initialize the schema and build the stores."""

    if config is None:
        config = BaseConfig()

    _engine, session_factory = bootstrap_database(config)

    return AppContext(
        config=config,
        session_factory=session_factory,
        ledger=SQLModelLedgerStore(session_factory),
        budgets=SQLModelBudgetStore(session_factory),
        members=SQLModelMemberRepository(session_factory),
        clock=clock or SystemClock(),
    )
