"""Tests for environment-driven configuration."""

from __future__ import annotations

from churchledger.config import BaseConfig
from churchledger.constants.categories import EXPENSE_CATEGORIES, INCOME_CATEGORIES


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("CHURCHLEDGER_DATA_DIR", str(tmp_path))
    for name in (
        "CHURCHLEDGER_DATABASE_URL",
        "CHURCHLEDGER_INCOME_CATEGORIES",
        "CHURCHLEDGER_EXPENSE_CATEGORIES",
        "CHURCHLEDGER_TREND_MONTHS",
        "CHURCHLEDGER_TOP_CATEGORIES",
        "CHURCHLEDGER_ACTIVE_DONOR_MONTHS",
    ):
        monkeypatch.delenv(name, raising=False)

    config = BaseConfig()

    assert config.DATA_DIR == tmp_path.resolve()
    assert config.DATABASE_URL == f"sqlite:///{tmp_path.resolve() / 'churchledger.db'}"
    assert config.INCOME_CATEGORIES == INCOME_CATEGORIES
    assert config.EXPENSE_CATEGORIES == EXPENSE_CATEGORIES
    assert (config.TREND_MONTHS, config.TOP_CATEGORIES, config.ACTIVE_DONOR_MONTHS) == (12, 10, 6)
    assert config.sqlalchemy_engine_options() == {"connect_args": {"check_same_thread": False}}


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("CHURCHLEDGER_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("CHURCHLEDGER_DEV_MODE", "off")
    monkeypatch.setenv("CHURCHLEDGER_INCOME_CATEGORIES", " Tithe , Youth Camp ,, ")
    monkeypatch.setenv("CHURCHLEDGER_TREND_MONTHS", "6")
    monkeypatch.setenv("CHURCHLEDGER_TOP_CATEGORIES", "zero")
    monkeypatch.setenv("CHURCHLEDGER_ACTIVE_DONOR_MONTHS", "-3")

    config = BaseConfig()

    assert config.DATA_DIR.is_dir()
    assert config.DEV_MODE is False
    assert config.INCOME_CATEGORIES == ["Tithe", "Youth Camp"]
    assert config.TREND_MONTHS == 6
    # unparseable or non-positive values fall back to defaults
    assert config.TOP_CATEGORIES == 10
    assert config.ACTIVE_DONOR_MONTHS == 6


def test_non_sqlite_url_has_no_connect_args(tmp_path, monkeypatch):
    monkeypatch.setenv("CHURCHLEDGER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("CHURCHLEDGER_DATABASE_URL", "postgresql://ledger@localhost/ledger")

    assert BaseConfig().sqlalchemy_engine_options() == {}
