"""Command line entry points for ChurchLedger."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .errors import ChurchLedgerError
from .logging_config import get_logger, setup_logging
from .models.member import Member
from .services.analytics import DateRange, compute_summary
from .services.budgeting import compute_variances
from .services.clock import FixedClock
from .services.donors import build_donor_report
from .services.export_csv import export_transactions_csv
from .services.identity import (
    find_duplicate_groups,
    suggest_matches,
    validate_email_uniqueness,
)
from .services.import_csv import import_csv_text

logger = get_logger(__name__)

pass_ctx = click.make_pass_decorator(AppContext)


def _parse_pairs(pairs: tuple[str, ...], label: str) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected {label}, got {pair!r}")
        parsed[key.strip()] = value.strip()
    return parsed


def _iso_date(_ctx, _param, value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise click.BadParameter("use YYYY-MM-DD") from exc


@click.group()
@click.pass_context
def main(ctx: click.Context) -> None:
    """Ledger analytics and CSV ingestion."""

    config = BaseConfig()
    setup_logging(config)
    ctx.obj = create_app_context(config)


@main.command("import-csv")
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--map", "mappings", multiple=True, help="Override a column: field=Header")
@click.option("--encoding", default="utf-8-sig", show_default=True)
@pass_ctx
def import_csv_command(app: AppContext, csv_path: Path, mappings: tuple[str, ...], encoding: str) -> None:
    """Import transactions from a plain comma-separated file."""

    overrides = _parse_pairs(mappings, "field=Header")
    try:
        result = import_csv_text(
            csv_path.read_text(encoding=encoding),
            income_categories=app.config.INCOME_CATEGORIES,
            expense_categories=app.config.EXPENSE_CATEGORIES,
            mapping_overrides=overrides,
        )
    except ChurchLedgerError as exc:
        raise click.ClickException(str(exc)) from exc

    created = app.ledger.append_many(result.accepted)
    logger.info(
        f"Imported {csv_path.name}",
        extra={"imported": len(created), "failed": result.failed_count},
    )
    click.echo(f"Imported {len(created)} transactions ({result.failed_count} failed)")


@main.command("summary")
@click.option("--start", callback=_iso_date, help="Inclusive start date (YYYY-MM-DD)")
@click.option("--end", callback=_iso_date, help="Inclusive end date (YYYY-MM-DD)")
@pass_ctx
def summary_command(app: AppContext, start: date | None, end: date | None) -> None:
    """Print totals, monthly trends and top categories."""

    date_range = DateRange(start, end) if start and end else None
    summary = compute_summary(
        app.ledger.snapshot(),
        date_range,
        trend_months=app.config.TREND_MONTHS,
        top_limit=app.config.TOP_CATEGORIES,
    )

    click.echo(f"Income:       {summary.total_income:,.2f}")
    click.echo(f"Expenses:     {summary.total_expenses:,.2f}")
    click.echo(f"Net:          {summary.net_income:,.2f}")
    click.echo(f"Transactions: {summary.transaction_count}")
    click.echo(f"Average (net per transaction): {summary.average_transaction:,.2f}")
    for bucket in summary.monthly_trends:
        click.echo(
            f"  {bucket.month}  in {bucket.income:>12,.2f}  out {bucket.expenses:>12,.2f}"
            f"  net {bucket.net:>12,.2f}"
        )
    for share in summary.top_categories:
        click.echo(f"  {share.category:<24} {share.amount:>12,.2f}  {share.percentage:5.1f}%")
    growth = summary.growth_rate
    click.echo(
        f"Growth: income {growth.income:+.1f}%  expenses {growth.expenses:+.1f}%  net {growth.net:+.1f}%"
    )


@main.command("donors")
@click.option("--today", callback=_iso_date, help="Report as of this date (YYYY-MM-DD)")
@pass_ctx
def donors_command(app: AppContext, today: date | None) -> None:
    """Print donor profiles and retention."""

    clock = FixedClock(today) if today else app.clock
    report = build_donor_report(
        app.ledger.snapshot(),
        clock=clock,
        members=app.members.list_all(),
        active_months=app.config.ACTIVE_DONOR_MONTHS,
        trend_months=app.config.TREND_MONTHS,
    )
    stats = report.analytics
    click.echo(
        f"Donors: {stats.total_donors}  active: {stats.active_donors}"
        f"  new this month: {stats.new_donors_this_month}"
    )
    click.echo(f"Total giving: {stats.total_giving:,.2f}  average per donor: {stats.average_gift_size:,.2f}")
    retention = stats.donor_retention
    click.echo(f"Retention: retained {retention.retained}  lapsed {retention.lapsed}  new {retention.new}")
    for profile in stats.top_donors:
        label = "regular" if profile.is_regular else "one-time"
        click.echo(f"  {profile.name:<28} {profile.total_given:>12,.2f}  {label}")


@main.group("budget")
def budget_group() -> None:
    """Monthly budget allocations."""


@budget_group.command("show")
@click.argument("month")
@pass_ctx
def budget_show(app: AppContext, month: str) -> None:
    """Compare MONTH's allocations with actual spend."""

    try:
        allocations = app.budgets.get(month)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    if not allocations:
        click.echo(f"No budget set for {month}")
        return
    for line in compute_variances(
        transactions=app.ledger.snapshot(), allocations=allocations, month=month
    ):
        click.echo(
            f"  {line.category:<24} budget {line.budgeted:>10,.2f}  actual {line.actual:>10,.2f}"
            f"  variance {line.variance:>10,.2f} ({line.variance_percentage:.1f}%)"
            f"  {line.percent_used:.0f}% used  {line.status}"
        )


@budget_group.command("set")
@click.argument("month")
@click.argument("allocations", nargs=-1)
@pass_ctx
def budget_set(app: AppContext, month: str, allocations: tuple[str, ...]) -> None:
    """Replace MONTH's allocations with Category=Amount pairs."""

    try:
        kept = app.budgets.set(month, _parse_pairs(allocations, "Category=Amount"))
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    click.echo(f"Saved {len(kept)} allocations for {month}")


@main.command("export")
@click.argument("output_path", type=click.Path(dir_okay=False, path_type=Path))
@pass_ctx
def export_command(app: AppContext, output_path: Path) -> None:
    """Write every transaction to a CSV file."""

    path = export_transactions_csv(transactions=app.ledger.snapshot(), output_path=output_path)
    click.echo(f"Export written: {path}")


@main.group("members")
def members_group() -> None:
    """Member identity helpers."""


@members_group.command("add")
@click.argument("name")
@click.option("--email", default=None)
@pass_ctx
def members_add(app: AppContext, name: str, email: str | None) -> None:
    """Add a member; an email must be well formed and not already in use."""

    if email is not None:
        check = validate_email_uniqueness(app.members.list_all(), email)
        if not check.is_valid:
            raise click.BadParameter(check.message, param_hint="--email")
    member = app.members.create(Member(name=name, email=email))
    click.echo(f"Added member {member.id}: {member.name}")


@members_group.command("suggest")
@click.option("--email", default=None)
@click.option("--name", default=None)
@pass_ctx
def members_suggest(app: AppContext, email: str | None, name: str | None) -> None:
    """List possible matches for review; nothing is linked."""

    suggestions = suggest_matches(app.members.list_all(), email, name)
    if not suggestions:
        click.echo("No candidates")
    for suggestion in suggestions:
        member = suggestion.member
        click.echo(f"  {member.id}: {member.name} <{member.email or '-'}> [{suggestion.reason} {suggestion.score:.2f}]")


@members_group.command("duplicates")
@pass_ctx
def members_duplicates(app: AppContext) -> None:
    """Show members sharing an email address."""

    groups = find_duplicate_groups(app.members.list_all())
    if not groups:
        click.echo("No duplicate emails")
    for email, members in groups.items():
        click.echo(f"{email}: " + ", ".join(m.name for m in members))


if __name__ == "__main__":  # pragma: no cover
    main()
