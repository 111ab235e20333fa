"""Command-line interface for FinTrack."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Optional

import click

from . import controllers
from .constants.categories import CATEGORY_NAMES, CATEGORY_REGISTRY
from .errors import FinTrackError, ReceiptExtractionError, TransactionValidationError
from .models.transaction import Transaction
from .services.budgeting import VarianceStatus
from .services.reports import export_spending_png

_STATUS_MARKERS = {
    VarianceStatus.OVER: "▲",
    VarianceStatus.UNDER: "▼",
    VarianceStatus.ON_BUDGET: "=",
}


def _format_amount(value: float) -> str:
    return f"{value:,.2f}"


def _format_transaction(tx: Transaction) -> str:
    info = CATEGORY_REGISTRY[tx.category]
    sign = "+" if tx.is_income else "-"
    return (
        f"{tx.id}  {tx.date.isoformat()}  {info.icon} {tx.description:<24} "
        f"{tx.category.value:<20} {sign}${_format_amount(tx.amount)}"
    )


def _context(click_ctx: click.Context):
    """Lazily build the app context so --help never touches the database."""

    if click_ctx.obj is None:
        from .config import BaseConfig
        from .context import create_app_context
        from .logging_config import setup_logging

        config = BaseConfig()
        setup_logging(config)
        click_ctx.obj = create_app_context(config)
        click_ctx.call_on_close(click_ctx.obj.close)
    return click_ctx.obj


@click.group()
@click.pass_context
def cli(click_ctx: click.Context) -> None:
    """Personal finance tracker: transactions, budgets and insights."""


@cli.command()
@click.pass_context
def summary(click_ctx: click.Context) -> None:
    """Show balance, income, expense and the latest entries."""

    ctx = _context(click_ctx)
    dashboard = controllers.dashboard_summary(ctx)
    totals = dashboard.totals
    click.echo(f"Saldo Total: ${_format_amount(totals.balance)}")
    click.echo(f"Renda:  +${_format_amount(totals.income)}")
    click.echo(f"Gastos: -${_format_amount(totals.expense)}")
    click.echo("")
    click.echo("Últimos Lançamentos")
    if not dashboard.recent:
        click.echo("  (none)")
    for tx in dashboard.recent:
        click.echo(f"  {_format_transaction(tx)}")


@cli.command()
@click.pass_context
def history(click_ctx: click.Context) -> None:
    """List every transaction, most recent first."""

    ctx = _context(click_ctx)
    snapshot = controllers.transaction_history(ctx)
    if not snapshot:
        click.echo("No transactions recorded.")
        return
    for tx in snapshot:
        click.echo(_format_transaction(tx))


@cli.command()
@click.option("--amount", required=True, help="Non-negative amount")
@click.option(
    "--type", "txn_type",
    type=click.Choice(["expense", "income"]), default="expense", show_default=True,
)
@click.option("--category", type=click.Choice(CATEGORY_NAMES), default="Outros", show_default=True)
@click.option("--description", default="", help="Defaults to the category name")
@click.option("--date", "occurred_on", default="", help="YYYY-MM-DD, defaults to today")
@click.pass_context
def add(
    click_ctx: click.Context,
    amount: str,
    txn_type: str,
    category: str,
    description: str,
    occurred_on: str,
) -> None:
    """Record a new transaction."""

    ctx = _context(click_ctx)
    try:
        tx = controllers.add_transaction(
            ctx,
            {
                "amount": amount,
                "type": txn_type,
                "category": category,
                "description": description,
                "date": occurred_on,
            },
        )
    except TransactionValidationError as exc:
        for field_name, messages in exc.errors.items():
            click.echo(f"{field_name}: {'; '.join(messages)}", err=True)
        raise click.ClickException("Transaction rejected") from exc
    click.echo(f"Recorded {tx.id}")


@cli.command()
@click.argument("transaction_id")
@click.pass_context
def remove(click_ctx: click.Context, transaction_id: str) -> None:
    """Delete a transaction by id (unknown ids are ignored)."""

    ctx = _context(click_ctx)
    if controllers.delete_transaction(ctx, transaction_id):
        click.echo(f"Removed {transaction_id}")
    else:
        click.echo(f"No transaction with id {transaction_id}")


@cli.command()
@click.pass_context
def panel(click_ctx: click.Context) -> None:
    """Show budget vs actual for both report groupings."""

    ctx = _context(click_ctx)
    result = controllers.variance_panel(ctx)

    click.echo("PAINEL DE GASTOS DIÁRIOS")
    click.echo(f"{'Categoria':<20} {'Meta':>10} {'Real':>10} {'%VAR':>8}")
    for row in result.daily_spending:
        marker = _STATUS_MARKERS[row.percent_status]
        click.echo(
            f"{row.category.value:<20} {_format_amount(row.limit):>10} "
            f"{_format_amount(row.actual):>10} {row.variance_percent:>6}% {marker}"
        )

    click.echo("")
    click.echo("CUSTOS FIXOS E GRANDES")
    click.echo(f"{'Categoria':<20} {'Meta':>10} {'Real':>10} {'VAR':>10}")
    for row in result.fixed_costs:
        marker = _STATUS_MARKERS[row.absolute_status]
        click.echo(
            f"{row.category.value:<20} {_format_amount(row.limit):>10} "
            f"{_format_amount(row.actual):>10} {_format_amount(row.variance_absolute):>10} {marker}"
        )


@cli.command()
@click.pass_context
def breakdown(click_ctx: click.Context) -> None:
    """Show expense per category with its share of total spend."""

    ctx = _context(click_ctx)
    slices = controllers.spending_breakdown(ctx)
    if not slices:
        click.echo("No expense data")
        return
    for item in slices:
        click.echo(f"{item.category.value:<20} {_format_amount(item.value):>10} {item.share:6.1f}%")


@cli.command()
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def chart(click_ctx: click.Context, output: Path) -> None:
    """Render the spending donut chart to a PNG file."""

    ctx = _context(click_ctx)
    path = export_spending_png(transactions=ctx.store.snapshot(), output_path=output)
    click.echo(f"Chart written: {path}")


@cli.command()
@click.pass_context
def seed(click_ctx: click.Context) -> None:
    """Load demo transactions into a ledger that has never been saved."""

    ctx = _context(click_ctx)
    added = controllers.seed_demo(ctx)
    if added:
        click.echo(f"Seeded {added} demo transactions")
    else:
        click.echo("Ledger already has saved data; nothing seeded")


@cli.command()
@click.pass_context
def insights(click_ctx: click.Context) -> None:
    """Ask the AI advisor for budget tips."""

    ctx = _context(click_ctx)
    try:
        tips = controllers.fetch_insights(ctx)
    except FinTrackError as exc:
        raise click.ClickException(str(exc)) from exc
    for tip in tips:
        click.echo(f"• {tip}")


@cli.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--mime-type", default=None, help="Overrides the type guessed from the file name")
@click.option("--save", is_flag=True, default=False, help="Record the draft without review")
@click.pass_context
def scan(click_ctx: click.Context, image: Path, mime_type: Optional[str], save: bool) -> None:
    """Read a receipt image and pre-fill a transaction."""

    ctx = _context(click_ctx)
    resolved_type = mime_type or mimetypes.guess_type(image.name)[0] or "image/jpeg"
    try:
        draft = controllers.scan_receipt(ctx, image.read_bytes(), resolved_type)
    except ReceiptExtractionError as exc:
        raise click.ClickException(f"Erro ao ler recibo. Tente novamente. ({exc})") from exc

    click.echo(
        f"Draft: {draft.description} | {draft.category.value} | "
        f"{draft.date.isoformat()} | ${_format_amount(draft.amount)}"
    )
    if save or click.confirm("Save this transaction?", default=True):
        tx = controllers.confirm_scanned_draft(ctx)
        click.echo(f"Recorded {tx.id}")


def main() -> None:  # pragma: no cover - console entrypoint
    cli(obj=None)
