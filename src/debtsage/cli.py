"""Command line front-end for the payoff simulator."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import click

from .config import BaseConfig
from .logging_config import get_logger, setup_logging
from .models.debt import InvalidDebtInput, PayoffMethod, Strategy, to_decimal
from .models.results import SimulationOutput, to_cents
from .services.debts import best_strategy, compare_strategies, simulate
from .services.export_csv import export_results_csv
from .services.import_csv import DebtImportError, load_debts
from .services.summary import describe_strategy, format_duration, summarize_debts

logger = get_logger("cli")

_METHODS = click.Choice([m.value for m in PayoffMethod], case_sensitive=False)


class AmountType(click.ParamType):
    """Money amount parsed straight into ``Decimal``."""

    name = "amount"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            return to_decimal(value, field=param.name if param else "amount")
        except InvalidDebtInput as exc:
            self.fail(str(exc), param, ctx)


AMOUNT = AmountType()


def _parse_start(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m").date()
    except ValueError as exc:
        raise click.BadParameter("use YYYY-MM", param_hint="--start-date") from exc


def _load(file_path: Path):
    try:
        return load_debts(file_path)
    except DebtImportError as exc:
        raise click.ClickException(str(exc)) from exc


def _echo_output(output: SimulationOutput, strategy: Strategy) -> None:
    click.echo(f"Strategy: {strategy.method.value} ({describe_strategy(strategy.method)})")
    click.echo(f"Extra payment: ${to_cents(strategy.extra_payment)}/month")
    click.echo("")
    for order, result in enumerate(output.results, start=1):
        when = f" ({result.payoff_date:%Y-%m})" if result.payoff_date else ""
        click.echo(
            f"{order:>3}. {result.name or result.debt_id}: month {result.payoff_month}{when}, "
            f"interest ${to_cents(result.total_interest_paid)}, "
            f"total ${to_cents(result.total_paid)}"
        )
    for debt in output.outstanding:
        click.echo(
            f"  - {debt.name or debt.debt_id}: NOT paid off, "
            f"${to_cents(debt.remaining_balance)} remaining"
        )
    aggregate = output.aggregate
    click.echo("")
    click.echo(
        f"Debt free in {format_duration(aggregate.total_months_to_payoff)}, "
        f"total interest ${to_cents(aggregate.total_interest_paid)}"
    )
    if strategy.extra_payment > 0 and output.baseline.hit_ceiling:
        # savings only count debts the baseline retires, so they understate this case
        click.echo("Versus no extra payment: some debts are never paid off without it")
    elif strategy.extra_payment > 0:
        click.echo(
            f"Versus no extra payment: save ${to_cents(output.savings.interest_saved)} "
            f"and {format_duration(output.savings.months_saved)}"
        )
    for warning in output.warnings:
        click.echo(f"Warning ({warning.debt_id}): {warning.message}", err=True)
    if output.hit_ceiling:
        click.echo("Warning: some debts are not paid off within the projection window.", err=True)


@click.group()
@click.option("--verbose", is_flag=True, default=False, help="Show INFO log lines on the console.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Project debt payoff with snowball, avalanche or custom ordering."""

    try:
        config = BaseConfig()
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(config, console_level=logging.INFO if verbose else logging.WARNING)
    ctx.obj = config


@main.command("simulate")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--method", type=_METHODS, default=None, help="Payoff ordering.")
@click.option("--extra", type=AMOUNT, default=Decimal("0"), show_default=True, help="Extra monthly payment.")
@click.option("--start-date", default=None, help="First payment month (YYYY-MM).")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON instead of text.")
@click.option("--export", "export_path", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Also write results to this CSV file.")
@click.pass_obj
def simulate_command(
    config: BaseConfig,
    file_path: Path,
    method: str | None,
    extra: Decimal,
    start_date: str | None,
    as_json: bool,
    export_path: Path | None,
) -> None:
    """Simulate payoff for the debts in FILE_PATH (.csv or .json)."""

    debts = _load(file_path)
    try:
        strategy = Strategy.create(method or config.DEFAULT_METHOD, extra)
        output = simulate(
            debts, strategy, start_date=_parse_start(start_date), **config.simulation_options()
        )
    except InvalidDebtInput as exc:
        raise click.ClickException(str(exc)) from exc

    logger.info(
        "Simulation finished",
        extra={"file": str(file_path), "method": strategy.method.value, "debts": len(debts)},
    )
    if as_json:
        click.echo(json.dumps(output.as_dict(), indent=2, default=str))
    else:
        _echo_output(output, strategy)
    if export_path is not None:
        path = export_results_csv(output=output, output_path=export_path)
        click.echo(f"Export written: {path}", err=as_json)


@main.command("compare")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--extra", type=AMOUNT, default=Decimal("0"), show_default=True, help="Extra monthly payment.")
@click.option("--workers", type=click.IntRange(min=1), default=1, show_default=True, help="Worker threads.")
@click.pass_obj
def compare_command(config: BaseConfig, file_path: Path, extra: Decimal, workers: int) -> None:
    """Compare avalanche and snowball for the debts in FILE_PATH."""

    debts = _load(file_path)
    try:
        outcomes = compare_strategies(
            debts, extra, max_workers=workers, **config.simulation_options()
        )
    except InvalidDebtInput as exc:
        raise click.ClickException(str(exc)) from exc

    for method, output in outcomes.items():
        aggregate = output.aggregate
        flag = " (not paid off in window)" if output.hit_ceiling else ""
        click.echo(
            f"{method.value:<10} {format_duration(aggregate.total_months_to_payoff):>8}  "
            f"interest ${to_cents(aggregate.total_interest_paid)}{flag}"
        )
    best = best_strategy(outcomes)
    if best is not None:
        click.echo(f"Best: {best.value}")


@main.command("summary")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--budget", type=AMOUNT, default=Decimal("0"), show_default=True, help="Monthly budget for debt payments.")
def summary_command(file_path: Path, budget: Decimal) -> None:
    """Show totals for the debts in FILE_PATH."""

    try:
        summary = summarize_debts(_load(file_path), budget)
    except InvalidDebtInput as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Debts: {summary.debt_count}")
    click.echo(f"Total debt: ${to_cents(summary.total_debt)}")
    click.echo(f"Minimum payments: ${to_cents(summary.total_minimum_payments)}/month")
    click.echo(f"Extra payment power: ${to_cents(summary.extra_payment_capacity)}/month")
    highest = summary.highest_interest_debt
    if highest is not None:
        click.echo(f"Highest rate: {highest.name or highest.id} at {highest.interest_rate}%")


if __name__ == "__main__":  # pragma: no cover
    main()
