"""CLI entry point for the trade evaluation engine.

Every command reads JSON (one trade or a list of trades, camelCase or
snake_case keys) and writes JSON to stdout.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from .alignment import analyze_alignment
from .analytics import (
    assess_statistical_significance,
    benchmark_statistics,
    calculate_performance_statistics,
    summarize_trades,
)
from .core.config import Settings, load_settings
from .core.enums import GradeReason, TradeStatus
from .core.errors import JournalError
from .core.models import JournalModel, Trade, ValidationResult
from .grading import calculate_trade_grade, recalculate_grade
from .observability.logger import get_logger, setup_logging
from .risk import detailed_portfolio_risk, new_risk_percentage

log = get_logger(__name__)


def _load_trades(path: str) -> tuple[list[Trade], bool]:
    """Parse FILE; the flag is True when it held a single trade."""
    try:
        raw = json.loads(Path(path).read_text())
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{path} is not valid JSON: {exc}") from exc

    single = isinstance(raw, dict)
    items = [raw] if single else raw
    if not isinstance(items, list):
        raise click.ClickException(f"{path} must contain a trade object or a list of trades")
    try:
        return [Trade.model_validate(item) for item in items], single
    except ValidationError as exc:
        raise click.ClickException(f"Invalid trade data in {path}:\n{exc}") from exc


def _dump(value: JournalModel | list[Any] | dict[str, Any]) -> Any:
    if isinstance(value, JournalModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_dump(v) for v in value]
    if isinstance(value, dict):
        return {k: _dump(v) for k, v in value.items()}
    return value


def _emit(results: list[Any], single: bool) -> None:
    payload = _dump(results[0] if single else results)
    click.echo(json.dumps(payload, indent=2))


def _with_alignment(trade: Trade) -> Trade:
    """Fill in alignment from the trade's own method analysis when missing."""
    if trade.alignment is not None or not trade.method_analysis:
        return trade
    analysis = analyze_alignment(trade.direction, trade.method_analysis)
    if isinstance(analysis, ValidationResult):
        log.warning("alignment_skipped", trade_id=trade.id, error=analysis.error)
        return trade
    return trade.evolve(alignment=analysis)


@click.group()
@click.option("--config", "config_path", default=None, help="TOML config file path")
@click.option("--log-level", default=None, help="Override log level")
@click.option("--log-format", type=click.Choice(["json", "console"]), default=None)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: str | None,
    log_level: str | None,
    log_format: str | None,
) -> None:
    """Trading journal evaluation engine."""
    try:
        settings = load_settings(config_path)
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc

    setup_logging(
        level=log_level or settings.observability.log_level,
        format=log_format or settings.observability.log_format,
    )
    ctx.obj = settings


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--reason",
    type=click.Choice([r.value for r in GradeReason]),
    default=None,
    help="Record a grade-history entry with this trigger",
)
@click.option(
    "--equity",
    type=float,
    default=None,
    help="Account equity: fills missing risk percentages and checks position sizing",
)
@click.pass_obj
def grade(settings: Settings, file: str, reason: str | None, equity: float | None) -> None:
    """Grade one or more trades."""
    trades, single = _load_trades(file)
    results: list[Any] = []
    try:
        for trade in trades:
            trade = _with_alignment(trade)
            if equity is not None and not trade.risk_percentage:
                trade = trade.evolve(
                    risk_percentage=new_risk_percentage(trade.risk_amount or 0.0, equity),
                )
            if reason:
                results.append(recalculate_grade(
                    trade, reason, config=settings.grading,
                    risk_config=settings.risk, equity=equity,
                ))
            else:
                results.append(calculate_trade_grade(
                    trade, settings.grading, settings.risk, equity,
                ))
    except JournalError as exc:
        raise click.ClickException(str(exc)) from exc

    log.info("graded", trades=len(results), reason=reason)
    _emit(results, single)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def alignment(file: str) -> None:
    """Analyse method-analysis alignment for one or more trades."""
    trades, single = _load_trades(file)
    results: list[Any] = []
    for trade in trades:
        results.append(analyze_alignment(trade.direction, trade.method_analysis))
    _emit(results, single)


@main.command("portfolio-risk")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--equity", type=float, required=True, help="Current account equity")
@click.pass_obj
def portfolio_risk(settings: Settings, file: str, equity: float) -> None:
    """Summarise open-trade risk against the portfolio limit."""
    trades, _ = _load_trades(file)
    active = [t for t in trades if t.status == TradeStatus.ACTIVE]
    summary = detailed_portfolio_risk(active, equity, settings.risk)
    _emit([summary], True)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--equity", type=float, default=None, help="Equity for rating expectancy")
@click.pass_obj
def stats(settings: Settings, file: str, equity: float | None) -> None:
    """Performance statistics, benchmarks, summary and win-rate significance."""
    trades, _ = _load_trades(file)
    statistics = calculate_performance_statistics(trades)
    _emit([{
        "statistics": statistics,
        "benchmarks": list(benchmark_statistics(statistics, equity)),
        "summary": summarize_trades(trades),
        "significance": assess_statistical_significance(trades, settings.analytics),
    }], True)


if __name__ == "__main__":
    main()
