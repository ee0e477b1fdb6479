"""Typer CLI entrypoint for the match score engine."""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field, is_dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, Optional

import pendulum
import typer
from pydantic import BaseModel

from . import __version__
from .config import load_settings
from .container import MatchScoreContainer, create_container
from .directory import InMemoryDirectory
from .errors import MatchScoreError, ProfileLoadError
from .logging import configure_logging
from .store import DEFAULT_DATABASE_URL

app = typer.Typer(help="Worker/job match score CLI.")


@dataclass
class CliState:
    workers: Optional[Path] = None
    jobs: Optional[Path] = None
    outcomes: Optional[Path] = None
    database: str = DEFAULT_DATABASE_URL
    settings: dict[str, Any] = field(default_factory=dict)
    _container: MatchScoreContainer | None = None

    def container(self) -> MatchScoreContainer:
        if self._container is None:
            try:
                directory = InMemoryDirectory.from_files(
                    workers_path=self.workers,
                    jobs_path=self.jobs,
                    outcomes_path=self.outcomes,
                )
            except ProfileLoadError as exc:
                typer.echo(f"Failed to load profiles: {exc.errors}", err=True)
                raise typer.Exit(code=2) from exc
            self._container = create_container(
                settings=self.settings,
                directory=directory,
                database_url=self.database,
            )
        return self._container


@app.callback()
def main_options(
    ctx: typer.Context,
    workers: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="Worker profiles JSONL path."),
    jobs: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="Job profiles JSONL path."),
    outcomes: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="Application outcomes JSONL path."),
    database: Optional[str] = typer.Option(None, help="SQLAlchemy database URL for score records."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Shared data sources and settings."""
    configure_logging(log_level)
    settings: dict[str, Any] = {}
    if config:
        try:
            settings = load_settings(config)
        except MatchScoreError as exc:
            raise typer.BadParameter(str(exc), param_name="config") from exc
    database_url = database or settings.get("database", {}).get("url") or DEFAULT_DATABASE_URL
    ctx.obj = CliState(
        workers=workers,
        jobs=jobs,
        outcomes=outcomes,
        database=database_url,
        settings=settings,
    )


@app.command()
def score(
    ctx: typer.Context,
    worker_id: str = typer.Argument(..., help="Worker identifier."),
    job_id: str = typer.Argument(..., help="Job identifier."),
    force: bool = typer.Option(False, "--force", help="Recalculate even if a score exists."),
) -> None:
    """Score one worker/job pair."""
    service = _service(ctx)
    with _errors():
        record = service.score(worker_id, job_id, force_recalculate=force)
    _emit(record)


@app.command()
def batch(
    ctx: typer.Context,
    pairs: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="JSONL of {worker_id, job_id} pairs."),
    force: bool = typer.Option(False, "--force", help="Recalculate pairs that already have scores."),
) -> None:
    """Score many pairs; failures are reported per pair."""
    service = _service(ctx)
    items: list[dict[str, str]] = []
    with pairs.open("r", encoding="utf-8") as handle:
        for idx, line in enumerate(handle, start=1):
            raw = line.strip()
            if not raw:
                continue
            try:
                items.append(json.loads(raw))
            except json.JSONDecodeError as exc:
                raise typer.BadParameter(f"line {idx}: invalid JSON ({exc})", param_name="pairs") from exc

    results = service.batch_score(items, force_recalculate=force)
    _emit(
        {
            "metadata": {
                "pair_count": len(results),
                "failed": sum(1 for result in results if not result.success),
                "timestamp": pendulum.now("UTC").to_iso8601_string(),
                "app_version": __version__,
            },
            "results": results,
        }
    )


@app.command()
def stats(
    ctx: typer.Context,
    worker_id: Optional[str] = typer.Option(None, help="Restrict to one worker."),
    job_id: Optional[str] = typer.Option(None, help="Restrict to one job."),
    date_from: Optional[str] = typer.Option(None, help="Earliest calculation time (ISO 8601)."),
    date_to: Optional[str] = typer.Option(None, help="Latest calculation time (ISO 8601)."),
    min_score: Optional[float] = typer.Option(None, help="Minimum overall score."),
    max_score: Optional[float] = typer.Option(None, help="Maximum overall score."),
    period: Optional[str] = typer.Option(None, help="Trend bucket: daily, weekly or monthly."),
    top_n: Optional[int] = typer.Option(None, help="Number of top matches to include."),
    include_history: bool = typer.Option(False, "--include-history", help="Include superseded records."),
) -> None:
    """Aggregate statistics over stored scores."""
    service = _service(ctx)
    with _errors():
        result = service.statistics(
            _filter(worker_id, job_id, date_from, date_to, min_score, max_score, include_history),
            period=period,
            top_n=top_n,
        )
    _emit(result)


@app.command()
def accuracy(
    ctx: typer.Context,
    worker_id: Optional[str] = typer.Option(None, help="Restrict to one worker."),
    job_id: Optional[str] = typer.Option(None, help="Restrict to one job."),
    date_from: Optional[str] = typer.Option(None, help="Earliest calculation time (ISO 8601)."),
    date_to: Optional[str] = typer.Option(None, help="Latest calculation time (ISO 8601)."),
) -> None:
    """Precision/recall of scores as a predictor of hires."""
    service = _service(ctx)
    with _errors():
        report = service.accuracy(_filter(worker_id, job_id, date_from, date_to, None, None, False))
    _emit(report)


@app.command()
def recommend(
    ctx: typer.Context,
    worker_id: str = typer.Argument(..., help="Worker identifier."),
    limit: int = typer.Option(10, min=1, help="Maximum number of jobs."),
) -> None:
    """Rank unscored jobs for a worker by estimated score."""
    service = _service(ctx)
    with _errors():
        ranked = service.recommendations(worker_id, limit=limit)
    _emit(
        [
            {
                "job_id": item.job.job_id,
                "title": item.job.title,
                "estimated_score": item.estimated_score,
                "match_reasons": item.match_reasons,
            }
            for item in ranked
        ]
    )


@app.command()
def insights(
    ctx: typer.Context,
    worker_id: str = typer.Argument(..., help="Worker identifier."),
) -> None:
    """Insights and profile recommendations from a worker's score history."""
    service = _service(ctx)
    with _errors():
        result = service.insights(worker_id)
    _emit(result)


@app.command()
def history(
    ctx: typer.Context,
    worker_id: str = typer.Argument(..., help="Worker identifier."),
    job_id: str = typer.Argument(..., help="Job identifier."),
) -> None:
    """Every stored score for a pair, newest first."""
    _emit(_service(ctx).history(worker_id, job_id))


def _service(ctx: typer.Context):
    state: CliState = ctx.obj
    return state.container().service()


def _filter(
    worker_id: str | None,
    job_id: str | None,
    date_from: str | None,
    date_to: str | None,
    min_score: float | None,
    max_score: float | None,
    include_history: bool,
) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "worker_id": worker_id,
        "job_id": job_id,
        "date_from": _parse_date(date_from, "date_from"),
        "date_to": _parse_date(date_to, "date_to"),
        "min_score": min_score,
        "max_score": max_score,
        "include_history": include_history,
    }
    return {key: value for key, value in raw.items() if value is not None}


def _parse_date(value: str | None, name: str) -> datetime | None:
    if not value:
        return None
    try:
        return pendulum.parse(value)
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid date: {value!r}", param_name=name) from exc


@contextmanager
def _errors() -> Iterator[None]:
    """Map engine errors to a non-zero exit with a message on stderr."""
    try:
        yield
    except MatchScoreError as exc:
        typer.echo(f"{type(exc).__name__}: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _emit(payload: Any) -> None:
    typer.echo(json.dumps(_jsonable(payload), ensure_ascii=False, indent=2))


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if is_dataclass(value) and not isinstance(value, type):
        return _jsonable(asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(_jsonable(key)): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, datetime):
        return pendulum.instance(value).to_iso8601_string()
    return value


def main() -> None:
    app()


if __name__ == "__main__":
    main()
