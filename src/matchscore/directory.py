"""Worker, job and outcome collaborators.

The engine only reads these; writing them belongs to the worker/job and
application subsystems.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import ProfileLoadError
from .schemas import ApplicationOutcome, JobProfile, WorkerProfile

ModelT = TypeVar("ModelT", bound=BaseModel)


@runtime_checkable
class ProfileDirectory(Protocol):
    """Read access to profiles and outcomes."""

    def get_worker(self, worker_id: str) -> WorkerProfile | None:
        """Return the worker profile, or None when it does not exist."""

    def get_job(self, job_id: str) -> JobProfile | None:
        """Return the job profile, or None when it does not exist."""

    def list_jobs(self) -> list[JobProfile]:
        """Return every job open for recommendation."""

    def outcomes(self, worker_id: str | None = None) -> list[ApplicationOutcome]:
        """Return application outcomes, optionally for one worker."""


class InMemoryDirectory:
    """Dictionary-backed directory, loaded from JSONL files or built in code."""

    def __init__(
        self,
        *,
        workers: Iterable[WorkerProfile] = (),
        jobs: Iterable[JobProfile] = (),
        outcomes: Iterable[ApplicationOutcome] = (),
    ) -> None:
        self._workers = {worker.worker_id: worker for worker in workers}
        self._jobs = {job.job_id: job for job in jobs}
        self._outcomes = list(outcomes)

    def get_worker(self, worker_id: str) -> WorkerProfile | None:
        return self._workers.get(worker_id)

    def get_job(self, job_id: str) -> JobProfile | None:
        return self._jobs.get(job_id)

    def list_jobs(self) -> list[JobProfile]:
        return list(self._jobs.values())

    def outcomes(self, worker_id: str | None = None) -> list[ApplicationOutcome]:
        if worker_id is None:
            return list(self._outcomes)
        return [outcome for outcome in self._outcomes if outcome.worker_id == worker_id]

    def add_worker(self, worker: WorkerProfile) -> None:
        self._workers[worker.worker_id] = worker

    def add_job(self, job: JobProfile) -> None:
        self._jobs[job.job_id] = job

    def remove_worker(self, worker_id: str) -> None:
        self._workers.pop(worker_id, None)

    def add_outcome(self, outcome: ApplicationOutcome) -> None:
        self._outcomes.append(outcome)

    @classmethod
    def from_files(
        cls,
        *,
        workers_path: Path | None = None,
        jobs_path: Path | None = None,
        outcomes_path: Path | None = None,
    ) -> "InMemoryDirectory":
        loader = JsonlLoader()
        return cls(
            workers=loader.load(workers_path, WorkerProfile) if workers_path else (),
            jobs=loader.load(jobs_path, JobProfile) if jobs_path else (),
            outcomes=loader.load(outcomes_path, ApplicationOutcome) if outcomes_path else (),
        )


class JsonlLoader:
    """Load one model per JSON line, collecting every bad line before failing."""

    def load(self, path: Path, model: type[ModelT]) -> list[ModelT]:
        items: list[ModelT] = []
        errors: list[str] = []
        with path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    record = json.loads(raw)
                except json.JSONDecodeError as exc:
                    errors.append(f"{path.name} line {idx}: invalid JSON ({exc})")
                    continue
                try:
                    items.append(model.model_validate(record))
                except PydanticValidationError as exc:
                    errors.append(f"{path.name} line {idx}: {exc.errors()[0].get('msg')}")
        if errors:
            raise ProfileLoadError(errors, items)
        return items
