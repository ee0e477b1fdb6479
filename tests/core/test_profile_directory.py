from __future__ import annotations

import json
from pathlib import Path

import pytest

from matchscore.directory import InMemoryDirectory, JsonlLoader, ProfileDirectory
from matchscore.errors import ProfileLoadError
from matchscore.schemas import JobProfile, WorkerProfile


def test_loader_raises_on_invalid_json(tmp_path: Path):
    path = tmp_path / "workers.jsonl"
    path.write_text('{"worker_id": "W-1"}\n{invalid}', encoding="utf-8")

    with pytest.raises(ProfileLoadError) as exc:
        JsonlLoader().load(path, WorkerProfile)
    assert "invalid JSON" in str(exc.value)
    assert "line 2" in exc.value.errors[0]


def test_loader_collects_invalid_records_and_partial(tmp_path: Path):
    path = tmp_path / "jobs.jsonl"
    path.write_text(
        json.dumps({"job_id": "J-1", "title": "Data Engineer"})
        + "\n\n"
        + json.dumps({"title": "No identifier"}),
        encoding="utf-8",
    )

    with pytest.raises(ProfileLoadError) as exc:
        JsonlLoader().load(path, JobProfile)
    error = exc.value
    assert len(error.errors) == 1
    assert [job.job_id for job in error.partial] == ["J-1"]


def test_directory_from_files(tmp_path: Path):
    workers = tmp_path / "workers.jsonl"
    jobs = tmp_path / "jobs.jsonl"
    outcomes = tmp_path / "outcomes.jsonl"
    workers.write_text(json.dumps({"worker_id": "W-1"}), encoding="utf-8")
    jobs.write_text(
        "\n".join(json.dumps({"job_id": job_id}) for job_id in ("J-1", "J-2")),
        encoding="utf-8",
    )
    outcomes.write_text(
        "\n".join(
            json.dumps({"worker_id": worker_id, "job_id": "J-1", "status": "HIRED"})
            for worker_id in ("W-1", "W-2")
        ),
        encoding="utf-8",
    )

    directory = InMemoryDirectory.from_files(workers_path=workers, jobs_path=jobs, outcomes_path=outcomes)

    assert isinstance(directory, ProfileDirectory)
    assert directory.get_worker("W-1").worker_id == "W-1"
    assert directory.get_worker("W-2") is None
    assert [job.job_id for job in directory.list_jobs()] == ["J-1", "J-2"]
    assert len(directory.outcomes()) == 2
    assert [outcome.worker_id for outcome in directory.outcomes("W-2")] == ["W-2"]
