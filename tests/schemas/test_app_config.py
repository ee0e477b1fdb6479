from __future__ import annotations

from pathlib import Path

import pytest

from matchscore.config import load_settings
from matchscore.errors import ValidationError
from matchscore.schemas.config import load_config


def test_load_settings_from_yaml(tmp_path: Path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "\n".join(
            [
                "core:",
                "  score_weights:",
                "    skills: 0.35",
                "    experience: 0.20",
                "    location: 0.15",
                "    availability: 0.15",
                "    education: 0.10",
                "    cultural: 0.05",
                "statistics:",
                "  default_period: daily",
                "batch:",
                "  max_workers: 2",
            ]
        ),
        encoding="utf-8",
    )

    settings = load_settings(path)

    assert settings["core"]["score_weights"]["skills"] == 0.35
    assert settings["statistics"] == {"default_period": "daily"}
    assert settings["batch"] == {"max_workers": 2}


def test_empty_yaml_gives_empty_settings(tmp_path: Path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_settings(path) == {}


def test_unknown_section_is_rejected():
    with pytest.raises(ValidationError):
        load_config({"evaluators": {}})


def test_non_mapping_config_is_rejected():
    with pytest.raises(ValidationError):
        load_config(["core"])


def test_batch_workers_must_be_positive():
    with pytest.raises(ValidationError) as excinfo:
        load_config({"batch": {"max_workers": 0}})
    assert excinfo.value.field == "batch.max_workers"
