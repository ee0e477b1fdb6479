"""Dependency injection container for the match score engine."""

from __future__ import annotations

from typing import Any, Callable

from dependency_injector import containers, providers

from .core import (
    AccuracyConfig,
    AccuracyEvaluator,
    AvailabilityCalculator,
    CulturalCalculator,
    EducationCalculator,
    ExperienceCalculator,
    InsightConfig,
    InsightGenerator,
    LocationCalculator,
    RecommendationConfig,
    RecommendationEstimator,
    SkillsCalculator,
    StatisticsConfig,
    StatisticsEngine,
    WeightedScorer,
)
from .core.calculators import (
    AvailabilityConfig,
    CulturalConfig,
    EducationConfig,
    ExperienceConfig,
    LocationConfig,
    SkillsConfig,
)
from .directory import InMemoryDirectory, ProfileDirectory
from .service import MatchScoreService
from .store import SqlScoreStore, create_database_engine

IN_MEMORY_DATABASE_URL = "sqlite://"


def build_scorer(calculators: list, settings: dict[str, Any] | None = None) -> WeightedScorer:
    settings = dict(settings or {})
    options: dict[str, Any] = {
        "weights": settings.pop("score_weights", None),
        "thresholds": settings.pop("thresholds", None),
    }
    options.update(settings)
    return WeightedScorer(calculators, **options)


def build_config(config_cls: type, raw: dict[str, Any] | None = None) -> Any:
    return config_cls(**(raw or {}))


def build_engine(url: str | None = None):
    return create_database_engine(url or IN_MEMORY_DATABASE_URL)


def context_resolver(directory: ProfileDirectory) -> Callable:
    def resolve(worker_id: str, job_id: str):
        return directory.get_worker(worker_id), directory.get_job(job_id)

    return resolve


class MatchScoreContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    directory = providers.Singleton(InMemoryDirectory)

    skills_calculator = providers.Singleton(SkillsCalculator)
    experience_calculator = providers.Singleton(ExperienceCalculator)
    location_calculator = providers.Singleton(LocationCalculator)
    availability_calculator = providers.Singleton(AvailabilityCalculator)
    education_calculator = providers.Singleton(EducationCalculator)
    cultural_calculator = providers.Singleton(CulturalCalculator)

    calculators = providers.List(
        skills_calculator,
        experience_calculator,
        location_calculator,
        availability_calculator,
        education_calculator,
        cultural_calculator,
    )

    scorer = providers.Singleton(
        build_scorer,
        calculators=calculators,
        settings=config.core,
    )

    engine = providers.Singleton(build_engine, url=config.database.url)
    store = providers.Singleton(SqlScoreStore, engine=engine)

    statistics_engine = providers.Singleton(
        StatisticsEngine,
        store=store,
        thresholds=scorer.provided.thresholds,
        config=providers.Singleton(build_config, StatisticsConfig, config.statistics),
        context_resolver=providers.Callable(context_resolver, directory),
    )

    estimator = providers.Singleton(
        RecommendationEstimator,
        config=providers.Singleton(build_config, RecommendationConfig, config.recommendations),
    )

    accuracy_evaluator = providers.Singleton(
        AccuracyEvaluator,
        config=providers.Singleton(build_config, AccuracyConfig, config.accuracy),
    )

    insight_generator = providers.Singleton(
        InsightGenerator,
        thresholds=scorer.provided.thresholds,
        config=providers.Singleton(build_config, InsightConfig, config.insights),
    )

    service = providers.Singleton(
        MatchScoreService,
        scorer=scorer,
        store=store,
        directory=directory,
        statistics_engine=statistics_engine,
        estimator=estimator,
        accuracy_evaluator=accuracy_evaluator,
        insight_generator=insight_generator,
        max_workers=config.batch.max_workers,
    )


_CALCULATOR_OVERRIDES = {
    "skills": ("skills_calculator", SkillsCalculator, SkillsConfig),
    "experience": ("experience_calculator", ExperienceCalculator, ExperienceConfig),
    "location": ("location_calculator", LocationCalculator, LocationConfig),
    "availability": ("availability_calculator", AvailabilityCalculator, AvailabilityConfig),
    "education": ("education_calculator", EducationCalculator, EducationConfig),
    "cultural": ("cultural_calculator", CulturalCalculator, CulturalConfig),
}


def create_container(
    *,
    settings: dict | None = None,
    directory: ProfileDirectory | None = None,
    database_url: str | None = None,
) -> MatchScoreContainer:
    """Instantiate container with optional overrides."""

    container = MatchScoreContainer()

    if directory is not None:
        container.directory.override(providers.Object(directory))

    settings = settings if isinstance(settings, dict) else {}
    sections = {key: value for key, value in settings.items() if key != "calculators"}
    if sections:
        container.config.from_dict(sections)
    if database_url:
        container.config.database.url.from_value(database_url)

    calculator_settings = settings.get("calculators", {}) or {}
    for name, raw in calculator_settings.items():
        if name not in _CALCULATOR_OVERRIDES:
            continue
        provider_name, calculator_cls, config_cls = _CALCULATOR_OVERRIDES[name]
        getattr(container, provider_name).override(
            providers.Singleton(calculator_cls, config=config_cls(**raw))
        )

    return container
