"""Workout and diet catalog loading.

The catalog is reference data: the engine only reads it. This module loads
it from a YAML document shaped like::

    workouts:
      - name: Morning Run
        tag: Cardio
        intensity: Low
        level: Beginner
        duration_minutes: 30
        calories_burned: 250
    diets:
      - name: Mediterranean Bowl
        diet_type: mediterranean
        calories: 2100
        ingredients: [chickpeas, olive oil]

Entries with an ``id`` are merged onto the existing row with that id;
entries without one are inserted.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator
from sqlalchemy import delete
from sqlalchemy.orm import Session

from fitplan.db.models import Diet, Workout
from fitplan.recommendation.enums import Intensity, Level


class CatalogError(ValueError):
    """Raised when a catalog document is malformed."""


class WorkoutEntry(BaseModel):
    id: int | None = None
    name: str
    tag: str
    intensity: Intensity
    level: Level
    duration_minutes: int = Field(default=0, ge=0)
    calories_burned: int = Field(default=0, ge=0)
    description: str | None = None
    image_url: str | None = None
    video_url: str | None = None


class DietEntry(BaseModel):
    id: int | None = None
    name: str
    diet_type: str
    calories: float = Field(ge=0)
    ingredients: list[str] = Field(default_factory=list)
    meal_type: str | None = None
    meal_time: str | None = None
    description: str | None = None
    image_url: str | None = None
    recipe_url: str | None = None

    @field_validator("ingredients")
    @classmethod
    def strip_ingredients(cls, v: list[str]) -> list[str]:
        return [item.strip() for item in v if item and item.strip()]


class Catalog(BaseModel):
    workouts: list[WorkoutEntry] = Field(default_factory=list)
    diets: list[DietEntry] = Field(default_factory=list)


def parse_catalog(document: object) -> Catalog:
    """Validate a decoded YAML document.

    Raises:
        CatalogError: If the document is not a mapping or an entry is invalid
    """
    if document is None:
        return Catalog()
    if not isinstance(document, dict):
        raise CatalogError(f"Catalog must be a mapping with 'workouts' and 'diets', got {type(document).__name__}")
    try:
        return Catalog.model_validate(document)
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog entry: {e}") from e


def read_catalog(path: str | Path) -> Catalog:
    """Read and validate a catalog YAML file."""
    catalog_path = Path(path)
    with catalog_path.open(encoding="utf-8") as f:
        try:
            document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise CatalogError(f"Could not parse {catalog_path}: {e}") from e
    catalog = parse_catalog(document)
    logger.info(
        "Catalog read",
        path=str(catalog_path),
        workouts=len(catalog.workouts),
        diets=len(catalog.diets),
    )
    return catalog


def seed_catalog(session: Session, catalog: Catalog, replace: bool = False) -> tuple[int, int]:
    """Write catalog entries; the caller commits.

    Args:
        session: Database session
        catalog: Validated catalog
        replace: Delete every existing workout and diet first

    Returns:
        (workouts written, diets written)
    """
    if replace:
        session.execute(delete(Workout))
        session.execute(delete(Diet))
        logger.info("Existing catalog removed")

    for entry in catalog.workouts:
        values = entry.model_dump(exclude_none=True)
        values["intensity"] = entry.intensity.value
        values["level"] = entry.level.value
        if entry.id is None:
            session.add(Workout(**values))
        else:
            session.merge(Workout(**values))

    for entry in catalog.diets:
        values = entry.model_dump(exclude_none=True)
        if entry.id is None:
            session.add(Diet(**values))
        else:
            session.merge(Diet(**values))

    session.flush()
    logger.info("Catalog seeded", workouts=len(catalog.workouts), diets=len(catalog.diets))
    return len(catalog.workouts), len(catalog.diets)
