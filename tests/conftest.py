"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

from random import Random

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fitplan.api.dependencies.engine import build_engine
from fitplan.catalog import parse_catalog, seed_catalog
from fitplan.config.settings import settings
from fitplan.core.auth_jwt import create_access_token
from fitplan.db.models import Base
from fitplan.db.session import get_db
from fitplan.recommendation.engine import RecommendationEngine

TEST_SECRET_KEY = "test-secret-key"
TEST_USER_ID = "user-123"

# Workout ids follow list order (1-based). Ids 1-5 match the reference
# profile (Medium/Intermediate, muscle-gain tags); 8 and 9 sit outside the
# fallback tag whitelist.
TEST_CATALOG = {
    "workouts": [
        {"name": "Dumbbell Full Body", "tag": "Strength Training", "intensity": "Medium", "level": "Intermediate"},
        {"name": "Core Stability Flow", "tag": "Core", "intensity": "Medium", "level": "Intermediate"},
        {"name": "Sprint Ladder", "tag": "HIIT", "intensity": "Medium", "level": "Intermediate"},
        {"name": "Steady Swim", "tag": "Endurance", "intensity": "Medium", "level": "Intermediate"},
        {"name": "Kettlebell Complex", "tag": "Strength Training", "intensity": "Medium", "level": "Intermediate"},
        {"name": "Brisk Walk", "tag": "Cardio", "intensity": "Low", "level": "Beginner"},
        {"name": "Gentle Yoga", "tag": "Yoga", "intensity": "Low", "level": "Beginner"},
        {"name": "Pickup Basketball", "tag": "Sports", "intensity": "High", "level": "Advanced"},
        {"name": "Balance Drills", "tag": "Balance", "intensity": "Low", "level": "Beginner"},
        {"name": "Heavy Compound Lifts", "tag": "Strength Training", "intensity": "High", "level": "Advanced"},
    ],
    "diets": [
        {"name": "Oatmeal", "diet_type": "balanced", "calories": 1500, "ingredients": ["oats", "milk"]},
        {"name": "Chicken and Rice", "diet_type": "balanced", "calories": 1800, "ingredients": ["chicken", "rice"]},
        {"name": "Lentil Curry", "diet_type": "vegetarian", "calories": 1600, "ingredients": ["lentils", "rice"]},
        {"name": "Steak and Eggs", "diet_type": "high-protein", "calories": 2900, "ingredients": ["beef", "eggs"]},
        {"name": "Tofu Satay", "diet_type": "vegan", "calories": 1400, "ingredients": ["tofu", "Peanuts"]},
    ],
}

# 70 kg / 30 y / moderate / muscle-gain
REFERENCE_PROFILE = {
    "weight": 70.0,
    "age": 30,
    "activity_level": "moderate",
    "workout_goals": ["muscle-gain"],
}


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Provides an isolated database session per test."""
    session = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def seeded_catalog(db_session):
    """Load TEST_CATALOG into the test database."""
    catalog = parse_catalog(TEST_CATALOG)
    seed_catalog(db_session, catalog)
    db_session.commit()
    return catalog


@pytest.fixture
def recommendation_engine(db_session, seeded_catalog) -> RecommendationEngine:
    """Engine over the seeded test database with a fixed-seed generator."""
    return build_engine(db_session, rng=Random(7))


@pytest.fixture
def user_id() -> str:
    return TEST_USER_ID


@pytest.fixture
def reference_profile() -> dict:
    return dict(REFERENCE_PROFILE)


@pytest.fixture
def auth_settings(monkeypatch):
    """Configure the token verification key for the test run."""
    monkeypatch.setattr(settings, "auth_secret_key", TEST_SECRET_KEY)
    monkeypatch.setattr(settings, "auth_algorithm", "HS256")
    monkeypatch.setattr(settings, "recommendation_seed", 7)


@pytest.fixture
def auth_headers(auth_settings, user_id) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def client(db_session, seeded_catalog, auth_settings):
    """FastAPI TestClient bound to the test database session."""
    from fitplan.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
