import os
from datetime import datetime

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rewards_platform.db import Base, get_db
from rewards_platform.main import app
from rewards_platform.models.business import Business
from rewards_platform.models.reward import Reward
from rewards_platform.schemas.redemption import RedemptionCreate


T0 = datetime(2026, 3, 1, 12, 0, 0)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    try:
        yield factory
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def business(db):
    business = Business(name="Bull City Scoops", city="Durham", state="NC", zip_code="27701")
    db.add(business)
    db.commit()
    return business


@pytest.fixture
def make_reward(db, business):
    def _make_reward(**overrides):
        values = {
            "business_id": business.id,
            "reward_source": "LOCAL_BUSINESS",
            "title": "Free kids cone",
            "point_cost": 100,
            "status": "ACTIVE",
            "is_active": True,
            "current_redemptions": 0,
            "redemptions": 0,
        }
        values.update(overrides)
        reward = Reward(**values)
        db.add(reward)
        db.commit()
        return reward

    return _make_reward


@pytest.fixture
def redemption_request():
    def _redemption_request(reward, **overrides):
        values = {
            "reward_id": reward.id,
            "user_id": "kid-1",
            "family_id": "family-1",
            "points_to_spend": reward.point_cost,
        }
        values.update(overrides)
        return RedemptionCreate(**values)

    return _redemption_request
