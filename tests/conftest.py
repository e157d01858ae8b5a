# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

import os

# Must be set before anything under lahap is imported
os.environ["ENV"] = "production"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["FERNET_SECRET"] = "MDEyMzQ1Njc4OWFiY2RlZjAxMjM0NTY3ODlhYmNkZWY="
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient

from lahap.main import app
from lahap.models.database import Base, SessionLocal, engine
from lahap.models.child import (
    Child,
    Gender,
    MealDuration,
    TexturePreference,
    EatingPatternChange,
    WeightEnergyLevel,
)
from lahap.models.user import User, Role
from lahap.utils.password_utils import hash_password


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role=Role.USER, password="password123", name=None):
        counter["n"] += 1
        user = User(
            email=f"user{counter['n']}@example.com",
            name=name or f"User {counter['n']}",
            role=role,
            hashed_password=hash_password(password),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def other_user(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(role=Role.ADMIN, name="Admin")



@pytest.fixture
def make_child(db):
    def _make(owner, name="Budi", age=18, texture=TexturePreference.SOFT_MASHED):
        child = Child(
            user_id=owner.id,
            name=name,
            gender=Gender.MALE,
            age=age,
            height=80.5,
            weight=10.2,
            meal_duration=MealDuration.TEN_TO_TWENTY,
            texture_preference=texture,
            eating_pattern_change=EatingPatternChange.NO,
            weight_energy_level=WeightEnergyLevel.NORMAL_WEIGHT,
        )
        db.add(child)
        db.commit()
        db.refresh(child)
        return child

    return _make
