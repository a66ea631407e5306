"""Shared fixtures: one in-memory SQLite database, reset for every test."""

import os
import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Settings are loaded at import time, so this must happen before any rentacar imports.
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ.setdefault("LOG_LEVEL", "WARNING")

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from rentacar import models  # noqa: E402,F401  # ensure models are registered
from rentacar.database import Base, SessionLocal, engine  # noqa: E402
from rentacar.models.customer import Customer  # noqa: E402
from rentacar.models.vehicle import Vehicle, VehicleStatus  # noqa: E402


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
def make_customer(db):
    counter = {"n": 0}

    def _make(first_name="Erika", last_name="Mustermann", email=None):
        counter["n"] += 1
        customer = Customer(
            first_name=first_name,
            last_name=last_name,
            email=email or f"customer{counter['n']}@example.com",
        )
        db.add(customer)
        db.commit()
        db.refresh(customer)
        return customer

    return _make


@pytest.fixture
def make_vehicle(db):
    counter = {"n": 0}

    def _make(category="midsize", location="Berlin", mileage=10000,
              daily_price="60.00", status=VehicleStatus.AVAILABLE.value, license_plate=None):
        counter["n"] += 1
        vehicle = Vehicle(
            license_plate=license_plate or f"B-AB {1000 + counter['n']}",
            brand="BMW",
            model="320d",
            category=category,
            year=2022,
            mileage=mileage,
            location=location,
            daily_price=Decimal(daily_price),
            status=status,
        )
        db.add(vehicle)
        db.commit()
        db.refresh(vehicle)
        return vehicle

    return _make


@pytest.fixture
def client(db):
    from rentacar.main import create_app

    app = create_app()
    app.config["TESTING"] = True
    with app.test_client() as test_client:
        yield test_client
