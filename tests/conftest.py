from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from targetplan.main import create_app

UNIFORM_WEIGHTS = [1 / 12] * 12
MONTHLY_SERIES = [100.0, 120.0, 150.0, 200.0, 220.0, 250.0, 280.0, 300.0, 320.0, 350.0, 380.0, 400.0]


@pytest.fixture()
def app() -> Generator[FastAPI, None, None]:
    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def uniform_weights() -> list[float]:
    return list(UNIFORM_WEIGHTS)


@pytest.fixture()
def monthly_series() -> list[float]:
    return list(MONTHLY_SERIES)
