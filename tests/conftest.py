"""Shared fixtures for calculator tests."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from handcalc.app import create_app
from handcalc.calculator import Calculator, CalculatorState, run
from handcalc.keys import parse_key
from handcalc.store import SessionStore


def state_after(*labels: str) -> CalculatorState:
    """State reached from the initial state by pressing ``labels``."""
    return run(parse_key(label) for label in labels)


@pytest.fixture
def calc() -> Calculator:
    return Calculator()


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def client(store) -> TestClient:
    return TestClient(create_app(store=store))
