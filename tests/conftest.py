"""
Pytest configuration and fixtures for rangetag tests

This module provides shared fixtures for unit and integration tests.
"""
import os
import textwrap
from pathlib import Path

import pytest

from rangetag.core.models import RecordSchema
from rangetag.core.rules import RuleConfigBuilder


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that run the CLI end to end"
    )


# =======================
# ENVIRONMENT FIXTURES
# =======================

@pytest.fixture(scope="session", autouse=True)
def clean_settings_env():
    """Keep settings variables from the outer environment out of tests"""
    for variable in ("RANGETAG_FAIL_FAST", "RANGETAG_NIL_POLICY", "LOG_LEVEL", "LOG_FORMAT"):
        os.environ.pop(variable, None)


# =======================
# SCHEMA FIXTURES
# =======================

@pytest.fixture
def param_schema() -> RecordSchema:
    """
    Mapping schema with one field of every category

    A int [1,3), B float [~,3.3), C uint [2,45435], D duration [500milli,3h],
    E uint (unconstrained), F uint [self.C,self.E]
    """
    return (
        RuleConfigBuilder("Param")
        .add_int("A", "[1,3)")
        .add_float("B", "[~,3.3)")
        .add_uint("C", "[2,45435]")
        .add_duration("D", "[500milli,3h]")
        .add_uint("E")
        .add_uint("F", "[self.C,self.E]")
        .build()
    )


@pytest.fixture
def valid_param() -> dict:
    """A Param mapping that satisfies every interval"""
    return {"A": 1, "B": 2.5, "C": 10, "D": 60000, "E": 100, "F": 50}


RULES_YAML = """
records:
  Param:
    A: {type: int, valid: "[1,3)"}
    B: {type: float, valid: "[~,3.3)"}
    C: {type: uint, valid: "[2,45435]"}
    D: {type: duration, valid: "[500milli,3h]"}
    E: uint
    F: {type: uint, valid: "[self.C,self.E]"}
  Broken:
    A: {type: int, valid: "{1,3]"}
  Job:
    name: {type: str, valid: "[1,8]"}
    limits:
      type: record
      fields:
        retries: {type: int, valid: "[0,5]"}
"""


@pytest.fixture
def rules_file(tmp_path) -> Path:
    """YAML rules file with a valid, a nested and a broken record"""
    path = tmp_path / "rules.yaml"
    path.write_text(textwrap.dedent(RULES_YAML))
    return path
