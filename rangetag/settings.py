"""
Runtime settings for the validator and its CLI.

Values come from environment variables, optionally loaded from a dotenv
file first:

    RANGETAG_FAIL_FAST   stop at the first failing field (default: false)
    RANGETAG_NIL_POLICY  "fail" or "skip" for annotated fields holding None
    LOG_LEVEL            DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_FORMAT           "json" or "text"
"""

import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel

ENV_VARS = {
    "fail_fast": "RANGETAG_FAIL_FAST",
    "nil_policy": "RANGETAG_NIL_POLICY",
    "log_level": "LOG_LEVEL",
    "log_format": "LOG_FORMAT",
}


class ValidatorSettings(BaseModel):
    """
    Validator configuration.

    Attributes:
        fail_fast: Stop at the first failing field instead of collecting all failures
        nil_policy: "fail" reports annotated None fields, "skip" ignores them
        log_level: Library log level
        log_format: "json" or "text"
    """

    fail_fast: bool = False
    nil_policy: Literal["fail", "skip"] = "fail"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    log_format: Literal["json", "text"] = "json"

    class Config:
        frozen = True


def load_settings(env_file: str | Path | None = None) -> ValidatorSettings:
    """
    Build settings from the environment.

    Args:
        env_file: Optional dotenv file loaded (overriding) before reading the environment

    Returns:
        ValidatorSettings

    Raises:
        FileNotFoundError: If env_file is given but does not exist
        pydantic.ValidationError: If a variable holds an invalid value
    """
    if env_file is not None:
        env_path = Path(env_file)
        if not env_path.exists():
            raise FileNotFoundError(f"Settings file not found: {env_file}")
        load_dotenv(env_path, override=True)

    values = {}
    for setting, variable in ENV_VARS.items():
        raw = os.getenv(variable)
        if raw is None or raw == "":
            continue
        values[setting] = raw.upper() if setting == "log_level" else raw.lower()
    return ValidatorSettings(**values)
