"""
Record validation orchestration and annotation configuration.
"""

from .rule_config import RuleConfigBuilder, RuleConfigLoader
from .rule_engine import (
    RecordValidationError,
    RecordValidator,
    ensure_valid,
    validate,
)

__all__ = [
    "RecordValidator",
    "RecordValidationError",
    "validate",
    "ensure_valid",
    "RuleConfigLoader",
    "RuleConfigBuilder",
]
