"""
Input validation utilities for configuration and CLI arguments.

Validates field identifiers declared in YAML schemas and file paths passed
on the command line.
"""

import re


class ConfigValidationError(ValueError):
    """Raised when configuration input validation fails."""
    pass


def validate_field_identifier(identifier: str, field_name: str = "identifier") -> str:
    """
    Validate a record or field identifier.

    Identifiers must be usable as self-reference targets, so they follow the
    same rule as the name part of self.<name>: letters, digits and
    underscores, not starting with a digit.

    Args:
        identifier: The identifier to validate
        field_name: Name of the input being validated (for error messages)

    Returns:
        The validated identifier (stripped of whitespace)

    Raises:
        ConfigValidationError: If validation fails

    Examples:
        >>> validate_field_identifier("max_retries")
        'max_retries'
        >>> validate_field_identifier("C")
        'C'
        >>> validate_field_identifier("bad-name")  # doctest: +SKIP
        ConfigValidationError: identifier contains invalid characters
    """
    if not identifier or not isinstance(identifier, str):
        raise ConfigValidationError(f"{field_name} must be a non-empty string")

    identifier = identifier.strip()

    if not re.match(r"^[A-Za-z_][A-Za-z0-9_]*$", identifier):
        raise ConfigValidationError(
            f"{field_name} '{identifier}' contains invalid characters. "
            "Identifiers must start with a letter or underscore and contain only "
            "alphanumeric characters and underscores."
        )

    if len(identifier) > 255:
        raise ConfigValidationError(f"{field_name} exceeds maximum length of 255 characters")

    return identifier


def validate_file_path(file_path: str, field_name: str = "file_path") -> str:
    """
    Validate a file path given on the command line.

    Args:
        file_path: The file path to validate
        field_name: Name of the argument (for error messages)

    Returns:
        The validated file path (stripped of whitespace)

    Raises:
        ConfigValidationError: If validation fails

    Examples:
        >>> validate_file_path("config/rules.yaml")
        'config/rules.yaml'
    """
    if not file_path or not isinstance(file_path, str):
        raise ConfigValidationError(f"{field_name} must be a non-empty string")

    file_path = file_path.strip()

    if not file_path:
        raise ConfigValidationError(f"{field_name} cannot be empty or whitespace-only")

    if "\x00" in file_path:
        raise ConfigValidationError(f"{field_name} contains null bytes")

    if len(file_path) > 4096:  # Linux PATH_MAX
        raise ConfigValidationError(f"{field_name} exceeds maximum length of 4096 characters")

    return file_path
