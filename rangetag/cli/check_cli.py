"""
Command-line interface for validating JSON records against YAML interval rules.

Usage:
    python -m rangetag.cli.check_cli check --rules <rules.yaml> --record <Name> --input <records.json> [options]
    python -m rangetag.cli.check_cli summary --rules <rules.yaml> [--record <Name>]

Exit codes:
    0  every record passed
    1  at least one record failed
    2  configuration, input or annotation error
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from rangetag.core.rules import RecordValidator, RuleConfigLoader
from rangetag.core.validators import AnnotationError
from rangetag.observability.logger import configure_logging, get_logger, log_operation
from rangetag.settings import ValidatorSettings, load_settings
from rangetag.utils.validation import ConfigValidationError, validate_file_path

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ERROR = 2

JSON_LINES_SUFFIXES = {".jsonl", ".ndjson"}


def read_records(input_path: Path) -> list[dict[str, Any]]:
    """
    Read records from a JSON array, a single JSON object or JSON lines.

    Args:
        input_path: Path to the input file

    Returns:
        List of record mappings

    Raises:
        ValueError: If the file is not valid JSON or holds something other than objects
    """
    with open(input_path) as f:
        if input_path.suffix.lower() in JSON_LINES_SUFFIXES:
            records = [json.loads(line) for line in f if line.strip()]
        else:
            records = json.load(f)

    if isinstance(records, dict):
        records = [records]
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise ValueError(f"{input_path} must contain JSON objects")
    return records


def apply_overrides(settings: ValidatorSettings, args) -> ValidatorSettings:
    """Overlay command-line flags on settings read from the environment."""
    overrides = {}
    if getattr(args, "fail_fast", False):
        overrides["fail_fast"] = True
    if getattr(args, "nil_policy", None):
        overrides["nil_policy"] = args.nil_policy
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.log_format:
        overrides["log_format"] = args.log_format
    return settings.model_copy(update=overrides)


def check_command(args, settings: ValidatorSettings) -> int:
    """
    Execute the check command.

    Args:
        args: Command-line arguments
        settings: Effective settings

    Returns:
        Process exit code
    """
    rules_path = Path(validate_file_path(args.rules, "--rules"))
    input_path = Path(validate_file_path(args.input, "--input"))
    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}")
        return EXIT_ERROR

    schema = RuleConfigLoader(rules_path).load_schema(args.record)
    records = read_records(input_path)
    validator = RecordValidator.from_settings(settings)

    failed = 0
    with log_operation("Validating records", logger=logger, record_type=schema.name):
        for verdict in validator.validate_batch(records, schema):
            if not verdict.passed:
                failed += 1
            print(json.dumps(verdict.model_dump()))

    logger.info(
        f"Validated {len(records)} record(s), {failed} failed",
        extra={"record_type": schema.name, "total_records": len(records), "failed_records": failed},
    )
    return EXIT_FAILED if failed else EXIT_OK


def summary_command(args, settings: ValidatorSettings) -> int:
    """
    Print the intervals configured for one or all records.

    Args:
        args: Command-line arguments
        settings: Effective settings

    Returns:
        Process exit code
    """
    loader = RuleConfigLoader(Path(validate_file_path(args.rules, "--rules")))
    if args.record:
        schemas = {args.record: loader.load_schema(args.record)}
    else:
        schemas = loader.load_schemas()

    validator = RecordValidator.from_settings(settings)
    for schema in schemas.values():
        print(json.dumps(validator.get_annotation_summary({}, schema)))
    return EXIT_OK


COMMANDS = {
    "check": check_command,
    "summary": summary_command,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate records against declarative interval annotations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate a JSON array of records
  python -m rangetag.cli.check_cli check --rules config/rules.yaml --record Param \\
      --input data/params.json

  # Stop at the first failing field and ignore unset fields
  python -m rangetag.cli.check_cli check --rules config/rules.yaml --record Param \\
      --input data/params.jsonl --fail-fast --nil-policy skip

  # Show configured intervals
  python -m rangetag.cli.check_cli summary --rules config/rules.yaml
        """
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: LOG_LEVEL or WARNING)"
    )
    parser.add_argument(
        "--log-format",
        choices=["json", "text"],
        help="Log format (default: LOG_FORMAT or json)"
    )
    parser.add_argument(
        "--env-file",
        help="dotenv file with RANGETAG_* and LOG_* settings"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser("check", help="Validate records")
    check_parser.add_argument(
        "--rules",
        required=True,
        help="Path to the YAML interval rules"
    )
    check_parser.add_argument(
        "--record",
        required=True,
        help="Record name in the rules file"
    )
    check_parser.add_argument(
        "--input",
        required=True,
        help="JSON array / object or JSON-lines file (.jsonl, .ndjson)"
    )
    check_parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Report only the first failing field of each record"
    )
    check_parser.add_argument(
        "--nil-policy",
        choices=["fail", "skip"],
        help="How to treat annotated fields that are missing or null"
    )

    summary_parser = subparsers.add_parser("summary", help="Show configured intervals")
    summary_parser.add_argument(
        "--rules",
        required=True,
        help="Path to the YAML interval rules"
    )
    summary_parser.add_argument(
        "--record",
        help="Only show this record"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_ERROR

    try:
        settings = apply_overrides(load_settings(args.env_file), args)
        configure_logging(level=settings.log_level, format_type=settings.log_format)
        return COMMANDS[args.command](args, settings)
    except AnnotationError as e:
        logger.error(f"Broken interval annotation: {e}")
        return EXIT_ERROR
    except (
        FileNotFoundError,
        KeyError,
        ValueError,
        ConfigValidationError,
        PydanticValidationError,
    ) as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
