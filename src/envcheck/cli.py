"""Command-line entry point: validate an environment and report every failure."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from envcheck.core.config import Settings
from envcheck.core.errors import SchemaError
from envcheck.environment import load_environment
from envcheck.report import export_report, format_report


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="envcheck",
        description="Validate process configuration against a schema before starting a service.",
    )
    parser.add_argument(
        "--schema",
        type=str,
        default=None,
        help="Path to a YAML schema. Defaults to the built-in server schema.",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Path to a .env file to read in addition to the process environment.",
    )
    parser.add_argument(
        "--no-os-environ",
        action="store_true",
        help="Ignore the process environment and read only from files.",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first violation instead of reporting all of them.",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Path to write the JSON validation report.",
    )
    return parser.parse_args(argv)


def _apply_args(settings: Settings, args: argparse.Namespace) -> Settings:
    if args.schema:
        settings.schema_path = args.schema
    if args.env_file:
        settings.source.env_file = args.env_file
    if args.no_os_environ:
        settings.source.include_os_environ = False
    if args.fail_fast:
        settings.validation.fail_fast = True
    return settings


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    # Load settings from environment, then let flags override them.
    settings = _apply_args(Settings(), args)
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        environment = load_environment(settings=settings)
    except SchemaError as exc:
        print(f"ERROR: invalid schema: {exc}")
        return 2

    outcome = await environment.validate()

    print(format_report(outcome, environment.deprecations, schema_name=environment.schema.name))

    if args.output:
        export_report(
            outcome, args.output, environment.deprecations, schema_name=environment.schema.name
        )
        print(f"Report written to {args.output}")

    return 0 if outcome.is_valid else 1


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
