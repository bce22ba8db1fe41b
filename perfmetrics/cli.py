"""Command-line interface for publishing personal metrics.

Loads ``config.yml`` and ``data.yml``, resolves session settings from the
config, CLI flags and environment, then runs the publish pipeline: assemble,
preview, confirm, publish.

Usage
-----
    perfmetrics --config config.yml --data data.yml
    perfmetrics --skip-publish
    perfmetrics --non-interactive --region us-east-1 --profile personal
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from .__version__ import __version__
from .config.models import (
    AppConfig,
    EnvSettings,
    SessionSettings,
    load_env_settings,
)
from .confirm import ConfirmationGate
from .domain.models import load_data
from .errors import ConfigurationError, PerfMetricsError
from .observability import setup_logging
from .pipeline import run_pipeline
from .publisher import CloudWatchPublisher, create_cloudwatch_client

logger = logging.getLogger("perfmetrics")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def _build_publisher(settings: SessionSettings) -> CloudWatchPublisher:
    return CloudWatchPublisher(create_cloudwatch_client(settings))


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the ``perfmetrics`` command."""
    parser = argparse.ArgumentParser(
        prog="perfmetrics",
        description="Publish personal performance metrics to CloudWatch",
    )
    parser.add_argument(
        "--config",
        default="config.yml",
        help="Path to the YAML config (default config.yml)",
    )
    parser.add_argument(
        "--data",
        default="data.yml",
        help="Path to the YAML data for this cycle (default data.yml)",
    )
    parser.add_argument(
        "--region", help="AWS Region to push metrics (env AWS_REGION)"
    )
    parser.add_argument(
        "--profile", help="Configured AWS profile to use (env AWS_PROFILE)"
    )
    parser.add_argument(
        "--skip-publish",
        dest="skip_publish",
        action="store_true",
        help="Skip publishing metrics",
    )
    parser.add_argument(
        "--non-interactive",
        dest="non_interactive",
        action="store_true",
        help="Perform work without interactions",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=[
            "CRITICAL",
            "ERROR",
            "WARNING",
            "INFO",
            "DEBUG",
        ],
        help="Logging level (overrides environment)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (once sets INFO, twice DEBUG)",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def _effective_level(args: argparse.Namespace, env: EnvSettings) -> str:
    if args.log_level:
        return args.log_level
    if args.verbose >= 2:
        return "DEBUG"
    if args.verbose == 1:
        return "INFO"
    return env.PERFMETRICS_LOG_LEVEL.upper()


def run(argv: Optional[Sequence[str]] = None) -> int:
    """Parse arguments, run one publish cycle, and return an exit code."""
    args = build_parser().parse_args(argv)
    try:
        env = load_env_settings()
    except ConfigurationError as exc:
        setup_logging(args.log_level or "WARNING")
        logger.error("%s", exc)
        return EXIT_FAILURE
    setup_logging(_effective_level(args, env))

    try:
        config = AppConfig.load(Path(args.config))
        settings = SessionSettings.resolve(
            config,
            cli_region=args.region,
            cli_profile=args.profile,
            cli_skip_publish=args.skip_publish,
            cli_non_interactive=args.non_interactive,
            env=env,
        )
        observed = load_data(Path(args.data))
        outcome = run_pipeline(
            config,
            observed,
            settings,
            publisher_factory=_build_publisher,
            gate=ConfirmationGate(non_interactive=settings.non_interactive),
        )
    except PerfMetricsError as exc:
        logger.error("%s", exc)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_INTERRUPTED

    logger.info("cli.finished", extra={"outcome": outcome.value})
    return EXIT_OK


def main() -> None:
    """CLI entrypoint for ``perfmetrics``."""
    raise SystemExit(run())


if __name__ == "__main__":
    main()
