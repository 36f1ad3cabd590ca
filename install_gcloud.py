#!/usr/bin/env python3
"""
Entry point for the Google Cloud SDK dev-container feature.

Ensures the gcloud CLI is installed and installs the additional components
requested through the `additionalComponents` feature option.
"""

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from gcloud_common.logging_config import setup_logging
from gcloud_installer.errors import FeatureInstallError
from gcloud_installer.orchestrator import report_component_status, run_provisioning
from gcloud_setup.config_loader import load_feature_settings
from gcloud_setup.config_models import LOG_FORMATS


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Command-line arguments. If None, sys.argv[1:] is used.

    Returns:
        Parsed arguments. `command` defaults to "install".
    """
    parser = argparse.ArgumentParser(
        description="Install the Google Cloud SDK and additional gcloud components"
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--config-file",
        default=None,
        help="Optional YAML file with feature settings",
    )
    parser.add_argument(
        "--additional-components",
        default=None,
        help="Comma-separated gcloud component ids (overrides the environment)",
    )
    parser.add_argument(
        "--target-user",
        default=None,
        help="Account that should own the SDK when running as root",
    )
    parser.add_argument(
        "--skip-sdk",
        action="store_true",
        help="Do not install the SDK; only manage components",
    )
    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=None,
        help="Console log format",
    )

    subparsers = parser.add_subparsers(
        dest="command", help="Command to execute"
    )
    subparsers.add_parser(
        "install", help="Install the SDK and missing components (default)"
    )
    subparsers.add_parser(
        "status", help="Report which requested components are installed"
    )

    parsed = parser.parse_args(args)
    if parsed.command is None:
        parsed.command = "install"
    return parsed


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Args:
        args: Command-line arguments. If None, sys.argv[1:] is used.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parsed_args = parse_args(args)

    try:
        settings = load_feature_settings(
            cli_args=parsed_args, config_file_path=parsed_args.config_file
        )
    except ValidationError as e:
        setup_logging("INFO")
        logging.getLogger("gcloud-feature").error(f"Invalid configuration: {e}")
        return 1

    logger = setup_logging(settings.log_level, settings.log_format)

    try:
        if parsed_args.command == "status":
            return 0 if report_component_status(settings, logger) else 1

        run_provisioning(settings, logger)
        logger.info("Google Cloud SDK provisioning finished.")
        return 0
    except FeatureInstallError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
