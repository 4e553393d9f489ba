#!/usr/bin/env python3
"""Cloud SQL execute CLI tool.

Run one SQL statement on a Cloud SQL instance through the Cloud SQL Admin
API and print the result as a table or as JSON.

Usage:
    cloud-sql-execute -i my-instance -d my-db -u user --password pass "SELECT 1"
    cloud-sql-execute -i my-instance -d my-db --auto-iam-authn "SELECT 1"
    cloud-sql-execute -i my-instance -f json "SELECT * FROM users"
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import IO

from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .admin_client import CloudSQLAdmin
from .environment import build_environment
from .errors import CloudSqlExecuteError, ProjectResolutionError, TransportError
from .formatter import format_response, log_metadata
from .options import (
    RawOptions,
    ResolvedOptions,
    check_required,
    merge_options,
    validate_auth,
)
from .request_builder import build_payload, redact_payload

LOGGER_NAME = "cloud_sql_execute"

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Send package logs to stderr: everything when verbose, errors otherwise."""
    package_logger = logging.getLogger(LOGGER_NAME)
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)

    if verbose:
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            log_time_format="%H:%M:%S",
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.setLevel(logging.DEBUG)
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        package_logger.setLevel(logging.ERROR)

    package_logger.addHandler(handler)
    package_logger.propagate = False


def resolve_project(options: ResolvedOptions, client: CloudSQLAdmin) -> str:
    """Use the given project or fall back to the ambient default."""
    if options.project:
        return options.project

    logger.info("No project specified, attempting to detect default project...")
    project_id = client.get_default_project_id()
    if not project_id:
        raise ProjectResolutionError()

    logger.info("Using detected project: %s", project_id)
    return project_id


def execute_query(
    options: ResolvedOptions,
    client: CloudSQLAdmin,
    out: IO[str] | None = None,
) -> None:
    """Validate, send the statement and write the formatted result."""
    out = out or sys.stdout

    auth = validate_auth(options)
    project_id = resolve_project(options, client)

    payload = build_payload(options.query, options, auth)
    logger.debug("Request payload: %s", json.dumps(redact_payload(payload)))
    logger.info("Executing SQL on %s/%s...", project_id, options.instance)

    response = client.execute_sql(project_id, options.instance, payload)
    logger.debug("Response received: %s", json.dumps(response))

    out.write(format_response(response, options.format))
    out.flush()
    if options.format == "text":
        log_metadata(response)


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cloud-sql-execute",
        description="Execute SQL queries on Google Cloud SQL instances",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Auto-detect project with database authentication
  cloud-sql-execute -i my-instance -d my-db -u user --password pass "SELECT 1"

  # Specify project explicitly with verbose logging
  cloud-sql-execute -p my-project -i my-instance -d my-db -u user --password pass -v "SELECT 1"

  # IAM authentication (quiet mode, only show results)
  cloud-sql-execute -i my-instance -d my-db --auto-iam-authn "SELECT 1"

  # Access token with verbose output
  cloud-sql-execute -i my-instance -d my-db --access-token TOKEN -v "SELECT 1"

  # Environment variables (minimal command line)
  export CLOUD_SQL_INSTANCE=my-instance
  export CLOUD_SQL_DATABASE=my-db
  export CLOUD_SQL_AUTO_IAM_AUTHN=true
  cloud-sql-execute "SELECT 1"

Environment Variables:
  GOOGLE_CLOUD_PROJECT      Google Cloud Project ID
  CLOUD_SQL_INSTANCE        Cloud SQL Instance ID (required)
  CLOUD_SQL_DATABASE        Database name
  CLOUD_SQL_USER            Database username
  CLOUD_SQL_PASSWORD        Database password
  CLOUD_SQL_ACCESS_TOKEN    IAM access token
  CLOUD_SQL_SECRET_PATH     Secret Manager path
  CLOUD_SQL_AUTO_IAM_AUTHN  IAM authentication (true/1)
  CLOUD_SQL_FORMAT          Output format (json/text)
  CLOUD_SQL_LIMIT           Row limit (number)
  CLOUD_SQL_VERBOSE         Verbose logging (true/1)

  Command line arguments take precedence over environment variables,
  which take precedence over values in .env (or --env-file).

Project ID Detection:
  Without -p/--project or GOOGLE_CLOUD_PROJECT the default project is
  read from Application Default Credentials.

Logging:
  By default only errors and query results are shown.
  Use -v/--verbose or CLOUD_SQL_VERBOSE=true for detailed logs on stderr.

Authentication Methods:
  1. Database user: --user + --password
  2. Database user with Secret Manager: --user + --secret-path
  3. IAM authentication: --auto-iam-authn
  4. IAM access token: --access-token

Run 'gcloud auth application-default login' to authenticate.
        """,
    )

    parser.add_argument("query", help="SQL query to execute")
    parser.add_argument(
        "--project",
        "-p",
        help="Google Cloud Project ID (auto-detected if not specified)",
    )
    parser.add_argument("--instance", "-i", help="Cloud SQL Instance ID")
    parser.add_argument("--database", "-d", help="Database name")
    parser.add_argument("--user", "-u", help="Database user name")
    parser.add_argument("--password", help="Database password")
    parser.add_argument("--access-token", help="IAM access token for authentication")
    parser.add_argument(
        "--secret-path",
        help="Secret Manager path for password "
        "(projects/{project}/secrets/{secret}/versions/{version})",
    )
    parser.add_argument(
        "--auto-iam-authn",
        action="store_true",
        help="Use IAM authentication with API caller identity",
    )
    parser.add_argument(
        "--format",
        "-f",
        help="Output format: json|text (default: text)",
    )
    parser.add_argument(
        "--limit",
        "-l",
        help="Maximum number of rows to return",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        help="Read environment defaults from this file (default: ./.env if present)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def main(argv: list[str] | None = None, environ: Mapping[str, str] | None = None) -> None:
    """Main entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        if environ is None:
            environ = build_environment(args.env_file)

        options = merge_options(RawOptions.from_namespace(args), environ)
        configure_logging(options.verbose)
        check_required(options)

        execute_query(options, CloudSQLAdmin())
    except TransportError as e:
        logger.error("Execution failed: %s - Details: %s", e, json.dumps(e.body))
        sys.exit(1)
    except CloudSqlExecuteError as e:
        for line in str(e).splitlines():
            logger.error(line)
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
