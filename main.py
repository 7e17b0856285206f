#!/usr/bin/env python
# ============================================================================
# PGAUDITOR - COMMAND LINE ENTRY POINT
# ============================================================================
# STATUS: Core - CLI entry point
# PURPOSE: Introspect one table read-only and print its audit DDL
# CREATED: 18 OCT 2026
# USAGE:
#   pgauditor --table public.user --username postgres
#   pgauditor -t app.account -U postgres --auth application -n
#   pgauditor -t app.account -U postgres --drop
# ============================================================================
"""
PgAuditor: the simplest way to track changes in PostgreSQL databases.

PgAuditor will not modify your database regardless of the selected
options: the session is opened read-only, the specified table is
introspected, and DDL is printed to stdout. Nothing more. Executing the
DDL is left to a human, who gets the chance to review it first. The
generated DDL never drops audit tables or their columns; captured data
that is no longer needed must be purged manually.
"""

import argparse
import sys
from typing import Optional, Sequence

import psycopg

from __version__ import __version__
from core.config import AuditorConfig, DEFAULT_HOST, DEFAULT_PORT
from core.contracts import AuthenticationMode
from core.errors import AuditorError
from core.logging import configure_logging, get_logger
from core.models import DEFAULT_CONFIG_PROPERTY
from core.schema import DdlSynthesizer
from infrastructure import PostgreSQLRepository, PostgresSchemaInspector

logger = get_logger("pgauditor")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    # -h is --host (as in psql), so help is --help only
    parser = argparse.ArgumentParser(
        prog="pgauditor",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        epilog="""
Environment Variables:
  PGHOST        Database host (default: localhost)
  PGPORT        Database port (default: 5432)
  PGDATABASE    Database name
  PGUSER        Database user
  PGPASSWORD    Database password (preferred over --password)
  LOG_FORMAT    "json" for JSON diagnostics on stderr

Flags take precedence over environment variables.
        """,
    )
    parser.add_argument("--help", action="help", help="Show this help message and exit")
    parser.add_argument(
        "-t", "--table",
        help="Audited table, optionally schema-qualified. Without a schema, public is assumed",
    )
    parser.add_argument(
        "-a", "--auth",
        choices=[m.value for m in AuthenticationMode],
        type=str.lower,
        default=AuthenticationMode.DATABASE.value,
        help=(
            "How the audit log identifies the user. application: a configuration parameter "
            "set by the client (see --config-property); database: the database session user; "
            "anonymous: no identity is recorded. Default: database"
        ),
    )
    parser.add_argument(
        "-c", "--config-property",
        default=DEFAULT_CONFIG_PROPERTY,
        help=(
            "Configuration parameter naming the current user when --auth is application. "
            f"Default: {DEFAULT_CONFIG_PROPERTY}"
        ),
    )
    parser.add_argument(
        "-D", "--drop",
        action="store_true",
        help="Drop the audit triggers and functions only. Audit table, sequence and enum type are kept",
    )
    parser.add_argument(
        "-n", "--application-name",
        action="store_true",
        help="Capture the PostgreSQL application_name in the audit table",
    )
    parser.add_argument(
        "-v", "--version",
        action="store_true",
        help="Print the PgAuditor and psycopg versions",
    )
    parser.add_argument(
        "-V", "--verbose",
        action="store_true",
        help="Write diagnostic information to stderr",
    )
    parser.add_argument(
        "--log-format",
        choices=["human", "json"],
        default="human",
        help="Format of diagnostics written to stderr",
    )
    parser.add_argument("-h", "--host", help=f"Database host (PGHOST, default: {DEFAULT_HOST})")
    parser.add_argument("-p", "--port", type=int, help=f"Database port (PGPORT, default: {DEFAULT_PORT})")
    parser.add_argument("-d", "--dbname", help="Database name (PGDATABASE)")
    parser.add_argument("-U", "--username", help="Database user (PGUSER)")
    parser.add_argument("-W", "--password", help="Database password (PGPASSWORD is preferred)")
    return parser


def version_text() -> str:
    return f"PgAuditor {__version__} (psycopg {psycopg.__version__})"


def run(config: AuditorConfig, repo: Optional[PostgreSQLRepository] = None) -> str:
    """
    Introspect the configured table and return the rendered script.

    Raises:
        AuditorError: Any configuration, catalog or drift failure
    """
    table = config.table_identity()
    options = config.to_options()

    repo = repo or PostgreSQLRepository(config.connection)
    with repo:
        inspector = PostgresSchemaInspector(repo)
        synthesizer = DdlSynthesizer(inspector, table, options)
        script = synthesizer.synthesize()
        return script.render(repo.connection)


def main(argv: Optional[Sequence[str]] = None, environ=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(version_text())
        return EXIT_OK

    if not args.table:
        parser.print_usage(sys.stderr)
        print("pgauditor: error: the following arguments are required: -t/--table", file=sys.stderr)
        return EXIT_USAGE

    configure_logging(
        level="DEBUG" if args.verbose else "WARNING",
        json_output=args.log_format == "json",
    )

    try:
        config = AuditorConfig.from_args(args, environ=environ)
        logger.info(f"{version_text()} connecting to {config.connection.safe_target}")
        ddl = run(config)
    except AuditorError as e:
        logger.error(str(e))
        print(f"pgauditor: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except psycopg.Error as e:
        logger.error(f"PostgreSQL error: {e}")
        print(f"pgauditor: PostgreSQL error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    sys.stdout.write(ddl)
    return EXIT_OK


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
