"""CLI entry point for the Gmail subject reporter."""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from src.config import ConfigError, ReportConfig
from src.fetcher import SecretsNotFoundError
from src.logging_config import configure_logging
from src.reporter import ExitCode, SubjectReporter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Print the subjects of the most recent Gmail messages"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set logging level (overrides LOG_LEVEL env var)",
    )
    parser.add_argument(
        "--max-results",
        type=int,
        default=None,
        help="Maximum number of messages to list (default: 10)",
    )
    parser.add_argument(
        "--owner",
        default=None,
        help='Mailbox owner; "me" is the authenticated account (default: me)',
    )
    parser.add_argument(
        "--credentials",
        type=Path,
        default=None,
        help="Path to the OAuth client-secret file (credentials.json)",
    )
    parser.add_argument(
        "--token-dir",
        type=Path,
        default=None,
        help="Directory for cached OAuth tokens",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Local port for the OAuth redirect (default: 8888)",
    )
    parser.add_argument(
        "--auth-timeout",
        type=int,
        default=None,
        help="Seconds to wait for browser authorization (default: 300)",
    )
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Print the authorization URL instead of opening a browser",
    )
    parser.add_argument(
        "--non-interactive",
        action="store_true",
        help="Fail instead of starting the browser authorization flow",
    )
    parser.add_argument(
        "--ignore-header-case",
        action="store_true",
        help='Match the "Subject" header name case-insensitively',
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    args = build_parser().parse_args(argv)
    configure_logging(level_override=args.log_level)

    try:
        config = ReportConfig.from_env(
            max_results=args.max_results,
            owner=args.owner,
            credentials_path=args.credentials,
            token_dir=args.token_dir,
            callback_port=args.port,
            auth_timeout_seconds=args.auth_timeout,
            open_browser=False if args.no_browser else None,
            interactive=False if args.non_interactive else None,
            case_sensitive_headers=False if args.ignore_header_case else None,
        )
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return int(ExitCode.INVALID_CONFIG)

    try:
        result = SubjectReporter(config).run()
    except SecretsNotFoundError as e:
        logger.error("%s", e)
        print(f"ERROR: {e}", file=sys.stderr)
        return int(ExitCode.SECRETS_NOT_FOUND)

    return int(result.exit_code)


if __name__ == "__main__":
    sys.exit(main())
