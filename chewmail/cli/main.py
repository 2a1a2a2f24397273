"""Main CLI entry point for chewmail."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from chewmail import __version__
from chewmail.config.archive_config import ArchiveOptions
from chewmail.config.config_loader import ConfigError, ConfigLoader
from chewmail.services.archiving.run_orchestrator import RunOrchestrator
from chewmail.services.mailstore.base import MailboxError
from chewmail.services.mailstore.store_factory import SUPPORTED_FORMATS
from chewmail.storage.audit_log import AuditLog
from chewmail.utils.log_utils import configure_logging

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="chewmail",
        description="chewmail - archive mail into mailboxes named by message date",
        epilog=(
            "Without --days or --date every message is archived. "
            "Try --dry-run first."
        ),
    )
    parser.add_argument("mailboxes", nargs="+", metavar="MAILBOX", help="Source mailbox(es) to archive from")
    parser.add_argument(
        "-o",
        "--output-box",
        required=True,
        metavar="TEMPLATE",
        help="Destination mailbox name; strftime-style specifiers such as %%Y and %%m are expanded",
    )
    parser.add_argument("-d", "--days", type=int, metavar="N", help="Archive messages older than N days")
    parser.add_argument("-D", "--date", metavar="DATE", help="Archive messages older than DATE (overrides --days)")
    parser.add_argument("-R", "--only-read", action="store_true", help="Only consider messages that have been read")
    parser.add_argument(
        "--delete-immediately",
        action="store_true",
        help="Write mailboxes after every archived message",
    )
    parser.add_argument(
        "--preserve-timestamp",
        action="store_true",
        help="Restore the access and modification times of source mailbox files",
    )
    parser.add_argument("-n", "--dry-run", action="store_true", help="Do not create or modify any mailbox")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Be more verbose (repeatable)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Do not print per-mailbox summaries")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, help="Custom config file path")
    parser.add_argument(
        "--archive-format",
        choices=SUPPORTED_FORMATS,
        help="Format of destination mailboxes (default: from config, else mbox)",
    )
    return parser


def format_validation_error(error: ValidationError) -> str:
    """Turn a pydantic ValidationError into a one-line usage message."""
    messages = []
    for detail in error.errors():
        field = ".".join(str(part) for part in detail["loc"]) or "options"
        message = detail["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        messages.append(f"{field.replace('_', '-')}: {message}")
    return "; ".join(messages)


def run_archive(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    """
    Run the archive command.

    Args:
        args: Parsed command line
        parser: Parser, used to report configuration errors with usage

    Returns:
        Process exit code
    """
    try:
        app_config = ConfigLoader(args.config).load_app_config()
        options = ArchiveOptions(
            output_box=args.output_box,
            days=args.days,
            date=args.date,
            only_read=args.only_read,
            delete_immediately=args.delete_immediately,
            preserve_timestamp=args.preserve_timestamp,
            dry_run=args.dry_run,
            verbose=args.verbose,
            quiet=args.quiet,
            archive_format=args.archive_format or app_config.archive.format,
        )
    except ConfigError as e:
        parser.print_usage(sys.stderr)
        print(f"chewmail: {e}", file=sys.stderr)
        return EXIT_USAGE
    except ValidationError as e:
        parser.print_usage(sys.stderr)
        print(f"chewmail: {format_validation_error(e)}", file=sys.stderr)
        return EXIT_USAGE

    configure_logging(options.verbose)

    audit_log = None
    if app_config.audit.enabled and not options.dry_run:
        audit_log = AuditLog(app_config.audit.get_log_path())

    orchestrator = RunOrchestrator(options, app_config=app_config, audit_log=audit_log)

    try:
        orchestrator.run(args.mailboxes)
    except MailboxError as e:
        print(f"chewmail: {e}", file=sys.stderr)
        return EXIT_FAILURE

    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    return run_archive(args, parser)


if __name__ == "__main__":
    sys.exit(main())
