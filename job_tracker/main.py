"""Command line front end for the job application tracker."""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

from filelock import FileLock, Timeout

from .config import get_config, load_config
from .models import (
    FIELD_NAMES,
    KNOWN_LOCATIONS,
    ApplicationInput,
    Category,
    EmploymentType,
    JobApplicationRecord,
    Position,
    Source,
    Status,
)
from .mutations import RecordValidationError, to_input
from .query import QueryFilters, SortSpec, ViewState
from .spreadsheet import ImportParseError
from .storage import SQLiteStore
from .tracker import JobTracker

# CLI option -> ApplicationInput field
FORM_OPTIONS = {
    "category": "category",
    "source": "source",
    "name": "contact_name",
    "company": "organization_name",
    "end_client": "end_client",
    "location": "location",
    "position": "position",
    "job_type": "employment_type",
    "email": "email",
    "phone": "phone",
    "date": "applied_date",
    "link": "invitation_link",
    "interview_time": "interview_time",
    "notes": "notes",
    "status": "status",
}


def setup_logging() -> None:
    """Configure logging for the application."""
    config = get_config()
    config.log_dir.mkdir(parents=True, exist_ok=True)
    log_file = config.log_dir / "app.log"

    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(sys.stderr),
        ],
    )


def format_date_display(value: date) -> str:
    """Render a date as e.g. "Jan-10-2024"."""
    return value.strftime("%b-%d-%Y")


def _values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


def add_form_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--category", choices=_values(Category))
    parser.add_argument("--source", choices=_values(Source))
    parser.add_argument("--name", help="Contact full name (required)")
    parser.add_argument("--company", help="Company name (required)")
    parser.add_argument("--end-client")
    parser.add_argument("--location", help=f"e.g. {', '.join(KNOWN_LOCATIONS)}")
    parser.add_argument("--position", choices=_values(Position))
    parser.add_argument("--job-type", choices=_values(EmploymentType))
    parser.add_argument("--email", help="One or more comma-separated addresses")
    parser.add_argument("--phone")
    parser.add_argument("--date", type=date.fromisoformat, help="Applied date, YYYY-MM-DD")
    parser.add_argument("--link", help="Invitation link")
    parser.add_argument("--interview-time")
    parser.add_argument("--notes")
    parser.add_argument("--status", choices=_values(Status))


def form_values(args: argparse.Namespace) -> dict:
    """Form fields given on the command line."""
    values = {}
    for option, field in FORM_OPTIONS.items():
        value = getattr(args, option)
        if value is not None:
            values[field] = value
    return values


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Track job applications")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    commands = parser.add_subparsers(dest="command", required=True)

    list_parser = commands.add_parser("list", help="Show entries")
    list_parser.add_argument("--search", default="")
    list_parser.add_argument("--category", choices=_values(Category))
    list_parser.add_argument("--position", choices=_values(Position))
    list_parser.add_argument("--status", choices=_values(Status))
    list_parser.add_argument("--date", type=date.fromisoformat)
    list_parser.add_argument(
        "--sort",
        choices=sorted(set(FIELD_NAMES) | set(FIELD_NAMES.values())),
        metavar="FIELD",
        help="Field to sort by (default from config)",
    )
    direction = list_parser.add_mutually_exclusive_group()
    direction.add_argument("--asc", dest="direction", action="store_const", const="asc")
    direction.add_argument("--desc", dest="direction", action="store_const", const="desc")

    add_form_arguments(commands.add_parser("add", help="Add an entry"))

    edit_parser = commands.add_parser("edit", help="Edit an entry")
    edit_parser.add_argument("id")
    add_form_arguments(edit_parser)

    delete_parser = commands.add_parser("delete", help="Delete an entry")
    delete_parser.add_argument("id")
    delete_parser.add_argument("--yes", action="store_true", help="Skip confirmation")

    import_parser = commands.add_parser("import", help="Import entries from an Excel or CSV file")
    import_parser.add_argument("file", type=Path)

    export_parser = commands.add_parser("export", help="Export entries to an Excel file")
    export_parser.add_argument("--dir", type=Path, help="Output directory")

    commands.add_parser("usage", help="Show storage usage")

    return parser


def print_entries(records: Sequence[JobApplicationRecord]) -> None:
    if not records:
        print("No entries found.")
        return

    for record in records:
        company = record.organization_name
        if record.end_client:
            company = f"{company} / {record.end_client}"
        print(
            f"{record.id[:8]}  {format_date_display(record.applied_date)}  "
            f"{record.status.value:<21} {record.contact_name} @ {company}  "
            f"[{record.position.value}, {record.employment_type.value}]"
            f"{'  ' + record.location if record.location else ''}"
        )


def resolve_id(tracker: JobTracker, prefix: str) -> Optional[str]:
    """Full id for an id or unique id prefix."""
    matches = [record.id for record in tracker.records if record.id.startswith(prefix)]
    return matches[0] if len(matches) == 1 else None


def run_command(args: argparse.Namespace, tracker: JobTracker) -> int:
    logger = logging.getLogger(__name__)
    config = get_config()

    if args.command == "list":
        state = ViewState(
            search_term=args.search,
            filters=QueryFilters(
                category=args.category,
                position=args.position,
                status=args.status,
                applied_date=args.date,
            ),
            sort=SortSpec(
                key=args.sort or config.default_sort_key,
                direction=args.direction or config.default_sort_direction,
            ),
        )
        records = tracker.visible(state)
        print_entries(records)
        print(f"{len(records)} of {len(tracker.records)} entries")

    elif args.command == "add":
        record = tracker.create(ApplicationInput(**form_values(args)))
        print(f"Added {record.id}")

    elif args.command == "edit":
        record_id = resolve_id(tracker, args.id)
        if record_id is None:
            print(f"No single entry matches {args.id}", file=sys.stderr)
            return 1
        current = to_input(tracker.get(record_id))
        data = ApplicationInput(**{**current.model_dump(), **form_values(args)})
        tracker.update(record_id, data)
        print(f"Updated {record_id}")

    elif args.command == "delete":
        record_id = resolve_id(tracker, args.id)
        if record_id is None:
            print(f"No single entry matches {args.id}", file=sys.stderr)
            return 1
        if not args.yes:
            try:
                answer = input("Delete this entry? This cannot be undone. [y/N] ")
            except EOFError:
                # Closed stdin counts as "no"
                print()
                answer = ""
            if answer.strip().lower() not in ("y", "yes"):
                print("Cancelled")
                return 0
        tracker.remove(record_id)
        print(f"Deleted {record_id}")

    elif args.command == "import":
        count = tracker.import_file(args.file)
        print(f"Successfully imported {count} entries!")

    elif args.command == "export":
        path = tracker.export_file(args.dir or config.export_dir)
        print(f"Exported {len(tracker.records)} entries to {path}")

    elif args.command == "usage":
        usage = tracker.usage()
        print(f"Using about {usage.kb} KB ({usage.bytes} bytes) for {len(tracker.records)} entries")

    if not tracker.last_save_ok:
        logger.warning("Changes are kept in memory but could not be saved")

    usage = tracker.usage()
    if usage.warning:
        print(
            f"Storage warning: you are using about {usage.kb} KB. "
            "Consider exporting data if it grows large.",
            file=sys.stderr,
        )

    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point with concurrency protection."""
    args = build_parser().parse_args(argv)

    try:
        load_config(args.config)
        setup_logging()
    except FileNotFoundError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    logger = logging.getLogger(__name__)
    config = get_config()

    try:
        with FileLock(config.lock_file, timeout=10):
            tracker = JobTracker(
                SQLiteStore(config.data_path),
                storage_key=config.storage_key,
                warning_bytes=config.storage_warning_bytes,
                sheet_name=config.export_sheet_name,
            )
            return run_command(args, tracker)

    except Timeout:
        logger.warning("Could not acquire lock - another instance is running")
        return 1

    except (RecordValidationError, ImportParseError) as e:
        logger.error(f"{args.command} rejected: {e}")
        print(str(e), file=sys.stderr)
        return 1

    except Exception as e:
        logger.exception(f"Command failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
