"""Manage the shared team schedule from the command line.

Reads and writes the same JSON storage as the web front end, acting as the
user given by --user/--role (or TEAMSCHEDULE_USER / TEAMSCHEDULE_ROLE).

Add:      python scripts/manage_schedules.py add data/zhangsan.json
Rename:   python scripts/manage_schedules.py add data/upload.json --student 张三
Force:    python scripts/manage_schedules.py add data/upload.json --yes
Remove:   python scripts/manage_schedules.py remove 张三
Roster:   python scripts/manage_schedules.py list
Clashes:  python scripts/manage_schedules.py conflicts
Export:   python scripts/manage_schedules.py export --output data/export.json
Week:     python scripts/manage_schedules.py week --date 2024-09-02 --search 高数
Day:      python scripts/manage_schedules.py day --date 2024-09-02

Exit codes:
  0 = success (JSON or table on stdout)
  1 = error or rejected operation (message on stderr)
"""

import argparse
import json
import os
import sys
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.teamschedule.config import get_config  # noqa: E402
from src.teamschedule.conflicts import format_conflicts  # noqa: E402
from src.teamschedule.logging import setup_logging  # noqa: E402
from src.teamschedule.models import Conflict, CurrentUser, Role  # noqa: E402
from src.teamschedule.storage import JsonFileStorage  # noqa: E402
from src.teamschedule.store import ScheduleStore, export_filename  # noqa: E402
from src.teamschedule.views import (  # noqa: E402
    DayColumn,
    PeriodCell,
    TeamView,
    weekday_label,
)


def _log(msg: str) -> None:
    """Write diagnostic messages to stderr so stdout stays clean for JSON."""
    print(msg, file=sys.stderr)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="Manage the shared team schedule.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--user",
        default=os.getenv("TEAMSCHEDULE_USER", ""),
        help="Acting username (default: $TEAMSCHEDULE_USER).",
    )
    parser.add_argument(
        "--role",
        choices=[r.value for r in Role],
        default=os.getenv("TEAMSCHEDULE_ROLE", Role.USER.value),
        help="Acting user's role (default: $TEAMSCHEDULE_ROLE or user).",
    )
    parser.add_argument(
        "--storage-dir",
        default=None,
        help="Override the storage directory from configuration.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Upload a schedule JSON file.")
    add.add_argument("file", help="Schedule document to upload.")
    add.add_argument(
        "--student",
        default="",
        help="Student name; overrides student_name in the file.",
    )
    add.add_argument(
        "--yes",
        action="store_true",
        help="Admit the schedule even if it conflicts with itself.",
    )

    remove = sub.add_parser("remove", help="Remove a student's schedule.")
    remove.add_argument("student")

    sub.add_parser("list", help="List team members and their uploaders.")
    sub.add_parser("conflicts", help="List double-booked student slots.")

    export = sub.add_parser("export", help="Export all schedules as JSON.")
    export.add_argument(
        "--output",
        default=None,
        help=(
            "Output file (default: stdout). "
            "A directory gets team_schedule_<date>.json."
        ),
    )

    for name, help_text in (("week", "Show one week."), ("day", "Show one day.")):
        grid = sub.add_parser(name, help=help_text)
        grid.add_argument(
            "--date",
            type=date.fromisoformat,
            default=date.today(),
            help="Any date in the period to show (YYYY-MM-DD, default: today).",
        )
        grid.add_argument(
            "--search",
            default="",
            help="Filter by course, teacher, room or student.",
        )
        grid.add_argument(
            "--json",
            action="store_true",
            help="Output JSON instead of a table.",
        )

    return parser.parse_args(argv)


def _ask(conflicts: list[Conflict]) -> bool:
    """Terminal stand-in for the confirmation dialog."""
    _log("WARNING: conflicts found within the schedule:")
    _log(format_conflicts(conflicts))
    if not sys.stdin.isatty():
        _log("  Not a terminal; pass --yes to admit anyway.")
        return False
    answer = input("Add this schedule anyway? [y/N] ")
    return answer.strip().lower() in {"y", "yes"}


def _format_cell(cell: PeriodCell) -> str:
    cards = []
    for group in cell.groups:
        names = ", ".join(
            f"{s}(!)" if s in group.conflicted_students else s for s in group.students
        )
        where = f" @{group.location}" if group.location else ""
        cards.append(f"{group.course_name} [{group.teacher}{where}] {names}")
    return " / ".join(cards) or "-"


def _format_grid(columns: list[DayColumn]) -> str:
    """Format day columns as a human-readable table, one row per period."""
    if not columns:
        return "(no days)"

    headers = ["Period"] + [f"{c.date.isoformat()} {c.weekday}" for c in columns]
    rows = []
    for i, cell in enumerate(columns[0].cells):
        rows.append([cell.period] + [_format_cell(c.cells[i]) for c in columns])

    widths = [len(h) for h in headers]
    for row in rows:
        for i, text in enumerate(row):
            widths[i] = max(widths[i], len(text))

    header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    separator = "-+-".join("-" * w for w in widths)
    row_lines = [
        " | ".join(text.ljust(widths[i]) for i, text in enumerate(row))
        for row in rows
    ]
    return "\n".join([header_line, separator, *row_lines])


def _grid_json(columns: list[DayColumn]) -> list[dict]:
    return [
        {
            "date": c.date.isoformat(),
            "weekday": c.weekday,
            "periods": [
                {
                    "period": cell.period,
                    "groups": [g.model_dump(mode="json") for g in cell.groups],
                }
                for cell in c.cells
            ],
        }
        for c in columns
    ]


def main(args: argparse.Namespace) -> int:
    config = get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)

    storage = JsonFileStorage(
        args.storage_dir or config.storage_dir,
        retry_attempts=config.write_retry_attempts,
    )
    store = ScheduleStore(storage, key=config.schedules_key)
    actor = CurrentUser(username=args.user, role=Role(args.role)) if args.user else None

    if args.command == "add":
        content = Path(args.file).read_text(encoding="utf-8")
        confirm = (lambda _conflicts: True) if args.yes else _ask
        result = store.add(content, args.student, actor=actor, confirm=confirm)
        _log(result.message)
        return 0 if result.success else 1

    if args.command == "remove":
        result = store.remove(args.student, actor=actor)
        _log(result.message)
        return 0 if result.success else 1

    if args.command == "list":
        output = [m.model_dump() for m in store.members()]
        print(json.dumps(output, indent=2, ensure_ascii=False))
        return 0

    if args.command == "export":
        payload = json.dumps(store.export(), indent=2, ensure_ascii=False)
        if args.output is None:
            print(payload)
            return 0
        output_file = Path(args.output)
        if output_file.is_dir():
            output_file = output_file / export_filename()
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(payload, encoding="utf-8")
        _log(f"  Exported {len(store)} schedules -> {output_file}")
        return 0

    view = TeamView.from_schedules(store.all())

    if args.command == "conflicts":
        print(json.dumps(sorted(view.conflicts), indent=2, ensure_ascii=False))
        return 0

    if args.command == "week":
        columns = view.week_grid(args.date, args.search)
    else:
        columns = [
            DayColumn(
                date=args.date,
                weekday=weekday_label(args.date),
                cells=view.day_cells(args.date, args.search),
            )
        ]

    if args.json:
        print(json.dumps(_grid_json(columns), indent=2, ensure_ascii=False))
    else:
        print(_format_grid(columns))
    return 0


if __name__ == "__main__":
    args = _parse_args()
    try:
        sys.exit(main(args))
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
