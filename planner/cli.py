# planner/cli.py

from __future__ import annotations
import argparse
import json
import signal
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

from planner.app import build_app
from planner.config import load_config
from planner.events import EventType
from planner.logs import configure_logging
from planner.models.planner import Planner
from planner.output.render import render_planner
from planner.storage import StorageError

MUTATING_COMMANDS = {
    "add-section",
    "add-item",
    "check",
    "note",
    "delete-section",
    "delete-item",
    "move-section",
    "orientation",
    "import",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="planner",
        description="Edit a personal planner of checklists and notes stored on this machine",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a YAML config file",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding the planner data (overrides config)",
    )
    parser.add_argument(
        "--output",
        choices=["cli", "json"],
        default="cli",
        help="Output mode: 'cli' prints readable lines; 'json' prints one JSON document",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug messages to stderr",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("show", help="Print the planner")
    commands.add_parser("info", help="Print storage usage and document counts")

    add_section = commands.add_parser("add-section", help="Add a checklist or note section")
    add_section.add_argument("title")
    add_section.add_argument("--column", type=int, default=1, help="1-based column number")
    add_section.add_argument("--text", action="store_true", help="Create a free-text note section")

    add_item = commands.add_parser("add-item", help="Add an item to a checklist section")
    add_item.add_argument("section_id")
    add_item.add_argument("text")

    check = commands.add_parser("check", help="Toggle an item's checked state")
    check.add_argument("item_id")

    note = commands.add_parser("note", help="Replace the text of a note section")
    note.add_argument("section_id")
    note.add_argument("text")

    delete_section = commands.add_parser("delete-section", help="Delete a section")
    delete_section.add_argument("section_id")

    delete_item = commands.add_parser("delete-item", help="Delete an item")
    delete_item.add_argument("item_id")

    move_section = commands.add_parser("move-section", help="Move a section to another column")
    move_section.add_argument("section_id")
    move_section.add_argument("column", type=int, help="1-based column number")
    move_section.add_argument("--position", type=int, default=None, help="0-based position in the column")

    orientation = commands.add_parser("orientation", help="Set the page orientation")
    orientation.add_argument("orientation", choices=["portrait", "landscape"])

    export = commands.add_parser("export", help="Write the planner to a JSON file")
    export.add_argument("file", type=Path)

    import_ = commands.add_parser("import", help="Replace the planner with a JSON file")
    import_.add_argument("file", type=Path)

    commands.add_parser("reset", help="Delete the stored planner")

    return parser


def _current_or_empty(app) -> Planner:
    """The loaded planner, or an unsaved empty one for read-only commands."""
    return app.state.state or Planner(orientation=app.config.defaults.orientation)


def run_command(app, args: argparse.Namespace) -> Any:
    """Execute one subcommand and return its result for output."""
    controller = app.controller
    command = args.command

    if command == "show":
        planner = _current_or_empty(app)
        return {"lines": render_planner(planner), "state": planner.to_state()}

    if command == "info":
        planner = _current_or_empty(app)
        size = app.state.storage_info()
        return {
            "sections": planner.section_count,
            "columns": planner.column_count,
            "items": sum(len(section.items) for section in planner.sections),
            "storage_used": size.used if size else None,
            "storage_available": size.available if size else None,
        }

    if command == "add-section":
        section = controller.add_section(args.title, column=args.column - 1, is_text_section=args.text)
        return {"section_id": section.id}

    if command == "add-item":
        item = controller.add_item(args.section_id, args.text)
        return {"item_id": item.id}

    if command == "check":
        return {"item_id": args.item_id, "checked": controller.toggle_item(args.item_id)}

    if command == "note":
        controller.set_note(args.section_id, args.text)
        return {"section_id": args.section_id}

    if command == "delete-section":
        controller.delete_section(args.section_id)
        return {"section_id": args.section_id}

    if command == "delete-item":
        controller.delete_item(args.item_id)
        return {"item_id": args.item_id}

    if command == "move-section":
        controller.move_section(args.section_id, args.column - 1, args.position)
        return {"section_id": args.section_id, "column": args.column}

    if command == "orientation":
        controller.set_orientation(args.orientation)
        return {"orientation": args.orientation}

    if command == "export":
        controller.ensure_planner()
        args.file.parent.mkdir(parents=True, exist_ok=True)
        args.file.write_text(app.state.export_state() or "{}", encoding="utf-8")
        return {"file": str(args.file)}

    if command == "import":
        if not args.file.exists():
            raise FileNotFoundError(f"Import file not found: {args.file}")
        app.state.import_state(args.file.read_text(encoding="utf-8"))
        return {"file": str(args.file)}

    if command == "reset":
        app.state.reset_state(clear_storage=True)
        return {}

    raise ValueError(f"Unknown command: {command}")


def main(argv: list[str] | None = None) -> int | None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config is not None and not args.config.exists():
        print(f"Config file not found: {args.config}", file=sys.stderr)
        return 1

    try:
        config = load_config(args.config)
    except Exception as exc:
        print(f"Failed to load config: {exc}", file=sys.stderr)
        return 2

    if args.data_dir is not None:
        config = replace(config, storage=replace(config.storage, directory=args.data_dir))

    configure_logging("DEBUG" if args.verbose else config.logging.level)

    sink = print if args.output == "cli" else None
    try:
        app = build_app(config, sink=sink)
    except StorageError as exc:
        print(f"Storage unavailable: {exc}", file=sys.stderr)
        return 3

    storage_errors: list[str] = []
    app.event_bus.subscribe(EventType.STATE_ERROR, lambda payload: storage_errors.append(payload.error))

    try:
        app.state.load_state()
    except Exception as exc:
        app.close()
        print(f"Failed to load planner: {exc}", file=sys.stderr)
        return 3

    try:
        result = run_command(app, args)
        if args.command in MUTATING_COMMANDS and app.autosaver is None:
            app.state.save_state()
    except (LookupError, ValueError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except StorageError as exc:
        print(f"Failed to save planner: {exc}", file=sys.stderr)
        return 3
    finally:
        app.close()

    if storage_errors:
        print(f"Failed to save planner: {storage_errors[-1]}", file=sys.stderr)
        return 3

    if args.output == "json":
        document = {"command": args.command, "result": result, "activity": app.activity.lines}
        print(json.dumps(document, indent=2))
    elif args.command == "show":
        for line in result["lines"]:
            print(line)
    elif args.command == "info":
        for key, value in result.items():
            print(f"{key}: {value}")

    return 0  # success


if __name__ == "__main__":

    signal.signal(signal.SIGPIPE, signal.SIG_DFL)  # Ignore broken pipe
    sys.exit(main())
