import argparse
import json
import logging
import sys
import time
from datetime import date
from typing import Any, Dict

from mosque_calendar.core.app import LOG_FORMAT, CalendarApp
from mosque_calendar.core.errors import MosqueCalendarError


def setup_basic_logging():
    """Setup basic console logging before config is loaded"""
    root_logger = logging.getLogger()
    if not root_logger.handlers:  # Only add handler if none exists
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(handler)
        root_logger.setLevel(logging.INFO)
        logging.debug("Basic logging initialized")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Gregorian / Hijri mosque calendar with prayer times')
    parser.add_argument('--config', default="config.yaml",
                        help='Path to config file (default: ./config.yaml)')
    parser.add_argument('--mosque', help='Client id, loads clients/<id>.json')
    parser.add_argument('--year', type=int, default=date.today().year, help='Gregorian year (default: current year)')
    parser.add_argument('--month', type=int, help='Month 1-12; the full year is rendered when omitted')
    parser.add_argument('--ramadan', action='store_true', help='Render the Ramadan timetable of the year')
    parser.add_argument('--output', help='Write JSON to this file instead of stdout')
    parser.add_argument('--no-refresh', action='store_true', help='Do not fetch external holiday data')
    parser.add_argument('--serve', action='store_true', help='Start the HTTP API and keep running')
    return parser


def _dump(view: Dict[str, Any]) -> str:
    return json.dumps(view, ensure_ascii=False, indent=2)


def _file_writer(output: str):
    """Rewrite the output file on every render; the last one wins."""
    def write(view: Dict[str, Any]) -> None:
        with open(output, "w", encoding="utf-8") as f:
            f.write(_dump(view) + "\n")
        logging.info(f"Calendar written to {output}")
    return write


def serve(app: CalendarApp) -> int:
    from mosque_calendar.api import run_api_server

    app.config.data["api"]["enabled"] = True
    app.schedule_refresh()
    thread = run_api_server(app)
    try:
        while thread is not None and thread.is_alive():
            time.sleep(1)
    except KeyboardInterrupt:
        logging.info("Interrupted, stopping")
    finally:
        app.shutdown()
    return 0


def main(argv=None) -> int:
    setup_basic_logging()
    args = build_parser().parse_args(argv)

    if args.month is not None and not 1 <= args.month <= 12:
        logging.error(f"Invalid month: {args.month}")
        return 2

    try:
        app = CalendarApp(config_path=args.config, client_id=args.mosque)
    except MosqueCalendarError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.serve:
        return serve(app)

    if args.ramadan:
        render = lambda: app.render_ramadan(args.year)
    else:
        render = lambda: app.render(args.year, args.month)
    # stdout gets a single document: only the last render is printed
    renders = []
    write = _file_writer(args.output) if args.output else renders.append

    try:
        if args.no_refresh:
            write(render())
        else:
            app.render_then_refresh(args.year, args.month, write, render=render)
    finally:
        app.shutdown()
    if renders:
        print(_dump(renders[-1]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
