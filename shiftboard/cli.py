from __future__ import annotations

import argparse
from datetime import date, datetime

from .config import DEFAULT_CONFIG, load_config
from .domain.db import DEFAULT_DB_URL, get_session_factory, init_database
from .domain.models import Period
from .domain.repositories import AssignmentRepository, PeriodRepository
from .io import export_assignments_csv, import_staff_csv
from .logger import add_file_handler, get_logger
from .services.summary import format_summary

log = get_logger("cli")


def _session(args: argparse.Namespace):
    return get_session_factory(engine=init_database(args.db))()


def _cmd_init_db(args: argparse.Namespace) -> None:
    init_database(args.db)
    print("Database ready at", args.db)


def _cmd_import_staff(args: argparse.Namespace) -> None:
    session = _session(args)
    try:
        count = import_staff_csv(session, args.csv)
    finally:
        session.close()
    print(f"Imported {count} staff")


def _cmd_create_period(args: argparse.Namespace) -> None:
    start = date.fromisoformat(args.start)
    end = date.fromisoformat(args.end)
    if end < start:
        raise SystemExit("--end must not be before --start")
    deadline = datetime.fromisoformat(args.deadline) if args.deadline else None
    session = _session(args)
    try:
        period = PeriodRepository.create(session, Period(start_date=start, end_date=end, deadline_at=deadline))
    finally:
        session.close()
    print(f"Created period {period.id} ({start} to {end})")


def _cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    from .api.app import create_app

    cfg = load_config(args.config) if args.config else DEFAULT_CONFIG
    app = create_app(cfg=cfg, db_url=args.db)
    log.info("Serving on %s:%s", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port)


def _cmd_export(args: argparse.Namespace) -> None:
    session = _session(args)
    try:
        count = export_assignments_csv(session, args.period, args.out)
    finally:
        session.close()
    print(f"{count} shift(s) written to", args.out)


def _cmd_summarize(args: argparse.Namespace) -> None:
    session = _session(args)
    try:
        PeriodRepository.require(session, args.period)
        if args.date:
            assignments = AssignmentRepository.get_by_date(session, args.period, date.fromisoformat(args.date))
        else:
            assignments = AssignmentRepository.get_by_period(session, args.period)
        print(format_summary(assignments))
    finally:
        session.close()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="shiftboard")
    parser.add_argument("--db", default=DEFAULT_DB_URL, help="SQLAlchemy database URL")
    parser.add_argument("--log-file", help="Also write logs to this file")
    sub = parser.add_subparsers(dest="command", required=True)

    i = sub.add_parser("init-db", help="Create the database tables")
    i.set_defaults(func=_cmd_init_db)

    st = sub.add_parser("import-staff", help="Import a staff roster CSV (name, role)")
    st.add_argument("--csv", required=True)
    st.set_defaults(func=_cmd_import_staff)

    p = sub.add_parser("create-period", help="Open a new scheduling period")
    p.add_argument("--start", required=True, help="First date (YYYY-MM-DD)")
    p.add_argument("--end", required=True, help="Last date, inclusive (YYYY-MM-DD)")
    p.add_argument("--deadline", help="Availability deadline (ISO datetime)")
    p.set_defaults(func=_cmd_create_period)

    s = sub.add_parser("serve", help="Run the REST API")
    s.add_argument("--host", default="127.0.0.1")
    s.add_argument("--port", type=int, default=8000)
    s.add_argument("--config", help="YAML or JSON schedule config")
    s.set_defaults(func=_cmd_serve)

    e = sub.add_parser("export", help="Export a period's shifts to CSV")
    e.add_argument("--period", type=int, required=True)
    e.add_argument("--out", required=True)
    e.set_defaults(func=_cmd_export)

    m = sub.add_parser("summarize", help="Print work-time totals for a period or one day")
    m.add_argument("--period", type=int, required=True)
    m.add_argument("--date", help="Limit to one date (YYYY-MM-DD)")
    m.set_defaults(func=_cmd_summarize)

    args = parser.parse_args(argv)
    if args.log_file:
        add_file_handler(args.log_file)
    args.func(args)


if __name__ == "__main__":
    main()
