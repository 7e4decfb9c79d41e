"""Operator commands: manage applications and report on waitlists.

Usage:
    python manage.py create-application "My App" [--inactive]
    python manage.py list-applications
    python manage.py set-active <application_id> true|false
    python manage.py report summary|daily|countries|sources|hourly|growth|domains|quality|counts
    python manage.py export [--output entries.csv]
"""

import argparse
import asyncio
import sys
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

import config
import logging_config
from db import close_db, create_engine, create_session_factory, init_db
from models.application import ApplicationCreate, ApplicationResponse
from repos import analytics_repo
from services import analytics_service, applications_service
from services.applications_service import ApplicationNotFoundError

REPORTS = ["summary", "daily", "countries", "sources", "hourly", "growth", "domains", "quality", "counts"]


def _print_rows(rows, out) -> None:
    if not rows:
        print("(no rows)", file=out)
        return
    for row in rows:
        values = row.model_dump() if hasattr(row, "model_dump") else row._asdict()
        print("  ".join(f"{key}={value}" for key, value in values.items()), file=out)


async def create_application(session: AsyncSession, args, out) -> int:
    application = await applications_service.create_application(
        session,
        payload=ApplicationCreate(application_name=args.name, is_active=not args.inactive),
    )
    print(application.application_id, file=out)
    return 0


async def list_applications(session: AsyncSession, args, out) -> int:
    applications = await applications_service.list_applications(session)
    print(f"Applications: {len(applications)}", file=out)
    for application in applications:
        info = ApplicationResponse.model_validate(application)
        state = "active" if info.is_active else "inactive"
        print(f"  - {info.application_name} [{state}]", file=out)
        print(f"    ID: {info.application_id}", file=out)
        print(f"    Created: {info.created_at.isoformat()}", file=out)
    return 0


async def set_active(session: AsyncSession, args, out) -> int:
    try:
        application = await applications_service.set_active(
            session,
            application_id=args.application_id,
            is_active=args.active == "true",
        )
    except ApplicationNotFoundError as e:
        print(str(e), file=sys.stderr)
        return 1
    state = "active" if application.is_active else "inactive"
    print(f"{application.application_id} is now {state}", file=out)
    return 0


async def report(session: AsyncSession, args, out) -> int:
    if args.report == "summary":
        rows = await analytics_repo.application_summary(session)
    elif args.report == "daily":
        rows = await analytics_repo.signups_per_day(session)
    elif args.report == "countries":
        rows = await analytics_repo.signups_by_country(session)
    elif args.report == "sources":
        rows = await analytics_repo.top_source_urls(session, limit=args.limit)
    elif args.report == "hourly":
        rows = await analytics_repo.hourly_pattern(session)
    elif args.report == "growth":
        rows = await analytics_service.daily_growth(session)
    elif args.report == "domains":
        rows = await analytics_service.email_domains(session, limit=args.limit)
    elif args.report == "quality":
        rows = await analytics_service.data_quality(session)
    else:
        rows = await analytics_repo.record_counts(session)
    _print_rows(rows, out)
    return 0


async def export(session: AsyncSession, args, out) -> int:
    if args.output:
        with open(args.output, "w", newline="", encoding="utf-8") as stream:
            count = await analytics_service.write_export_csv(session, stream)
        print(f"Exported {count} entries to {args.output}", file=out)
    else:
        await analytics_service.write_export_csv(session, out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Waitlist operator commands")
    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create-application", help="Create an application")
    create.add_argument("name")
    create.add_argument("--inactive", action="store_true", help="Create it deactivated")
    create.set_defaults(handler=create_application)

    listing = subparsers.add_parser("list-applications", help="List applications")
    listing.set_defaults(handler=list_applications)

    activate = subparsers.add_parser("set-active", help="Activate or deactivate an application")
    activate.add_argument("application_id", type=UUID)
    activate.add_argument("active", choices=["true", "false"])
    activate.set_defaults(handler=set_active)

    reporting = subparsers.add_parser("report", help="Print an analytics report")
    reporting.add_argument("report", choices=REPORTS)
    reporting.add_argument("--limit", type=int, default=20)
    reporting.set_defaults(handler=report)

    exporting = subparsers.add_parser("export", help="Export all entries as CSV")
    exporting.add_argument("--output", help="File to write (default: stdout)")
    exporting.set_defaults(handler=export)

    return parser


async def run(
    args: argparse.Namespace,
    session_factory: async_sessionmaker[AsyncSession],
    out=sys.stdout,
) -> int:
    """Run a parsed command with a session from the given factory."""
    async with session_factory() as session:
        return await args.handler(session, args, out)


async def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = config.settings
    engine = create_engine(settings)
    try:
        if settings.DB_CREATE_ALL:
            await init_db(engine)
        return await run(args, create_session_factory(engine))
    finally:
        await close_db(engine)


if __name__ == "__main__":
    logging_config.setup_logging(config.settings.LOG_LEVEL)
    # Fix for Windows asyncio
    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    sys.exit(asyncio.run(main()))
