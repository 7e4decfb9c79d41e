"""Tests for the operator command line."""

import csv
import io
from uuid import UUID, uuid4

import pytest
from sqlalchemy import select

import manage
from conftest import make_application
from models.application import Application
from models.waitlist_entry import WaitlistEntry


async def run_command(session_factory, *argv) -> tuple[int, str]:
    out = io.StringIO()
    args = manage.build_parser().parse_args(list(argv))
    code = await manage.run(args, session_factory, out=out)
    return code, out.getvalue()


@pytest.mark.asyncio
async def test_create_application_command(session_factory, db_session):
    """Test: create-application prints the new id and stores the row."""
    code, output = await run_command(session_factory, "create-application", "Launch App")

    assert code == 0
    application_id = UUID(output.strip())
    result = await db_session.execute(select(Application).where(Application.application_id == application_id))
    application = result.scalar_one()
    assert application.application_name == "Launch App"
    assert application.is_active is True


@pytest.mark.asyncio
async def test_create_inactive_application_command(session_factory, db_session):
    """Test: --inactive creates a deactivated application."""
    code, output = await run_command(session_factory, "create-application", "Hidden", "--inactive")

    assert code == 0
    result = await db_session.execute(
        select(Application).where(Application.application_id == UUID(output.strip()))
    )
    assert result.scalar_one().is_active is False


@pytest.mark.asyncio
async def test_list_applications_command(session_factory, application, inactive_application):
    """Test: list-applications shows every application with its state."""
    code, output = await run_command(session_factory, "list-applications")

    assert code == 0
    assert "Applications: 2" in output
    assert "Launch App [active]" in output
    assert "Sunset App [inactive]" in output
    assert str(application.application_id) in output


@pytest.mark.asyncio
async def test_set_active_command(session_factory, application):
    """Test: set-active toggles the flag."""
    code, output = await run_command(session_factory, "set-active", str(application.application_id), "false")

    assert code == 0
    assert "is now inactive" in output


@pytest.mark.asyncio
async def test_set_active_unknown_application(session_factory):
    """Test: set-active on an unknown id exits with 1."""
    code, _ = await run_command(session_factory, "set-active", str(uuid4()), "true")

    assert code == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("report", manage.REPORTS)
async def test_reports_run(session_factory, db_session, report):
    """Test: Every report runs and prints something."""
    application = await make_application(db_session)
    db_session.add(
        WaitlistEntry(
            application_id=application.application_id,
            email="a@example.com",
            source_url="https://x.com",
            country="US",
        )
    )
    await db_session.commit()

    code, output = await run_command(session_factory, "report", report)

    assert code == 0
    assert output.strip()


@pytest.mark.asyncio
async def test_report_on_empty_database(session_factory):
    """Test: Reports with no data say so."""
    code, output = await run_command(session_factory, "report", "daily")

    assert code == 0
    assert "(no rows)" in output


@pytest.mark.asyncio
async def test_export_to_file(session_factory, db_session, application, tmp_path):
    """Test: export --output writes a CSV file."""
    db_session.add(
        WaitlistEntry(application_id=application.application_id, email="a@example.com", source_url="https://x.com")
    )
    await db_session.commit()
    target = tmp_path / "entries.csv"

    code, output = await run_command(session_factory, "export", "--output", str(target))

    assert code == 0
    assert "Exported 1 entries" in output
    with open(target, newline="", encoding="utf-8") as stream:
        rows = list(csv.DictReader(stream))
    assert rows[0]["email"] == "a@example.com"
    assert rows[0]["application_name"] == "Launch App"


def test_parser_rejects_unknown_report():
    with pytest.raises(SystemExit):
        manage.build_parser().parse_args(["report", "nonsense"])
