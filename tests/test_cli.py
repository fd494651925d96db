from __future__ import annotations

import json

import pytest

from helpdesk.cli import build_parser, main


@pytest.fixture
def run_cli(store_path, capsys):
    def _run(*args: str) -> tuple[int, str, str]:
        code = main(["--store", str(store_path), *args])
        captured = capsys.readouterr()
        return code, captured.out, captured.err

    return _run


def _create(run_cli, category: str = "Hardware", priority: str = "High") -> str:
    code, out, _ = run_cli(
        "create",
        "--requester", "Dana",
        "--email", "dana@example.com",
        "--category", category,
        "--subject", "Laptop will not boot",
        "--description", "Black screen",
        "--priority", priority,
    )
    assert code == 0
    return out.strip().rsplit(" ", 1)[-1]


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_create_and_show(run_cli, store_path):
    ticket_id = _create(run_cli)

    stored = json.loads(store_path.read_text(encoding="utf-8"))
    assert stored[0]["id"] == ticket_id

    code, out, _ = run_cli("show", ticket_id)
    assert code == 0
    assert "Laptop will not boot" in out


def test_create_with_invalid_category_fails(run_cli, store_path):
    code, _, err = run_cli(
        "create",
        "--requester", "Dana",
        "--email", "dana@example.com",
        "--category", "Printer",
        "--subject", "Jam",
        "--description", "Paper jam",
    )

    assert code == 1
    assert "Invalid category" in err
    assert not store_path.exists()


def test_update_reports_changes(run_cli):
    ticket_id = _create(run_cli)

    code, out, _ = run_cli("update", ticket_id, "--status", "Resolved", "--actor", "sam")
    assert code == 0
    assert out.strip() == f"Ticket {ticket_id} updated"

    code, out, _ = run_cli("update", ticket_id, "--status", "Resolved")
    assert out.strip() == f"No changes made to ticket {ticket_id}"


def test_update_unknown_ticket_fails(run_cli):
    _create(run_cli)

    code, _, err = run_cli("update", "deadbeef", "--notes", "hello")

    assert code == 1
    assert "deadbeef" in err


def test_show_unknown_ticket_fails(run_cli):
    code, _, err = run_cli("show", "deadbeef")

    assert code == 1
    assert "not found" in err


def test_list_and_report(run_cli):
    _create(run_cli, category="Hardware", priority="High")
    _create(run_cli, category="Software", priority="Low")

    code, out, _ = run_cli("list", "--priority", "Low")
    assert code == 0
    assert len(out.strip().splitlines()) == 3

    code, out, _ = run_cli("list", "--status", "Closed")
    assert out.strip() == "No tickets found."

    code, out, _ = run_cli("report")
    assert "Total tickets: 2" in out
    assert "Unassigned: 2" in out

    code, out, _ = run_cli("report", "response-time")
    assert code == 0
    assert "not implemented" in out


def test_store_path_from_environment(tmp_path, monkeypatch, capsys):
    path = tmp_path / "env-store.json"
    monkeypatch.setenv("HELPDESK_STORE_PATH", str(path))

    code = main(["report"])

    assert code == 0
    assert "Total tickets: 0" in capsys.readouterr().out
    assert not path.exists()


def test_corrupted_store_reports_error(store_path, capsys):
    store_path.write_text("{broken", encoding="utf-8")

    code = main(["--store", str(store_path), "list"])

    assert code == 1
    assert "malformed" in capsys.readouterr().err


def test_verbose_flag_logs_store_activity(store_path, capsys):
    code = main(["--store", str(store_path), "--verbose", "report"])

    assert code == 0
    assert "does not exist; starting empty" in capsys.readouterr().err
