from __future__ import annotations

from pathlib import Path

import pytest

from kmatrix.executor.types import Outcome, Result
from kmatrix.report import (
    ListRenderer,
    ReportWriteError,
    SectionedRenderer,
    exit_code,
    renderer_for,
    write_report,
)

RESULTS = [
    Result("v5.4.293", Outcome.SUCCESS, "all good\n"),
    Result("v6.1", Outcome.FAILURE, "boom\n"),
    Result("wrong-name", Outcome.MISSING, "failed to retrieve content\n"),
    Result("v6.6", Outcome.CANCELLED, "Cancelled"),
]


def test_list_renderer_has_no_messages() -> None:
    text = ListRenderer().render(RESULTS)

    assert text.splitlines() == [
        "",
        "Report:",
        "- v5.4.293 🟢",
        "- v6.1 🔴",
        "- wrong-name 🟡",
        "- v6.6 ⚠️",
    ]


def test_sectioned_renderer_messages_then_table() -> None:
    text = SectionedRenderer().render(RESULTS)

    messages = text.index("## Messages")
    table = text.index("## Results")
    assert messages < table
    assert "all good" in text[messages:table]
    assert "boom" in text[messages:table]
    assert "| v6.1 | 🔴 |" in text[table:]
    assert "| wrong-name | 🟡 |" in text[table:]
    assert "all good" not in text[table:]


def test_table_rows_keep_result_order() -> None:
    text = SectionedRenderer().render(RESULTS)
    rows = [line for line in text.splitlines() if line.startswith("| v") or line.startswith("| w")]

    assert [row.split("|")[1].strip() for row in rows] == [
        "v5.4.293",
        "v6.1",
        "wrong-name",
        "v6.6",
    ]


def test_renderer_selected_by_report_only() -> None:
    assert isinstance(renderer_for(True), ListRenderer)
    assert isinstance(renderer_for(False), SectionedRenderer)


def test_write_report_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    write_report("hello\n", "")

    assert capsys.readouterr().out == "hello\n"


def test_write_report_to_file(tmp_path: Path) -> None:
    out = tmp_path / "report.md"

    write_report("hello\n", str(out))

    assert out.read_text(encoding="utf-8") == "hello\n"


def test_write_report_failure_is_wrapped(tmp_path: Path) -> None:
    with pytest.raises(ReportWriteError):
        write_report("hello\n", str(tmp_path / "missing-dir" / "report.md"))


def test_exit_code() -> None:
    assert exit_code(RESULTS[:1]) == 0
    assert exit_code(RESULTS) == 1
    assert exit_code([RESULTS[3]]) == 1


def test_backticks_in_message_get_a_longer_fence() -> None:
    text = SectionedRenderer().render(
        [Result("v6.1", Outcome.FAILURE, "before\n```\ninside\n```\nafter\n")]
    )

    assert "````\nbefore\n```\ninside\n```\nafter\n````" in text


def test_pipe_in_version_is_escaped_in_table() -> None:
    text = SectionedRenderer().render([Result("v6.1|rc", Outcome.SUCCESS, "")])

    assert "| v6.1\\|rc | 🟢 |" in text
