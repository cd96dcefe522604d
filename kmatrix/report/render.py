from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Protocol, Sequence

from kmatrix.executor import Outcome, Result

from .types import ReportWriteError

ICONS = {
    Outcome.SUCCESS: "🟢",
    Outcome.MISSING: "🟡",
    Outcome.FAILURE: "🔴",
    Outcome.CANCELLED: "⚠️",
}


def icon_for(outcome: Outcome) -> str:
    return ICONS[outcome]


class Renderer(Protocol):
    def render(self, results: Sequence[Result]) -> str: ...


class ListRenderer:
    """One line per version, icon only."""

    def render(self, results: Sequence[Result]) -> str:
        lines = ["", "Report:"]
        for r in results:
            lines.append(f"- {r.version} {icon_for(r.outcome)}")
        return "\n".join(lines) + "\n"


class SectionedRenderer:
    """Captured messages first, then a version/result table."""

    def render(self, results: Sequence[Result]) -> str:
        lines = ["# Report", "", "## Messages", ""]
        for r in results:
            fence = _fence_for(r.message)
            lines.append(f"### {r.version} {icon_for(r.outcome)}")
            lines.append("")
            lines.append(fence)
            lines.append(r.message.rstrip("\n"))
            lines.append(fence)
            lines.append("")

        lines.extend(["## Results", "", "| Version | Result |", "| --- | --- |"])
        for r in results:
            lines.append(f"| {_cell(r.version)} | {icon_for(r.outcome)} |")
        return "\n".join(lines) + "\n"


def _fence_for(text: str) -> str:
    # A fence must be longer than any backtick run inside the block.
    longest = max((len(run) for run in re.findall(r"`+", text)), default=0)
    return "`" * max(3, longest + 1)


def _cell(text: str) -> str:
    return text.replace("\\", "\\\\").replace("|", "\\|")


def renderer_for(report_only: bool) -> Renderer:
    if report_only:
        return ListRenderer()
    return SectionedRenderer()


def write_report(text: str, out_path: str | Path | None) -> None:
    if not out_path:
        sys.stdout.write(text)
        return

    path = Path(out_path)
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ReportWriteError(f"Error writing report to file {path}: {exc}") from exc


def exit_code(results: Sequence[Result]) -> int:
    return 0 if all(r.outcome is Outcome.SUCCESS for r in results) else 1
