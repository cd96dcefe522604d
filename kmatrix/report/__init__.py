from .render import (
    ICONS,
    ListRenderer,
    SectionedRenderer,
    exit_code,
    icon_for,
    renderer_for,
    write_report,
)
from .types import ReportWriteError

__all__ = [
    "ICONS",
    "ListRenderer",
    "ReportWriteError",
    "SectionedRenderer",
    "exit_code",
    "icon_for",
    "renderer_for",
    "write_report",
]
