"""Infer activation from `wp plugin status` / `wp theme status` text.

Single-responsibility: text processing only. Callers run commands.

wp-cli has no stable machine-readable status output for these commands, so
the parsers are layered best-effort heuristics that always resolve to a
definite boolean and never raise.
"""

from __future__ import annotations

from typing import NamedTuple, Optional

from wpconverge.utils import strip_ansi

STATUS_PREFIX = "status:"
ACTIVE_MARKERS = (" active", "(active)", "[active]", "active,", "active.")

BASIS_STATUS_LINE = "status-line"
BASIS_HEURISTIC = "heuristic"
BASIS_DEFAULT = "default"


class StatusReading(NamedTuple):
    active: bool
    basis: str
    line: str = ""


def _lines(text: str) -> list[str]:
    return [ln.strip().lower() for ln in strip_ansi(text).splitlines()]


def _status_value(line: str) -> Optional[str]:
    if not line.startswith(STATUS_PREFIX):
        return None
    return line[len(STATUS_PREFIX):].strip()


def _mentions_plugin(line: str, slug: str) -> bool:
    if not slug:
        return True
    return "plugin" in line or slug in line


def read_plugin_status(text: str, slug: Optional[str] = None) -> StatusReading:
    """Interpret plugin activation.

    1) A "Status: <value>" line decides outright: active iff value == "active".
    2) Otherwise lines mentioning the plugin (or "plugin") are scanned for
       inactive/active markers; "inactive" wins since it contains "active".
    3) Nothing recognisable means inactive.
    """
    lines = _lines(text)
    needle = (slug or "").strip().lower()

    for line in lines:
        value = _status_value(line)
        if value is not None:
            return StatusReading(value == "active", BASIS_STATUS_LINE, line)

    for line in lines:
        if not line:
            continue
        if not _mentions_plugin(line, needle):
            continue
        if "inactive" in line:
            return StatusReading(False, BASIS_HEURISTIC, line)
        if any(marker in line for marker in ACTIVE_MARKERS):
            return StatusReading(True, BASIS_HEURISTIC, line)

    return StatusReading(False, BASIS_DEFAULT)


def is_plugin_active(text: str, slug: Optional[str] = None) -> bool:
    return read_plugin_status(text, slug).active


def is_theme_active(text: str) -> bool:
    # First "Status:" line decides; theme output has no other reliable marker.
    for line in _lines(text):
        value = _status_value(line)
        if value is None:
            continue
        return "active" in value and "inactive" not in value
    return False
