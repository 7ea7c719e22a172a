"""Utility helpers kept dependency-free.

- init_logging: configure console + file logging with run-id.
- status_pass/status_fail: concise console status lines (with run-id).
- log: debug-level logger for normal status lines (file-oriented).
- strip_ansi: drop terminal colour codes from wp-cli output.
- mask_secrets: hide credential values before argv reaches logs or errors.
"""

import logging
import os
import re
import uuid
from logging.handlers import RotatingFileHandler
from typing import Sequence

from wpconverge.config import LOG_DIR


_RUN_ID = ""

ANSI_RE = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
SECRET_FLAGS = ("--user_pass=",)


def _gen_run_id() -> str:
    return uuid.uuid4().hex[:8]


def init_logging(run_id: str | None = None) -> str:
    """Send DEBUG+ to <LOG_DIR>/wpconverge-<rid>.log; console shows CRITICAL only.

    Idempotent per process. Returns the run-id.
    """
    global _RUN_ID
    if _RUN_ID:
        return _RUN_ID
    _RUN_ID = run_id or os.environ.get("WPCONVERGE_RID") or _gen_run_id()
    os.environ["WPCONVERGE_RID"] = _RUN_ID

    os.makedirs(LOG_DIR, exist_ok=True)
    logfile = os.path.abspath(os.path.join(LOG_DIR, f"wpconverge-{_RUN_ID}.log"))

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    if not any(getattr(h, "baseFilename", None) == logfile for h in root.handlers):
        fh = RotatingFileHandler(logfile, maxBytes=5 * 1024 * 1024, backupCount=3)
        fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s: %(message)s"))
        root.addHandler(fh)
    if not any(type(h) is logging.StreamHandler for h in root.handlers):
        console = logging.StreamHandler()
        console.setLevel(logging.CRITICAL)
        root.addHandler(console)

    logging.debug("run_id=%s log=%s", _RUN_ID, logfile)
    return _RUN_ID


def _rid() -> str:
    return _RUN_ID or os.environ.get("WPCONVERGE_RID", "--------")


def status_pass(msg: str) -> None:
    print(f"PASS: {msg} [{_rid()}]")


def status_fail(msg: str) -> None:
    print(f"FAIL: {msg} [{_rid()}]", flush=True)


def log(msg: str) -> None:
    # File-oriented normal progress; stays out of console noise.
    logging.debug(msg)


def strip_ansi(text: str) -> str:
    return ANSI_RE.sub("", text or "")


def mask_secrets(argv: Sequence[str]) -> list[str]:
    masked: list[str] = []
    for arg in argv:
        for flag in SECRET_FLAGS:
            if arg.startswith(flag):
                arg = flag + "***"
                break
        masked.append(arg)
    return masked
