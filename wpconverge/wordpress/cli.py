# cli.py
# Invariants:
# - All wp-cli access goes through WPCli; reconcilers never build connection flags.
# - Connection flags come first, in fixed order: --ssh, --allow-root, --path,
#   then the caller's arguments verbatim.
# - stdout and stderr are captured combined; status parsing and error messages
#   both need the diagnostic text wp-cli mixes into normal output.
# - A non-zero exit never raises from the runner; WPCli.run turns it into a
#   ToolFailure carrying argv and raw output.
# - Logs: one PASS/FAIL per call; credential flags are masked.

from __future__ import annotations

import logging
import os
import subprocess
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Sequence, Tuple

from wpconverge.config import WP_CLI_BINARY, WP_TIMEOUT
from wpconverge.utils import log, mask_secrets
from .diagnostics import ToolFailure

os.environ.setdefault("WP_CLI_DISABLE_AUTO_CHECK_UPDATE", "1")


@dataclass(frozen=True)
class ConnectionProfile:
    """How and where to reach the managed site.

    ssh_target is anything wp-cli accepts for --ssh (``user@host``,
    ``docker:container``); empty means run locally. remote_path empty means
    the tool's default path.
    """

    ssh_target: str = ""
    remote_path: str = ""
    allow_root: bool = False


class CommandRunner(Protocol):
    def execute(self, tool: str, argv: Sequence[str]) -> Tuple[bool, str]:
        ...


class SubprocessRunner:
    """Runs the real executable, returning (ok, combined stdout+stderr)."""

    def __init__(self, timeout: int = WP_TIMEOUT):
        self.timeout = timeout or None

    def execute(self, tool: str, argv: Sequence[str]) -> Tuple[bool, str]:
        args = [tool] + list(argv)
        try:
            proc = subprocess.run(
                args,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
                env=os.environ.copy(),
            )
        except subprocess.TimeoutExpired as exc:
            partial = exc.output or ""
            if isinstance(partial, bytes):
                partial = partial.decode("utf-8", errors="replace")
            return False, f"{partial}\ntimeout after {self.timeout}s".lstrip()
        except OSError as exc:
            return False, f"could not execute {tool}: {exc}"
        return proc.returncode == 0, proc.stdout or ""


def build_wp_args(profile: ConnectionProfile, *args: str) -> list[str]:
    all_args: list[str] = []
    if profile.ssh_target:
        all_args.append(f"--ssh={profile.ssh_target}")
    if profile.allow_root:
        all_args.append("--allow-root")
    if profile.remote_path:
        all_args.append(f"--path={profile.remote_path}")
    all_args.extend(args)
    return all_args


def _fmt_cmd_for_log(argv: Sequence[str]) -> str:
    return " ".join(["wp"] + mask_secrets(argv))


class WPCli:
    """wp-cli bound to one connection profile and one runner."""

    def __init__(
        self,
        profile: ConnectionProfile,
        runner: Optional[CommandRunner] = None,
        tool: str = WP_CLI_BINARY,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.profile = profile
        self.runner = runner or SubprocessRunner()
        self.tool = tool
        self._sleep = sleep or time.sleep

    def _execute(self, args: Sequence[str]) -> Tuple[list[str], bool, str]:
        argv = build_wp_args(self.profile, *args)
        t0 = time.monotonic()
        ok, output = self.runner.execute(self.tool, argv)
        dt = time.monotonic() - t0
        output = output or ""
        if ok:
            log(f"PASS: {_fmt_cmd_for_log(argv)} ({dt:.1f}s)")
        else:
            logging.error(
                "%s failed (%.1fs)\nOUTPUT: %s",
                _fmt_cmd_for_log(argv),
                dt,
                output.strip(),
            )
        return argv, ok, output

    def run(self, *args: str) -> None:
        """Mutating call: raise ToolFailure unless wp-cli exits cleanly."""
        argv, ok, output = self._execute(args)
        if not ok:
            raise ToolFailure(mask_secrets(argv), output)

    def run_captured(self, *args: str) -> Tuple[str, Optional[ToolFailure]]:
        """Read call: always hand back the raw output, plus any failure."""
        argv, ok, output = self._execute(args)
        if ok:
            return output, None
        return output, ToolFailure(mask_secrets(argv), output)

    def succeeds(self, *args: str) -> bool:
        """Existence check: a non-zero exit reads as absent.

        The check output is logged on failure so a broken connection can be
        told apart from a resource that is really gone.
        """
        argv, ok, output = self._execute(args)
        if not ok:
            logging.warning(
                "Existence check %s failed; treating as absent. OUTPUT: %s",
                _fmt_cmd_for_log(argv),
                output.strip() or "<empty>",
            )
        return ok

    def settle(self, seconds: float) -> None:
        if seconds <= 0:
            return
        logging.debug("Waiting %.1fs for WordPress to apply the change", seconds)
        self._sleep(seconds)
