"""Theme lifecycle under WordPress' "exactly one active theme" rule.

wp-cli has no `theme deactivate`; a theme stops being active only when another
one is activated. ThemeFallbackSolver owns that search:

- direct activation when a theme should become active;
- deactivation by activating a replacement (first inactive theme that
  activates cleanly);
- before deleting the active theme, activate a preferred fallback that is
  already installed;
- when no replacement can be activated the site keeps the theme active and
  the reconciler reports a warning, not an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence

from wpconverge.config import FALLBACK_THEMES, THEME_SETTLE_SECONDS
from wpconverge.utils import log
from .cli import WPCli
from .diagnostics import ReconcileError, Result
from .status import is_theme_active


@dataclass(frozen=True)
class ThemeState:
    name: str
    active: Optional[bool] = None


class ThemeFallbackSolver:
    def __init__(self, cli: WPCli, preferred: Sequence[str] = FALLBACK_THEMES):
        self.cli = cli
        self.preferred = tuple(preferred)

    def inactive_themes(self) -> list[str]:
        output, failure = self.cli.run_captured(
            "theme", "list", "--status=inactive", "--field=name"
        )
        if failure is not None:
            logging.warning("Could not list inactive themes: %s", output.strip())
            return []
        return [ln.strip() for ln in output.splitlines() if ln.strip()]

    def activate_first(self, candidates: Iterable[str], exclude: str,
                       require_installed: bool = False) -> Optional[str]:
        for theme in candidates:
            if theme == exclude:
                continue
            if require_installed and not self.cli.succeeds("theme", "is-installed", theme):
                log(f"Fallback theme {theme} not installed; skipping")
                continue
            try:
                self.cli.run("theme", "activate", theme)
            except ReconcileError as err:
                logging.warning("Could not activate replacement theme %s: %s", theme, err)
                continue
            log(f"Activated replacement theme {theme} in place of {exclude}")
            return theme
        return None

    def replace_active(self, theme: str) -> Optional[str]:
        return self.activate_first(self.inactive_themes(), exclude=theme)

    def replace_before_delete(self, theme: str) -> Optional[str]:
        return self.activate_first(self.preferred, exclude=theme, require_installed=True)


class ThemeReconciler:
    def __init__(self, cli: WPCli, solver: Optional[ThemeFallbackSolver] = None,
                 settle_seconds: float = THEME_SETTLE_SECONDS):
        self.cli = cli
        self.solver = solver or ThemeFallbackSolver(cli)
        self.settle_seconds = settle_seconds

    def _is_active(self, name: str) -> bool:
        output, failure = self.cli.run_captured("theme", "status", name)
        if failure is not None:
            raise failure
        return is_theme_active(output)

    def create(self, desired: ThemeState) -> Result[ThemeState]:
        result: Result[ThemeState] = Result(None)
        name = desired.name
        want_active = bool(desired.active)
        log(f"Installing theme {name}, requested active={desired.active}")

        # Never --activate on install; activation goes through the solver.
        try:
            self.cli.run("theme", "install", name)
        except ReconcileError as err:
            result.diagnostics.add_error("Failed to install theme", err)
            return result

        self.cli.settle(self.settle_seconds)

        try:
            active = self._is_active(name)
        except ReconcileError as err:
            result.diagnostics.add_error("Failed to determine theme status", err)
            return result

        if desired.active is not None and active != want_active:
            if want_active:
                try:
                    self.cli.run("theme", "activate", name)
                except ReconcileError as err:
                    result.diagnostics.add_error("Failed to activate theme", err)
                    result.state = replace(desired, active=active)
                    return result
            elif self.solver.replace_active(name) is None:
                result.diagnostics.add_warning(
                    "Theme could not be deactivated",
                    "WordPress requires one active theme. Theme will remain active.",
                )
            self.cli.settle(self.settle_seconds)
            try:
                active = self._is_active(name)
            except ReconcileError as err:
                result.diagnostics.add_error("Failed to verify theme status", err)
                return result

        result.state = replace(desired, active=active)
        return result

    def read(self, prior: ThemeState) -> Result[ThemeState]:
        result: Result[ThemeState] = Result(None)

        if not self.cli.succeeds("theme", "is-installed", prior.name):
            log(f"Theme {prior.name} no longer installed; dropping from state")
            result.removed = True
            return result

        try:
            active = self._is_active(prior.name)
        except ReconcileError as err:
            result.diagnostics.add_error("Failed to check theme status", err)
            return result

        result.state = replace(prior, active=active)
        return result

    def update(self, desired: ThemeState, prior: ThemeState) -> Result[ThemeState]:
        result: Result[ThemeState] = Result(None)
        name = desired.name
        was_active = bool(prior.active)

        if desired.active and not was_active:
            try:
                self.cli.run("theme", "activate", name)
            except ReconcileError as err:
                result.diagnostics.add_error("Failed to activate theme", err)
                return result
            self.cli.settle(self.settle_seconds)
        elif desired.active is False and was_active:
            if self.solver.replace_active(name) is None:
                result.diagnostics.add_warning(
                    "Cannot deactivate theme",
                    "WordPress requires one active theme. This theme will remain active.",
                )
            self.cli.settle(self.settle_seconds)

        try:
            active = self._is_active(name)
        except ReconcileError as err:
            result.diagnostics.add_error("Failed to verify theme status", err)
            return result

        if desired.active is False and active and not result.diagnostics.has_warning():
            result.diagnostics.add_warning(
                "Theme is still active",
                "WordPress kept this theme active after a replacement was activated.",
            )

        result.state = replace(desired, active=active)
        return result

    def delete(self, prior: ThemeState) -> Result[ThemeState]:
        result: Result[ThemeState] = Result(None)
        name = prior.name

        try:
            active = self._is_active(name)
        except ReconcileError as err:
            # Unknown status: attempt the delete and let wp-cli refuse if needed.
            log(f"Could not read status of theme {name} before delete: {err}")
            active = False

        if active:
            if self.solver.replace_before_delete(name) is None:
                result.diagnostics.add_warning(
                    "Cannot delete active theme",
                    "Theme is active and no fallback could be activated. Resource "
                    "will be removed from state but may still exist in WordPress.",
                )
                result.removed = True
                return result
            self.cli.settle(self.settle_seconds)

        try:
            self.cli.run("theme", "delete", name)
        except ReconcileError as err:
            result.diagnostics.add_error("Failed to delete theme", err)
            result.state = prior
            return result

        result.removed = True
        return result
