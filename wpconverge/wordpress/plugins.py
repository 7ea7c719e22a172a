"""Plugin lifecycle: install, (de)activate, verify, delete.

wp-cli may activate a plugin on install even when nobody asked for it, so the
observed `active` flag is always re-read from `wp plugin status` after every
mutation and never copied from the request. `active=None` leaves activation
unmanaged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from wpconverge.config import PLUGIN_SETTLE_SECONDS
from wpconverge.utils import log
from .cli import WPCli
from .diagnostics import ReconcileError, Result, VerificationFailure
from .status import read_plugin_status


@dataclass(frozen=True)
class PluginState:
    name: str
    active: Optional[bool] = None


class PluginReconciler:
    def __init__(self, cli: WPCli, settle_seconds: float = PLUGIN_SETTLE_SECONDS):
        self.cli = cli
        self.settle_seconds = settle_seconds

    def _require_installed(self, name: str) -> None:
        output, failure = self.cli.run_captured("plugin", "is-installed", name)
        if failure is not None:
            raise VerificationFailure(
                f"Plugin {name} is not installed after install reported success",
                output,
            )

    def _is_active(self, name: str) -> bool:
        output, failure = self.cli.run_captured("plugin", "status", name)
        if failure is not None:
            raise failure
        reading = read_plugin_status(output, name)
        logging.debug(
            "plugin %s active=%s (basis=%s line=%r)",
            name,
            reading.active,
            reading.basis,
            reading.line,
        )
        return reading.active

    def create(self, desired: PluginState) -> Result[PluginState]:
        result: Result[PluginState] = Result(None)
        want_active = bool(desired.active)

        args = ["plugin", "install", desired.name]
        if want_active:
            args.append("--activate")
        log(f"Installing plugin {desired.name} active={desired.active}")

        try:
            self.cli.run(*args)
        except ReconcileError as err:
            result.diagnostics.add_error("Failed to install plugin", err)
            return result

        self.cli.settle(self.settle_seconds)

        try:
            self._require_installed(desired.name)
            active = self._is_active(desired.name)
        except VerificationFailure as err:
            result.diagnostics.add_error("Plugin not installed after install attempt", err)
            return result
        except ReconcileError as err:
            result.diagnostics.add_error("Failed to verify plugin status", err)
            return result

        if active and desired.active is False:
            log(f"Plugin {desired.name} was activated on install; deactivating")
            try:
                self.cli.run("plugin", "deactivate", desired.name)
                self.cli.settle(self.settle_seconds)
                active = self._is_active(desired.name)
            except ReconcileError as err:
                result.diagnostics.add_error("Failed to deactivate plugin", err)
                result.state = replace(desired, active=active)
                return result
            if active:
                result.diagnostics.add_error(
                    "Plugin could not be deactivated",
                    f"Plugin {desired.name} is still active after an explicit deactivate",
                )

        result.state = replace(desired, active=active)
        return result

    def read(self, prior: PluginState) -> Result[PluginState]:
        result: Result[PluginState] = Result(None)

        if not self.cli.succeeds("plugin", "is-installed", prior.name):
            log(f"Plugin {prior.name} no longer installed; dropping from state")
            result.removed = True
            return result

        try:
            active = self._is_active(prior.name)
        except ReconcileError as err:
            result.diagnostics.add_error("Failed to get plugin status", err)
            return result

        result.state = replace(prior, active=active)
        return result

    def update(self, desired: PluginState, prior: PluginState) -> Result[PluginState]:
        result: Result[PluginState] = Result(None)

        changing = desired.active is not None and desired.active != bool(prior.active)
        if changing:
            action = "activate" if desired.active else "deactivate"
            log(f"Changing plugin {desired.name}: {action}")
            try:
                self.cli.run("plugin", action, desired.name)
            except ReconcileError as err:
                result.diagnostics.add_error("Failed to update plugin activation", err)
                return result
            self.cli.settle(self.settle_seconds)

        try:
            active = self._is_active(desired.name)
        except ReconcileError as err:
            result.diagnostics.add_error("Failed to verify plugin status", err)
            return result

        result.state = replace(desired, active=active)
        return result

    def delete(self, prior: PluginState) -> Result[PluginState]:
        result: Result[PluginState] = Result(None)
        try:
            self.cli.run("plugin", "delete", prior.name)
        except ReconcileError as err:
            result.diagnostics.add_error("Failed to delete plugin", err)
            result.state = prior
            return result
        result.removed = True
        return result
