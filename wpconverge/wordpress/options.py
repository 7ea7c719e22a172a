"""Single options and the aggregate general-settings resource."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Optional

from wpconverge.utils import log
from .cli import WPCli
from .diagnostics import ReconcileError, Result


@dataclass(frozen=True)
class OptionState:
    name: str
    value: str = ""


@dataclass(frozen=True)
class SiteSettingsState:
    site_name: Optional[str] = None
    site_description: Optional[str] = None
    admin_email: Optional[str] = None
    timezone: Optional[str] = None
    date_format: Optional[str] = None
    time_format: Optional[str] = None
    start_of_week: Optional[str] = None


# field -> wp option key
SITE_SETTING_OPTIONS = {
    "site_name": "blogname",
    "site_description": "blogdescription",
    "admin_email": "admin_email",
    "timezone": "timezone_string",
    "date_format": "date_format",
    "time_format": "time_format",
    "start_of_week": "start_of_week",
}


class OptionReconciler:
    def __init__(self, cli: WPCli):
        self.cli = cli

    def _set(self, desired: OptionState, summary: str) -> Result[OptionState]:
        result: Result[OptionState] = Result(None)
        try:
            # `option update` adds the option when it does not exist yet.
            self.cli.run("option", "update", desired.name, desired.value)
        except ReconcileError as err:
            result.diagnostics.add_error(summary, err)
            return result
        result.state = desired
        return result

    def create(self, desired: OptionState) -> Result[OptionState]:
        return self._set(desired, "Failed to set option")

    def read(self, prior: OptionState) -> Result[OptionState]:
        result: Result[OptionState] = Result(None)
        output, failure = self.cli.run_captured("option", "get", prior.name)
        if failure is not None:
            log(f"Option {prior.name} not readable; dropping from state")
            result.removed = True
            return result
        result.state = replace(prior, value=output.strip())
        return result

    def update(self, desired: OptionState, prior: OptionState) -> Result[OptionState]:
        return self._set(desired, "Failed to update option")

    def delete(self, prior: OptionState) -> Result[OptionState]:
        result: Result[OptionState] = Result(None)
        try:
            self.cli.run("option", "delete", prior.name)
        except ReconcileError as err:
            result.diagnostics.add_error("Failed to delete option", err)
            result.state = prior
            return result
        result.removed = True
        return result


class SiteSettingsReconciler:
    def __init__(self, cli: WPCli):
        self.cli = cli

    def _apply(self, desired: SiteSettingsState) -> None:
        for f in fields(desired):
            value = getattr(desired, f.name)
            if value is None:
                continue
            option = SITE_SETTING_OPTIONS[f.name]
            try:
                self.cli.run("option", "update", option, str(value))
            except ReconcileError as err:
                raise ReconcileError(f"setting {option} failed: {err}") from err

    def create(self, desired: SiteSettingsState) -> Result[SiteSettingsState]:
        result: Result[SiteSettingsState] = Result(None)
        try:
            self._apply(desired)
        except ReconcileError as err:
            result.diagnostics.add_error("Failed to apply site settings", err)
            return result
        result.state = desired
        return result

    def read(self, prior: SiteSettingsState) -> Result[SiteSettingsState]:
        values = {}
        for field_name, option in SITE_SETTING_OPTIONS.items():
            output, failure = self.cli.run_captured("option", "get", option)
            if failure is not None:
                log(f"Could not read {option}; keeping previous value")
                continue
            values[field_name] = output.strip()
        return Result(replace(prior, **values))

    def update(self, desired: SiteSettingsState,
               prior: SiteSettingsState) -> Result[SiteSettingsState]:
        result: Result[SiteSettingsState] = Result(None)
        try:
            self._apply(desired)
        except ReconcileError as err:
            result.diagnostics.add_error("Failed to update site settings", err)
            return result
        result.state = desired
        return result

    def delete(self, prior: SiteSettingsState) -> Result[SiteSettingsState]:
        # General settings cannot be unset; they stay on the site.
        return Result(None, removed=True)
