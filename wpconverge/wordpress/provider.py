"""Connection profile configuration and the reconciler registry."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from wpconverge import config
from .cli import CommandRunner, ConnectionProfile, WPCli
from .options import OptionReconciler, SiteSettingsReconciler
from .plugins import PluginReconciler
from .themes import ThemeReconciler
from .users import UserReconciler, lookup_user

RECONCILERS = {
    "plugin": PluginReconciler,
    "theme": ThemeReconciler,
    "option": OptionReconciler,
    "site_settings": SiteSettingsReconciler,
    "user": UserReconciler,
}


def profile_from_config(data: Mapping[str, Any]) -> ConnectionProfile:
    """Build a profile from host configuration; unset values fall back to defaults."""
    ssh_target = data.get("ssh_target")
    remote_path = data.get("remote_path")
    allow_root = data.get("allow_root")
    return ConnectionProfile(
        ssh_target="" if ssh_target is None else str(ssh_target),
        remote_path="" if remote_path is None else str(remote_path),
        allow_root=False if allow_root is None else bool(allow_root),
    )


def profile_from_env() -> ConnectionProfile:
    return ConnectionProfile(
        ssh_target=config.SSH_TARGET,
        remote_path=config.REMOTE_PATH,
        allow_root=config.ALLOW_ROOT,
    )


class Provider:
    """Hands out reconcilers that share one profile and one runner."""

    def __init__(
        self,
        profile: ConnectionProfile,
        runner: Optional[CommandRunner] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.profile = profile
        self.cli = WPCli(profile, runner=runner, sleep=sleep)

    def reconciler(self, kind: str):
        try:
            factory = RECONCILERS[kind]
        except KeyError:
            raise KeyError(f"unknown resource kind: {kind}") from None
        return factory(self.cli)

    def lookup_user(self, username: str):
        return lookup_user(self.cli, username)
