import pytest

from wpconverge.wordpress.cli import ConnectionProfile
from wpconverge.wordpress.options import OptionReconciler, SiteSettingsReconciler
from wpconverge.wordpress.plugins import PluginReconciler, PluginState
from wpconverge.wordpress.provider import Provider, profile_from_config
from wpconverge.wordpress.themes import ThemeReconciler
from wpconverge.wordpress.users import UserReconciler


def test_profile_from_config_defaults_unset_values():
    profile = profile_from_config({"ssh_target": "user@host", "remote_path": None})
    assert profile == ConnectionProfile(ssh_target="user@host", remote_path="", allow_root=False)


def test_profile_from_config_full():
    profile = profile_from_config(
        {"ssh_target": "docker:wp", "remote_path": "/var/www/html", "allow_root": True}
    )
    assert profile.allow_root is True
    assert profile.remote_path == "/var/www/html"


@pytest.mark.parametrize(
    "kind, cls",
    [
        ("plugin", PluginReconciler),
        ("theme", ThemeReconciler),
        ("option", OptionReconciler),
        ("site_settings", SiteSettingsReconciler),
        ("user", UserReconciler),
    ],
)
def test_reconciler_registry(runner, kind, cls):
    provider = Provider(ConnectionProfile(), runner=runner)
    assert isinstance(provider.reconciler(kind), cls)


def test_unknown_kind(runner):
    with pytest.raises(KeyError):
        Provider(ConnectionProfile(), runner=runner).reconciler("widget")


def test_reconcilers_share_profile_flags(runner, sleeps):
    profile = ConnectionProfile(ssh_target="user@example.com", allow_root=True)
    provider = Provider(profile, runner=runner, sleep=sleeps.append)

    provider.reconciler("plugin").delete(PluginState("akismet"))

    assert runner.calls[0][1] == ["--ssh=user@example.com", "--allow-root", "plugin", "delete", "akismet"]
