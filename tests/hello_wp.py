#!/usr/bin/env python3
"""Minimal smoke test: read-only reconciliation against a live site.

- Targets the profile from WP_SSH_TARGET / WP_REMOTE_PATH / WP_ALLOW_ROOT
- Read-only checks: blogname option, site settings, one plugin, one theme
- Emits a single compact JSON line then a PASS/FAIL line
- Set WPCONVERGE_TEST_PLUGIN / WPCONVERGE_TEST_THEME to pick the resources
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict

from wpconverge.utils import init_logging, status_fail, status_pass
from wpconverge.wordpress.options import OptionState, SiteSettingsState
from wpconverge.wordpress.plugins import PluginState
from wpconverge.wordpress.provider import Provider, profile_from_env
from wpconverge.wordpress.themes import ThemeState


DEFAULT_PLUGIN = "akismet"
DEFAULT_THEME = "twentytwentyfour"


def main() -> int:
    os.environ.setdefault("WPCONVERGE_RID", "hello")
    init_logging(None)

    provider = Provider(profile_from_env())
    plugin = os.environ.get("WPCONVERGE_TEST_PLUGIN", DEFAULT_PLUGIN)
    theme = os.environ.get("WPCONVERGE_TEST_THEME", DEFAULT_THEME)

    blogname = provider.reconciler("option").read(OptionState("blogname"))
    if blogname.removed or not blogname.ok:
        status_fail("option get blogname failed")
        return 1

    settings = provider.reconciler("site_settings").read(SiteSettingsState())

    plugin_result = provider.reconciler("plugin").read(PluginState(plugin))
    if not plugin_result.ok:
        status_fail(f"plugin status failed for {plugin}")
        return 1

    theme_result = provider.reconciler("theme").read(ThemeState(theme))
    if not theme_result.ok:
        status_fail(f"theme status failed for {theme}")
        return 1

    result = {
        "blogname": blogname.state.value,
        "settings": asdict(settings.state),
        "plugin": None if plugin_result.removed else asdict(plugin_result.state),
        "theme": None if theme_result.removed else asdict(theme_result.state),
    }
    print(json.dumps(result, ensure_ascii=False, separators=(",", ":")))
    status_pass("hello-wordpress ok")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
