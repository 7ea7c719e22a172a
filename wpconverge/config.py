"""Shared configuration constants for wpconverge.

Centralizes the wp-cli binary, timing knobs and theme fallbacks used by the
reconcilers. Each value can be overridden through the environment.
"""

import os

WP_CLI_BINARY = os.environ.get("WP_CLI_PATH", "wp")

# 0 disables the per-call timeout; the host owns overall deadlines.
WP_TIMEOUT = int(os.environ.get("WP_TIMEOUT", "0"))  # seconds

# WordPress applies (de)activation asynchronously relative to wp-cli exiting.
PLUGIN_SETTLE_SECONDS = float(os.environ.get("WPCONVERGE_PLUGIN_SETTLE", "3"))
THEME_SETTLE_SECONDS = float(os.environ.get("WPCONVERGE_THEME_SETTLE", "2"))

# Preference order when an active theme must be replaced before deletion.
FALLBACK_THEMES = tuple(
    name.strip()
    for name in os.environ.get(
        "WPCONVERGE_FALLBACK_THEMES",
        "twentytwentyfour,twentytwentythree,twentytwentytwo",
    ).split(",")
    if name.strip()
)

LOG_DIR = os.environ.get("WPCONVERGE_LOG_DIR", "log")

# Connection profile defaults for the operator CLI.
SSH_TARGET = os.environ.get("WP_SSH_TARGET", "")
REMOTE_PATH = os.environ.get("WP_REMOTE_PATH", "")
ALLOW_ROOT = os.environ.get("WP_ALLOW_ROOT", "").strip().lower() in ("1", "true", "yes")
