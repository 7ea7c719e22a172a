"""Operator entry point: run one reconciler operation against a site.

usage: python -m wpconverge.wordpress [--ssh=T] [--path=P] [--allow-root]
         read|delete <kind> <name>
         apply <kind> <name> [key=value ...]
         lookup-user <username>

site_settings takes no name: `apply site_settings timezone=UTC`.
"""

from __future__ import annotations

import json
import sys
from dataclasses import asdict, fields, replace

from wpconverge.utils import init_logging, status_fail, status_pass
from .options import OptionState, SiteSettingsState
from .plugins import PluginState
from .provider import RECONCILERS, Provider, profile_from_env
from .themes import ThemeState
from .users import UserState

USAGE = (
    "usage: [--ssh=T] [--path=P] [--allow-root] "
    "read|delete|apply <kind> <name> [key=value ...] | lookup-user <username>"
)

STATE_TYPES = {
    "plugin": PluginState,
    "theme": ThemeState,
    "option": OptionState,
    "site_settings": SiteSettingsState,
    "user": UserState,
}
NAME_FIELDS = {"plugin": "name", "theme": "name", "option": "name", "user": "username"}


def _parse_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


def _build_state(kind: str, name: str, pairs: dict[str, str]):
    cls = STATE_TYPES[kind]
    values: dict = dict(pairs)
    unknown = set(values) - {f.name for f in fields(cls)}
    if unknown:
        raise TypeError(f"unexpected attributes: {', '.join(sorted(unknown))}")
    if "active" in values:
        values["active"] = _parse_bool(values["active"])
    name_field = NAME_FIELDS.get(kind)
    if name_field:
        values[name_field] = name
    return cls(**values)


def _print_state(state) -> None:
    if state is None:
        print("null")
        return
    data = asdict(state)
    if data.get("password"):
        data["password"] = "***"
    print(json.dumps(data, ensure_ascii=False, separators=(",", ":")))


def _report(action: str, result) -> int:
    _print_state(result.state)
    if result.diagnostics.has_error():
        first = result.diagnostics.errors[0]
        status_fail(f"{action}: {first.summary}; see log")
        return 1
    note = ""
    if result.removed:
        note = " (removed from state)"
    for warning in result.diagnostics.warnings:
        note += f" (warning: {warning.summary})"
    status_pass(f"{action}{note}")
    return 0


def _apply(reconciler, kind: str, desired):
    if kind == "site_settings":
        return reconciler.update(desired, desired)
    current = reconciler.read(desired)
    if current.diagnostics.has_error():
        return current
    if current.removed:
        return reconciler.create(desired)
    return reconciler.update(desired, current.state)


def main(argv: list[str] | None = None) -> int:
    init_logging(None)
    argv = sys.argv[1:] if argv is None else argv
    flags = [a for a in argv if a.startswith("--")]
    args = [a for a in argv if not a.startswith("--")]

    profile = profile_from_env()
    for f in flags:
        if f.startswith("--ssh="):
            profile = replace(profile, ssh_target=f.split("=", 1)[1])
        elif f.startswith("--path="):
            profile = replace(profile, remote_path=f.split("=", 1)[1])
        elif f == "--allow-root":
            profile = replace(profile, allow_root=True)
        else:
            status_fail(f"unknown flag {f}")
            return 1

    if not args:
        status_fail(USAGE)
        return 1

    provider = Provider(profile)
    cmd = args[0]

    if cmd == "lookup-user":
        if len(args) < 2:
            status_fail("missing username")
            return 1
        return _report(f"lookup-user {args[1]}", provider.lookup_user(args[1]))

    if cmd not in ("read", "delete", "apply"):
        status_fail("unknown subcommand")
        return 1
    if len(args) < 2 or args[1] not in RECONCILERS:
        status_fail(f"kind must be one of: {', '.join(RECONCILERS)}")
        return 1
    kind = args[1]
    rest = args[2:]
    name = ""
    if kind != "site_settings":
        if not rest:
            status_fail("missing name")
            return 1
        name, rest = rest[0], rest[1:]

    pairs: dict[str, str] = {}
    for item in rest:
        if "=" not in item:
            status_fail(f"expected key=value, got {item}")
            return 1
        key, value = item.split("=", 1)
        pairs[key] = value

    try:
        state = _build_state(kind, name, pairs)
    except TypeError as err:
        status_fail(f"invalid attributes for {kind}: {err}")
        return 1

    reconciler = provider.reconciler(kind)
    label = f"{cmd} {kind} {name}".rstrip()
    if cmd == "read":
        return _report(label, reconciler.read(state))
    if cmd == "delete":
        return _report(label, reconciler.delete(state))
    return _report(label, _apply(reconciler, kind, state))


if __name__ == "__main__":
    raise SystemExit(main())
