"""User accounts and the read-only user lookup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from wpconverge.utils import log
from .cli import WPCli
from .diagnostics import ReconcileError, Result


@dataclass(frozen=True)
class UserState:
    username: str
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    display_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


@dataclass(frozen=True)
class UserInfo:
    username: str
    email: str = ""
    role: str = ""
    display_name: str = ""
    first_name: str = ""
    last_name: str = ""


# UserInfo field -> `wp user get --field` name
USER_INFO_FIELDS = {
    "email": "user_email",
    "role": "roles",
    "display_name": "display_name",
    "first_name": "first_name",
    "last_name": "last_name",
}


def _optional_flags(user: UserState) -> list[str]:
    flags = []
    if user.display_name is not None:
        flags.append(f"--display_name={user.display_name}")
    if user.first_name is not None:
        flags.append(f"--first_name={user.first_name}")
    if user.last_name is not None:
        flags.append(f"--last_name={user.last_name}")
    return flags


class UserReconciler:
    def __init__(self, cli: WPCli):
        self.cli = cli

    def create(self, desired: UserState) -> Result[UserState]:
        result: Result[UserState] = Result(None)
        args = [
            "user", "create",
            desired.username,
            desired.email or "",
            f"--user_pass={desired.password or ''}",
            f"--role={desired.role or ''}",
        ]
        args.extend(_optional_flags(desired))
        try:
            self.cli.run(*args)
        except ReconcileError as err:
            result.diagnostics.add_error("Failed to create WordPress user", err)
            return result
        result.state = desired
        return result

    def read(self, prior: UserState) -> Result[UserState]:
        # Existence only; field drift is not reconciled here.
        if not self.cli.succeeds("user", "get", prior.username):
            log(f"User {prior.username} not found; dropping from state")
            return Result(None, removed=True)
        return Result(prior)

    def update(self, desired: UserState, prior: UserState) -> Result[UserState]:
        result: Result[UserState] = Result(None)
        name = desired.username

        # Credential rotation is its own wp-cli invocation.
        if desired.password is not None:
            try:
                self.cli.run("user", "update", name, f"--user_pass={desired.password}")
            except ReconcileError as err:
                result.diagnostics.add_error("Failed to update password", err)
                return result

        args = ["user", "update", name]
        if desired.email is not None:
            args.append(f"--user_email={desired.email}")
        if desired.role is not None:
            args.append(f"--role={desired.role}")
        args.extend(_optional_flags(desired))

        # wp-cli refuses `user update <u>` with no fields.
        if len(args) == 3:
            result.state = desired
            return result

        try:
            self.cli.run(*args)
        except ReconcileError as err:
            result.diagnostics.add_error("Failed to update WordPress user", err)
            return result

        result.state = desired
        return result

    def delete(self, prior: UserState) -> Result[UserState]:
        result: Result[UserState] = Result(None)
        try:
            self.cli.run("user", "delete", prior.username, "--yes")
        except ReconcileError as err:
            result.diagnostics.add_error("Failed to delete WordPress user", err)
            result.state = prior
            return result
        result.removed = True
        return result


def _read_user_field(cli: WPCli, username: str, field: str) -> str:
    output, failure = cli.run_captured("user", "get", username, f"--field={field}")
    if failure is None:
        return output.strip()
    meta, meta_failure = cli.run_captured("user", "meta", "get", username, field)
    if meta_failure is None and meta.strip():
        return meta.strip()
    log(f"Could not fetch field {field} for user {username}")
    return ""


def lookup_user(cli: WPCli, username: str) -> Result[UserInfo]:
    result: Result[UserInfo] = Result(None)
    _, failure = cli.run_captured("user", "get", username)
    if failure is not None:
        result.diagnostics.add_error(
            "User not found",
            f"User {username} does not exist or cannot be accessed: {failure}",
        )
        return result

    values = {
        attr: _read_user_field(cli, username, field)
        for attr, field in USER_INFO_FIELDS.items()
    }
    result.state = UserInfo(username=username, **values)
    return result
