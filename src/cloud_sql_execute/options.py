"""Option resolution: CLI flags merged over the environment, then validated.

Usage:
    raw = RawOptions.from_namespace(args)
    options = merge_options(raw, environ)
    check_required(options)
    auth = validate_auth(options)
"""

from __future__ import annotations

import argparse
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from .environment import ENV_VARS, get_env_bool, get_env_int, get_env_value
from .errors import (
    InvalidFormatError,
    InvalidLimitError,
    MissingAuthMethodError,
    MissingInstanceError,
    MissingQueryError,
    MissingUserError,
    MultipleAuthMethodsError,
)

OUTPUT_FORMATS = ("json", "text")
DEFAULT_FORMAT = "text"

T = TypeVar("T")


def parse_limit(value: str | int | None) -> int | None:
    """Convert a --limit argument, rejecting anything that is not an integer."""
    if value is None or isinstance(value, int):
        return value
    if not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        raise InvalidLimitError(value) from None


@dataclass(frozen=True)
class RawOptions:
    """Values exactly as given on the command line."""

    query: str
    project: str | None = None
    instance: str | None = None
    database: str | None = None
    user: str | None = None
    password: str | None = None
    access_token: str | None = None
    secret_path: str | None = None
    auto_iam_authn: bool = False
    format: str | None = None
    limit: int | None = None
    verbose: bool = False

    @classmethod
    def from_namespace(cls, args: argparse.Namespace) -> RawOptions:
        """Build from parsed argparse arguments."""
        return cls(
            query=args.query,
            project=args.project,
            instance=args.instance,
            database=args.database,
            user=args.user,
            password=args.password,
            access_token=args.access_token,
            secret_path=args.secret_path,
            auto_iam_authn=args.auto_iam_authn,
            format=args.format,
            limit=parse_limit(args.limit),
            verbose=args.verbose,
        )


@dataclass(frozen=True)
class ResolvedOptions:
    """Options after environment fallback.

    Optional fields are None when neither the CLI nor the environment gave a
    non-empty value. ``instance`` is "" rather than None so the required
    check reports it.
    """

    query: str
    instance: str = ""
    project: str | None = None
    database: str | None = None
    user: str | None = None
    password: str | None = None
    access_token: str | None = None
    secret_path: str | None = None
    auto_iam_authn: bool = False
    format: str = DEFAULT_FORMAT
    limit: int | None = None
    verbose: bool = False


def _first(cli_value: T | None, env_value: T | None) -> T | None:
    # Empty strings and a zero limit count as not given
    if cli_value:
        return cli_value
    return env_value or None


def merge_options(raw: RawOptions, environ: Mapping[str, str]) -> ResolvedOptions:
    """Backfill every option from ``environ``; CLI values always win."""

    def env(option: str) -> str | None:
        return get_env_value(ENV_VARS[option], environ)

    return ResolvedOptions(
        query=raw.query,
        project=_first(raw.project, env("project")),
        instance=_first(raw.instance, env("instance")) or "",
        database=_first(raw.database, env("database")),
        user=_first(raw.user, env("user")),
        password=_first(raw.password, env("password")),
        access_token=_first(raw.access_token, env("access_token")),
        secret_path=_first(raw.secret_path, env("secret_path")),
        auto_iam_authn=raw.auto_iam_authn or get_env_bool(ENV_VARS["auto_iam_authn"], environ),
        format=_first(raw.format, env("format")) or DEFAULT_FORMAT,
        limit=_first(raw.limit, get_env_int(ENV_VARS["limit"], environ)),
        verbose=raw.verbose or get_env_bool(ENV_VARS["verbose"], environ),
    )


def check_required(options: ResolvedOptions) -> None:
    """Reject options that cannot produce a request at all."""
    if not options.query.strip():
        raise MissingQueryError()
    if not options.instance:
        raise MissingInstanceError()
    if options.format not in OUTPUT_FORMATS:
        raise InvalidFormatError(options.format)
    if options.limit is not None and options.limit < 0:
        raise InvalidLimitError(options.limit)


class AuthMethod(Enum):
    """Supported authentication schemes, named as the API fields are."""

    PASSWORD = "password"
    SECRET_PATH = "secretPath"
    ACCESS_TOKEN = "accessToken"
    AUTO_IAM_AUTHN = "autoIamAuthn"


@dataclass(frozen=True)
class AuthMode:
    """The single authentication method selected for a request.

    ``credential`` is the value sent under the method's API field: the
    password, secret path or token, or True for auto IAM authentication.
    """

    method: AuthMethod
    credential: str | bool
    user: str | None = None

    def payload_fields(self) -> dict[str, str | bool]:
        """Request body fields for this method."""
        return {self.method.value: self.credential}


def _selected_methods(options: ResolvedOptions) -> list[tuple[AuthMethod, str | bool]]:
    flags = [
        (AuthMethod.PASSWORD, options.password),
        (AuthMethod.SECRET_PATH, options.secret_path),
        (AuthMethod.ACCESS_TOKEN, options.access_token),
        (AuthMethod.AUTO_IAM_AUTHN, options.auto_iam_authn),
    ]
    return [(method, value) for method, value in flags if value]


def validate_auth(options: ResolvedOptions, require: bool = False) -> AuthMode | None:
    """Pick the authentication method, enforcing the exclusivity rules.

    Returns None when no method is selected, meaning the call relies on the
    caller's ambient identity. With ``require=True`` that case is an error.

    Raises:
        MultipleAuthMethodsError: more than one method is set.
        MissingUserError: password or secret path given without a user.
        MissingAuthMethodError: no method set and ``require`` is True.
    """
    methods = _selected_methods(options)

    if len(methods) > 1:
        raise MultipleAuthMethodsError([method.value for method, _ in methods])

    if (options.password or options.secret_path) and not options.user:
        raise MissingUserError()

    if not methods:
        if require:
            raise MissingAuthMethodError()
        return None

    method, credential = methods[0]
    return AuthMode(method=method, credential=credential, user=options.user)
