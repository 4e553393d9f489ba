"""Typed lookups over an environment snapshot.

The process environment is never read implicitly here: callers pass the
mapping in, which keeps option merging a pure function in tests.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values

from .errors import ConfigurationError

# Environment variable names, one per CLI option
ENV_VARS: dict[str, str] = {
    "project": "GOOGLE_CLOUD_PROJECT",
    "instance": "CLOUD_SQL_INSTANCE",
    "database": "CLOUD_SQL_DATABASE",
    "user": "CLOUD_SQL_USER",
    "password": "CLOUD_SQL_PASSWORD",
    "access_token": "CLOUD_SQL_ACCESS_TOKEN",
    "secret_path": "CLOUD_SQL_SECRET_PATH",
    "auto_iam_authn": "CLOUD_SQL_AUTO_IAM_AUTHN",
    "format": "CLOUD_SQL_FORMAT",
    "limit": "CLOUD_SQL_LIMIT",
    "verbose": "CLOUD_SQL_VERBOSE",
}

TRUE_VALUES = ("true", "1")


def get_env_value(name: str, environ: Mapping[str, str]) -> str | None:
    """Return the variable's value, or None when unset or empty."""
    value = environ.get(name)
    if not value:
        return None
    return value


def get_env_bool(name: str, environ: Mapping[str, str]) -> bool:
    """Return True only for the literal values "true" and "1"."""
    return environ.get(name) in TRUE_VALUES


def get_env_int(name: str, environ: Mapping[str, str]) -> int | None:
    """Parse an integer variable, returning None when absent or not numeric."""
    value = get_env_value(name, environ)
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def build_environment(env_file: Path | None = None) -> dict[str, str]:
    """Snapshot the environment with values from a .env file underneath.

    Reads ``env_file`` when given, otherwise ``.env`` in the current
    directory if it exists. Process variables take precedence over file
    values and ``os.environ`` itself is left untouched.
    """
    if env_file is not None:
        if not env_file.is_file():
            raise ConfigurationError(f"Environment file not found: {env_file}")
        path: Path | None = env_file
    else:
        cwd_env = Path.cwd() / ".env"
        path = cwd_env if cwd_env.is_file() else None

    snapshot: dict[str, str] = {}
    if path is not None:
        for key, value in dotenv_values(path).items():
            if value is not None:
                snapshot[key] = value

    snapshot.update(os.environ)
    return snapshot
