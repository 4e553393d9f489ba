"""Exception hierarchy for cloud-sql-execute.

Everything raised on purpose derives from CloudSqlExecuteError so the CLI
can report it on stderr and exit 1 without a traceback.
"""

from __future__ import annotations

from typing import Any


class CloudSqlExecuteError(Exception):
    """Base class for all expected failures."""


class ConfigurationError(CloudSqlExecuteError):
    """Invalid or incomplete options, detected before any network call."""


class MissingInstanceError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__(
            "Cloud SQL Instance ID is required. Specify with -i/--instance "
            "or set CLOUD_SQL_INSTANCE environment variable."
        )


class MultipleAuthMethodsError(ConfigurationError):
    """More than one authentication method was selected."""

    def __init__(self, methods: list[str]) -> None:
        self.methods = list(methods)
        super().__init__(
            f"Multiple authentication methods specified: {', '.join(self.methods)}. "
            "Please use only one."
        )


class MissingUserError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("--user is required when using --password or --secret-path")


class MissingAuthMethodError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__(
            "An authentication method is required: --password, --secret-path, "
            "--access-token or --auto-iam-authn"
        )


class InvalidFormatError(ConfigurationError):
    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid output format '{value}'. Use: json, text")


class InvalidLimitError(ConfigurationError):
    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid row limit '{value}'. Use a non-negative integer")


class MissingQueryError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("SQL query must not be empty")


class ProjectResolutionError(CloudSqlExecuteError):
    """No project was given and none could be detected."""

    def __init__(self) -> None:
        super().__init__(
            "Could not detect default project ID. Please specify with -p/--project option.\n"
            "Make sure you're authenticated with 'gcloud auth application-default login'."
        )


class TransportError(CloudSqlExecuteError):
    """The executeSql call failed.

    Carries whatever the transport knew about the failure: HTTP status and
    reason, the decoded response body and the request URL. ``status`` is None
    when the request never produced a response (DNS, TLS, credentials).
    """

    def __init__(
        self,
        message: str,
        url: str,
        status: int | None = None,
        reason: str | None = None,
        body: Any = None,
    ) -> None:
        self.message = message
        self.url = url
        self.status = status
        self.reason = reason
        self.body = body
        super().__init__(message)
