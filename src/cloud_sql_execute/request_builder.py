"""Build the executeSql request body and its log-safe twin."""

from __future__ import annotations

from typing import Any

from .options import AuthMode, ResolvedOptions

MASK = "***MASKED***"

# Keys whose values are credentials and must never reach a log record
SECRET_FIELDS = ("password", "accessToken")

# ResolvedOptions attribute -> payload key
CONNECTION_FIELDS = (
    ("database", "database"),
    ("user", "user"),
)
CREDENTIAL_FIELDS = (
    ("password", "password"),
    ("access_token", "accessToken"),
    ("secret_path", "secretPath"),
)


def _credential_fields(options: ResolvedOptions) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for attr, key in CREDENTIAL_FIELDS:
        value = getattr(options, attr)
        if value:
            fields[key] = value
    if options.auto_iam_authn:
        fields["autoIamAuthn"] = True
    return fields


def build_payload(
    sql: str,
    options: ResolvedOptions,
    auth: AuthMode | None = None,
) -> dict[str, Any]:
    """Return the request body for ``sql``.

    Only options that were actually provided are included; the API treats a
    present-but-empty field differently from an absent one. When ``auth`` is
    given (the result of ``validate_auth``) the credential fields come from
    it alone; otherwise every credential option present is copied as-is.
    """
    payload: dict[str, Any] = {"sqlStatement": sql}

    for attr, key in CONNECTION_FIELDS:
        value = getattr(options, attr)
        if value:
            payload[key] = value

    if auth is not None:
        payload.update(auth.payload_fields())
    else:
        payload.update(_credential_fields(options))

    # rowLimit 0 is the API's own "no limit" default, so it is never sent
    if options.limit:
        payload["rowLimit"] = options.limit

    return payload


def redact_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``payload`` with credential values masked."""
    return {
        key: MASK if key in SECRET_FIELDS and value else value
        for key, value in payload.items()
    }
