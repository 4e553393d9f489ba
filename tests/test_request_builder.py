import pytest

from cloud_sql_execute.options import AuthMethod, AuthMode, ResolvedOptions, validate_auth
from cloud_sql_execute.request_builder import MASK, build_payload, redact_payload


def test_build_payload_password_scenario() -> None:
    options = ResolvedOptions(
        query="SELECT 1", instance="i1", database="d1", user="u1", password="p1"
    )
    payload = build_payload("SELECT 1", options)

    assert payload == {
        "sqlStatement": "SELECT 1",
        "database": "d1",
        "user": "u1",
        "password": "p1",
    }
    assert redact_payload(payload) == {
        "sqlStatement": "SELECT 1",
        "database": "d1",
        "user": "u1",
        "password": "***MASKED***",
    }


def test_build_payload_minimal() -> None:
    options = ResolvedOptions(query="SELECT 1", instance="i1", project="p1", verbose=True)
    assert build_payload("SELECT 1", options) == {"sqlStatement": "SELECT 1"}


def test_build_payload_all_fields() -> None:
    options = ResolvedOptions(
        query="q",
        instance="i1",
        database="d1",
        user="u1",
        secret_path="projects/p/secrets/s/versions/1",
        access_token="tok",
        auto_iam_authn=True,
        limit=20,
    )
    assert build_payload("q", options) == {
        "sqlStatement": "q",
        "database": "d1",
        "user": "u1",
        "accessToken": "tok",
        "secretPath": "projects/p/secrets/s/versions/1",
        "autoIamAuthn": True,
        "rowLimit": 20,
    }


@pytest.mark.parametrize(
    "kwargs,expected_keys",
    [
        ({"database": "d"}, {"database"}),
        ({"user": "u", "password": "p"}, {"user", "password"}),
        ({"access_token": "t"}, {"accessToken"}),
        ({"auto_iam_authn": True}, {"autoIamAuthn"}),
        ({"auto_iam_authn": False}, set()),
        ({"limit": 3}, {"rowLimit"}),
        ({"limit": 0}, set()),
        ({"user": "u", "secret_path": "s", "limit": 1}, {"user", "secretPath", "rowLimit"}),
    ],
)
def test_build_payload_keys_match_present_options(kwargs: dict, expected_keys: set) -> None:
    payload = build_payload("SELECT 1", ResolvedOptions(query="SELECT 1", **kwargs))
    assert set(payload) == expected_keys | {"sqlStatement"}


def test_build_payload_never_includes_none() -> None:
    payload = build_payload("SELECT 1", ResolvedOptions(query="SELECT 1"))
    assert None not in payload.values()


def test_redact_payload_does_not_mutate_original() -> None:
    payload = {"sqlStatement": "SELECT 1", "user": "u", "password": "secret"}
    redacted = redact_payload(payload)

    assert payload["password"] == "secret"
    assert redacted["password"] == MASK
    assert redacted is not payload


def test_redact_payload_masks_access_token() -> None:
    payload = {"sqlStatement": "SELECT 1", "accessToken": "ya29.token"}
    assert redact_payload(payload) == {"sqlStatement": "SELECT 1", "accessToken": MASK}


def test_redact_payload_leaves_secret_reference() -> None:
    payload = {"sqlStatement": "SELECT 1", "user": "u", "secretPath": "projects/p/secrets/s"}
    assert redact_payload(payload) == payload


def test_build_payload_takes_credentials_from_auth_mode() -> None:
    options = ResolvedOptions(query="SELECT 1", instance="i1", database="d1", user="u1", password="p1", limit=5)
    auth = validate_auth(options)

    assert build_payload("SELECT 1", options, auth) == {
        "sqlStatement": "SELECT 1",
        "database": "d1",
        "user": "u1",
        "password": "p1",
        "rowLimit": 5,
    }


def test_build_payload_auth_mode_sends_only_selected_method() -> None:
    options = ResolvedOptions(query="SELECT 1", access_token="t1", auto_iam_authn=True)
    auth = AuthMode(method=AuthMethod.AUTO_IAM_AUTHN, credential=True)

    assert build_payload("SELECT 1", options, auth) == {"sqlStatement": "SELECT 1", "autoIamAuthn": True}


def test_build_payload_without_auth_mode_for_ambient_identity() -> None:
    options = ResolvedOptions(query="SELECT 1", instance="i1", database="d1")
    assert build_payload("SELECT 1", options, validate_auth(options)) == {
        "sqlStatement": "SELECT 1",
        "database": "d1",
    }
