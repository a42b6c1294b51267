"""Tests for authenticators, the fluent auth setters, and build_authenticator."""

from __future__ import annotations

import base64
from pathlib import Path

import httpx
import pytest

from hitch.auth import (
    AUTHENTICATOR_BUILDERS,
    BasicAuthenticator,
    CertificateAuthenticator,
    DigestAuthenticator,
    HeaderAuthenticator,
    QueryAuthenticator,
    TokenAuthenticator,
    build_authenticator,
)
from hitch.exceptions import ConfigurationError
from hitch.models import AuthConfig

from support import SampleConnector, UserRequest, transport_connector


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _pending(request: UserRequest | None = None):
    return SampleConnector().create_pending_request(request or UserRequest())


def _make_auth_config(**kwargs: object) -> AuthConfig:
    """Build an AuthConfig with sensible defaults overridden by kwargs."""
    defaults: dict[str, object] = {"type": "token", "source": "env:TEST_TOKEN"}
    defaults.update(kwargs)
    return AuthConfig(**defaults)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


class TestTokenAuthenticator:
    def test_bearer_header(self) -> None:
        pending = _pending()
        TokenAuthenticator("abc").apply(pending)
        assert pending.headers.get("Authorization") == "Bearer abc"

    def test_custom_prefix(self) -> None:
        pending = _pending()
        TokenAuthenticator("abc", prefix="Token").apply(pending)
        assert pending.headers.get("Authorization") == "Token abc"

    def test_empty_prefix_sends_bare_token(self) -> None:
        pending = _pending()
        TokenAuthenticator("abc", prefix="").apply(pending)
        assert pending.headers.get("Authorization") == "abc"

    def test_applying_twice_overwrites(self) -> None:
        pending = _pending()
        TokenAuthenticator("old").apply(pending)
        TokenAuthenticator("new").apply(pending)
        assert pending.headers.get("Authorization") == "Bearer new"


class TestBasicAuthenticator:
    def test_encoded_header(self) -> None:
        pending = _pending()
        BasicAuthenticator("sam", "s3cret").apply(pending)

        expected = base64.b64encode(b"sam:s3cret").decode("ascii")
        assert pending.headers.get("Authorization") == f"Basic {expected}"

    def test_colon_in_username_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="colon"):
            BasicAuthenticator("sam:admin", "pw")

    def test_idempotent(self) -> None:
        pending = _pending()
        auth = BasicAuthenticator("sam", "pw")
        auth.apply(pending)
        first = pending.headers.all()
        auth.apply(pending)
        assert pending.headers.all() == first


class TestDigestAuthenticator:
    def test_credentials_in_config(self) -> None:
        pending = _pending()
        DigestAuthenticator("sam", "pw").apply(pending)
        assert pending.config.get("auth") == ("sam", "pw", "digest")
        assert "Authorization" not in pending.headers

    def test_sender_answers_digest_challenge(self) -> None:
        attempts: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            attempts.append(request)
            if "Authorization" not in request.headers:
                return httpx.Response(
                    401,
                    headers={"WWW-Authenticate": 'Digest realm="api", nonce="abc123", qop="auth"'},
                )
            return httpx.Response(200, json={"ok": True})

        connector = transport_connector(handler).with_digest_auth("sam", "pw")

        response = connector.send(UserRequest())

        assert response.status == 200
        assert len(attempts) == 2
        assert attempts[1].headers["Authorization"].startswith("Digest ")


class TestQueryAuthenticator:
    def test_adds_query_parameter(self) -> None:
        pending = _pending()
        QueryAuthenticator("api_key", "k-123").apply(pending)
        assert pending.query.get("api_key") == "k-123"


class TestHeaderAuthenticator:
    def test_raw_value_default_header(self) -> None:
        pending = _pending()
        HeaderAuthenticator("raw-token").apply(pending)
        assert pending.headers.get("Authorization") == "raw-token"

    def test_custom_header_name(self) -> None:
        pending = _pending()
        HeaderAuthenticator("key", header_name="X-API-Key").apply(pending)
        assert pending.headers.get("X-API-Key") == "key"


class TestCertificateAuthenticator:
    def test_path_only(self) -> None:
        pending = _pending()
        CertificateAuthenticator("/certs/client.pem").apply(pending)
        assert pending.config.get("cert") == "/certs/client.pem"

    def test_path_and_password(self) -> None:
        pending = _pending()
        CertificateAuthenticator("/certs/client.pem", "pass").apply(pending)
        assert pending.config.get("cert") == ("/certs/client.pem", "pass")


class TestRepr:
    @pytest.mark.parametrize(
        "authenticator",
        [
            TokenAuthenticator("top-secret"),
            BasicAuthenticator("sam", "top-secret"),
            QueryAuthenticator("key", "top-secret"),
            HeaderAuthenticator("top-secret"),
        ],
    )
    def test_repr_hides_secret(self, authenticator) -> None:
        assert "top-secret" not in repr(authenticator)


# ---------------------------------------------------------------------------
# Fluent setters
# ---------------------------------------------------------------------------


class TestFluentSetters:
    def test_setters_return_self(self) -> None:
        connector = SampleConnector()
        assert connector.with_token_auth("t") is connector
        request = UserRequest()
        assert request.with_basic_auth("u", "p") is request

    @pytest.mark.parametrize(
        ("setter", "args", "expected_type"),
        [
            ("with_token_auth", ("t",), TokenAuthenticator),
            ("with_basic_auth", ("u", "p"), BasicAuthenticator),
            ("with_digest_auth", ("u", "p"), DigestAuthenticator),
            ("with_query_auth", ("key", "v"), QueryAuthenticator),
            ("with_header_auth", ("v", "X-Key"), HeaderAuthenticator),
            ("with_certificate_auth", ("/c.pem",), CertificateAuthenticator),
        ],
    )
    def test_setter_installs_authenticator(self, setter: str, args: tuple, expected_type: type) -> None:
        request = getattr(UserRequest(), setter)(*args)
        assert isinstance(request.get_authenticator(), expected_type)

    def test_authenticate_none_clears(self) -> None:
        request = UserRequest().with_token_auth("t").authenticate(None)
        assert request.get_authenticator() is None

    def test_authenticate_with_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEST_TOKEN", "from-env")
        connector = SampleConnector().authenticate_with(_make_auth_config())

        pending = connector.create_pending_request(UserRequest())

        assert pending.headers.get("Authorization") == "Bearer from-env"


# ---------------------------------------------------------------------------
# build_authenticator
# ---------------------------------------------------------------------------


class TestBuildAuthenticator:
    def test_closed_type_table(self) -> None:
        assert sorted(AUTHENTICATOR_BUILDERS) == [
            "basic",
            "certificate",
            "digest",
            "header",
            "query",
            "token",
        ]

    def test_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEST_TOKEN", "abc")
        auth = build_authenticator(_make_auth_config(prefix="Token"))
        assert isinstance(auth, TokenAuthenticator)
        assert (auth.token, auth.prefix) == ("abc", "Token")

    def test_basic_from_file(self, tmp_path: Path) -> None:
        secret = tmp_path / "password"
        secret.write_text("pw\n", encoding="utf-8")
        auth = build_authenticator(
            _make_auth_config(type="basic", username="sam", source=f"file:{secret}")
        )
        assert isinstance(auth, BasicAuthenticator)
        assert auth.password == "pw"

    def test_digest(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEST_TOKEN", "pw")
        auth = build_authenticator(_make_auth_config(type="digest", username="sam"))
        assert isinstance(auth, DigestAuthenticator)

    def test_query(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEST_TOKEN", "k")
        auth = build_authenticator(_make_auth_config(type="query", parameter="api_key"))
        assert isinstance(auth, QueryAuthenticator)
        assert auth.parameter == "api_key"

    def test_header(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEST_TOKEN", "k")
        auth = build_authenticator(_make_auth_config(type="header", header_name="X-Key"))
        assert isinstance(auth, HeaderAuthenticator)
        assert auth.header_name == "X-Key"

    def test_certificate_with_password(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CERT_PASS", "pp")
        auth = build_authenticator(
            AuthConfig(type="certificate", path="/c.pem", password_source="env:CERT_PASS")
        )
        assert isinstance(auth, CertificateAuthenticator)
        assert auth.password == "pp"

    def test_certificate_requires_path(self) -> None:
        with pytest.raises(ConfigurationError, match="requires 'path'"):
            build_authenticator(AuthConfig(type="certificate"))

    def test_basic_requires_username(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEST_TOKEN", "pw")
        with pytest.raises(ConfigurationError, match="requires 'username'"):
            build_authenticator(_make_auth_config(type="basic"))

    def test_missing_source(self) -> None:
        with pytest.raises(ConfigurationError, match="requires 'source'"):
            build_authenticator(AuthConfig(type="token"))

    def test_unresolvable_source(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("TEST_TOKEN", raising=False)
        with pytest.raises(ConfigurationError, match="not set"):
            build_authenticator(_make_auth_config())

    def test_unknown_type_rejected_by_model(self) -> None:
        with pytest.raises(ValueError):
            AuthConfig(type="oauth2")  # type: ignore[arg-type]
