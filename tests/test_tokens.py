"""Token service tests — signature, expiry, tampering, malformed claims."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from taskhub.auth.principal import Principal
from taskhub.auth.roles import Role
from taskhub.auth.tokens import TokenError, TokenService

SECRET = "test-secret-0123456789-abcdefghijklmnop"

PRINCIPAL = Principal(id=7, name="Ada", email="ada@example.com", role=Role.MANAGER)


@pytest.fixture
def tokens():
    return TokenService(secret=SECRET, ttl=timedelta(hours=24))


def _flip(segment: str, index: int) -> str:
    replacement = "A" if segment[index] != "A" else "B"
    return segment[:index] + replacement + segment[index + 1:]


def test_issue_then_verify_returns_same_principal(tokens):
    token = tokens.issue(PRINCIPAL)
    assert tokens.verify(token) == PRINCIPAL


def test_expiry_is_issued_at_plus_ttl(tokens):
    issued = datetime(2030, 1, 1, tzinfo=timezone.utc)
    token = tokens.issue(PRINCIPAL, issued_at=issued)
    claims = jwt.decode(token, options={"verify_signature": False})
    assert claims["exp"] - claims["iat"] == 24 * 3600
    assert claims["sub"] == "7"
    assert claims["role"] == "manager"


def test_expired_token_rejected(tokens):
    issued = datetime.now(timezone.utc) - timedelta(hours=25)
    token = tokens.issue(PRINCIPAL, issued_at=issued)
    with pytest.raises(TokenError, match="expired"):
        tokens.verify(token)


def test_token_with_zero_ttl_is_already_expired():
    svc = TokenService(secret=SECRET, ttl=timedelta(0))
    token = svc.issue(PRINCIPAL, issued_at=datetime.now(timezone.utc) - timedelta(seconds=1))
    with pytest.raises(TokenError):
        svc.verify(token)


def test_wrong_secret_rejected(tokens):
    token = tokens.issue(PRINCIPAL)
    other = TokenService(secret="another-secret-0123456789-abcdefghij")
    with pytest.raises(TokenError):
        other.verify(token)


@pytest.mark.parametrize("part", [1, 2])
def test_tampered_token_rejected(tokens, part):
    """Altering a byte in the payload or the signature breaks verification."""
    segments = tokens.issue(PRINCIPAL).split(".")
    segments[part] = _flip(segments[part], len(segments[part]) // 2)
    with pytest.raises(TokenError):
        tokens.verify(".".join(segments))


def test_forged_role_rejected(tokens):
    """Re-encoding the payload with a higher role invalidates the signature."""
    token = tokens.issue(PRINCIPAL)
    claims = jwt.decode(token, options={"verify_signature": False})
    claims["role"] = "admin"
    header, _, signature = token.split(".")
    forged_payload = jwt.encode(claims, "attacker-key-0123456789-abcdefghijk").split(".")[1]
    with pytest.raises(TokenError):
        tokens.verify(f"{header}.{forged_payload}.{signature}")


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "a.b"])
def test_malformed_token_rejected(tokens, token):
    with pytest.raises(TokenError):
        tokens.verify(token)


def test_missing_claim_rejected(tokens):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "1", "name": "x", "email": "x@example.com", "iat": now, "exp": now + timedelta(hours=1)},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(TokenError):
        tokens.verify(token)


def test_unknown_role_rejected(tokens):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "1", "name": "x", "email": "x@example.com", "role": "superuser",
         "iat": now, "exp": now + timedelta(hours=1)},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(TokenError, match="malformed"):
        tokens.verify(token)


def test_non_numeric_subject_rejected(tokens):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "abc", "name": "x", "email": "x@example.com", "role": "admin",
         "iat": now, "exp": now + timedelta(hours=1)},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(TokenError):
        tokens.verify(token)


def test_unsigned_token_rejected(tokens):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "1", "name": "x", "email": "x@example.com", "role": "admin",
         "iat": now, "exp": now + timedelta(hours=1)},
        None,
        algorithm="none",
    )
    with pytest.raises(TokenError):
        tokens.verify(token)


def test_empty_secret_refused():
    with pytest.raises(ValueError):
        TokenService(secret="")


def _frozen_clock(at: datetime):
    """A datetime class whose now() always returns `at`."""

    class _Frozen(datetime):
        @classmethod
        def now(cls, tz=None):
            return at

    return _Frozen


@pytest.mark.parametrize(
    "offset, valid",
    [(timedelta(seconds=-1), True), (timedelta(0), False), (timedelta(seconds=1), False)],
)
def test_expiry_boundary(tokens, monkeypatch, offset, valid):
    """Valid up to the second before exp; rejected at exp exactly, no leeway."""
    issued = datetime(2030, 1, 1, tzinfo=timezone.utc)
    token = tokens.issue(PRINCIPAL, issued_at=issued)
    monkeypatch.setattr(jwt.api_jwt, "datetime", _frozen_clock(issued + tokens.ttl + offset))

    if valid:
        assert tokens.verify(token) == PRINCIPAL
    else:
        with pytest.raises(TokenError, match="expired"):
            tokens.verify(token)


@pytest.mark.parametrize(
    "name, email",
    [({"first": "x"}, "x@example.com"), ("x", 42), (None, "x@example.com")],
)
def test_non_string_identity_claims_rejected(tokens, name, email):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "1", "name": name, "email": email, "role": "employee",
         "iat": now, "exp": now + timedelta(hours=1)},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(TokenError, match="malformed"):
        tokens.verify(token)
