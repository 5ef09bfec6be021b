"""Tests for JWT session verification."""

from __future__ import annotations

import time

import jwt
import pytest

from cinedock.domain.entities import Unauthorized
from cinedock.domain.ports import SessionVerifierPort
from cinedock.infrastructure.auth.session import JwtSessionVerifier
from cinedock.infrastructure.config.schema import AuthConfig

_SECRET = "test-secret-with-at-least-32-bytes!!"


def _token(**claims) -> str:
    return jwt.encode({"sub": "viewer-1", **claims}, _SECRET, algorithm="HS256")


class TestJwtSessionVerifier:
    def test_satisfies_port(self) -> None:
        assert isinstance(JwtSessionVerifier(AuthConfig()), SessionVerifierPort)

    def test_valid_token(self) -> None:
        verifier = JwtSessionVerifier(AuthConfig(jwt_secret=_SECRET))
        claims = verifier.verify(_token(exp=int(time.time()) + 60))
        assert claims["sub"] == "viewer-1"

    def test_missing_token(self) -> None:
        verifier = JwtSessionVerifier(AuthConfig(jwt_secret=_SECRET))
        with pytest.raises(Unauthorized, match="Not logged in"):
            verifier.verify(None)

    def test_expired_token(self) -> None:
        verifier = JwtSessionVerifier(AuthConfig(jwt_secret=_SECRET))
        with pytest.raises(Unauthorized, match="expired"):
            verifier.verify(_token(exp=int(time.time()) - 60))

    def test_wrong_secret(self) -> None:
        verifier = JwtSessionVerifier(AuthConfig(jwt_secret="other-secret-with-at-least-32-bytes"))
        with pytest.raises(Unauthorized, match="Invalid session"):
            verifier.verify(_token())

    def test_garbage_token(self) -> None:
        verifier = JwtSessionVerifier(AuthConfig(jwt_secret=_SECRET))
        with pytest.raises(Unauthorized):
            verifier.verify("not-a-jwt")

    def test_no_secret_rejects_everything(self) -> None:
        verifier = JwtSessionVerifier(AuthConfig(jwt_secret=None))
        assert verifier.configured is False
        with pytest.raises(Unauthorized):
            verifier.verify(_token())
