"""
Inkpress Backend - Token Service Unit Tests
============================================

What we test:
    ✅ Issued tokens verify back to the same claims
    ✅ Missing / empty tokens raise MissingTokenError
    ✅ Garbage, foreign-secret and claim-less tokens raise InvalidTokenError
"""

import pytest
from jose import jwt

from inkpress.exceptions import AuthenticationError, InvalidTokenError, MissingTokenError
from inkpress.schemas.user import SessionClaims
from inkpress.services.token_service import TokenService

SECRET = "unit-test-secret"


class TestTokenService:

    def setup_method(self):
        self.service = TokenService(SECRET)
        self.claims = SessionClaims(username="alice", id="7b1c4a52-5f0e-4c43-9a8e-0f3c1d2b9e11")

    def test_issue_then_verify(self):
        token = self.service.issue(self.claims)
        assert self.service.verify(token) == self.claims

    def test_token_has_no_expiry(self):
        token = self.service.issue(self.claims)
        payload = jwt.get_unverified_claims(token)
        assert payload == {"username": "alice", "id": self.claims.id}

    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token(self, token):
        with pytest.raises(MissingTokenError) as exc_info:
            self.service.verify(token)
        assert exc_info.value.message == "Unauthorized: Token missing"

    def test_garbage_token(self):
        with pytest.raises(InvalidTokenError) as exc_info:
            self.service.verify("not-a-jwt")
        assert exc_info.value.message == "Unauthorized: Invalid token"

    def test_token_signed_with_other_secret(self):
        token = TokenService("another-secret").issue(self.claims)
        with pytest.raises(InvalidTokenError):
            self.service.verify(token)

    def test_token_without_identity_claims(self):
        token = jwt.encode({"sub": "alice"}, SECRET, algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            self.service.verify(token)

    def test_both_failures_are_authentication_errors(self):
        assert issubclass(MissingTokenError, AuthenticationError)
        assert issubclass(InvalidTokenError, AuthenticationError)
