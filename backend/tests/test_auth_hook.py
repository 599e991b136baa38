"""
Uphaar Backend: Authentication Hook Unit Tests
==============================================

What:  Bearer extraction and the degrade-to-anonymous contract.
"""

import pytest

from conftest import CLAIMER, CLAIMER_TOKEN, FakeTokenVerifier
from uphaar.auth.hook import authenticate, extract_bearer_token
from uphaar.http.types import HttpRequest


def _request(headers):
    return HttpRequest(method="GET", path="/auth/me", headers=headers)


class TestExtractBearerToken:
    def test_bearer_token(self):
        assert extract_bearer_token(_request({"authorization": "Bearer abc.def"})) == "abc.def"

    def test_header_name_is_case_insensitive(self):
        assert extract_bearer_token(_request({"Authorization": "Bearer abc"})) == "abc"

    def test_first_of_repeated_headers_wins(self):
        request = _request({"authorization": ["Bearer first", "Bearer second"]})
        assert extract_bearer_token(request) == "first"

    @pytest.mark.parametrize(
        "value",
        ["", "Basic dXNlcjpwYXNz", "bearer abc", "Bearer", "Bearer ", "Token abc"],
    )
    def test_other_formats_mean_no_token(self, value):
        assert extract_bearer_token(_request({"authorization": value})) is None

    def test_missing_header(self):
        assert extract_bearer_token(_request({})) is None


class TestAuthenticate:
    def setup_method(self):
        self.verifier = FakeTokenVerifier({CLAIMER_TOKEN: CLAIMER})

    @pytest.mark.asyncio
    async def test_valid_token_populates_user(self):
        request = _request({"authorization": f"Bearer {CLAIMER_TOKEN}"})
        result = await authenticate(request, self.verifier)
        assert result.user == CLAIMER
        assert request.user is None  # input request left untouched

    @pytest.mark.asyncio
    async def test_missing_header_stays_anonymous_without_verifying(self):
        result = await authenticate(_request({}), self.verifier)
        assert result.user is None
        assert self.verifier.calls == []

    @pytest.mark.asyncio
    async def test_rejected_token_stays_anonymous(self):
        request = _request({"authorization": "Bearer forged"})
        result = await authenticate(request, self.verifier)
        assert result is request
        assert result.user is None
        assert self.verifier.calls == ["forged"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error", [ConnectionError("provider unreachable"), AttributeError("bad key set")]
    )
    async def test_verifier_errors_stay_anonymous(self, error):
        class FailingVerifier(FakeTokenVerifier):
            async def verify(self, token):
                raise error

        request = _request({"authorization": f"Bearer {CLAIMER_TOKEN}"})
        result = await authenticate(request, FailingVerifier({}))
        assert result is request
        assert result.user is None
