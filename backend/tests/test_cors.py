"""Uphaar Backend: CorsPolicy unit tests."""

from uphaar.config import Settings
from uphaar.http.cors import CorsPolicy


class TestCorsPolicy:
    def setup_method(self):
        self.policy = CorsPolicy(["http://localhost:3000", " https://uphaar.example "])

    def test_allowed_origin_is_echoed(self):
        headers = self.policy.headers_for("https://uphaar.example")
        assert headers["Access-Control-Allow-Origin"] == "https://uphaar.example"
        assert headers["Vary"] == "Origin"

    def test_unknown_origin_is_not_echoed(self):
        headers = self.policy.headers_for("https://evil.example")
        assert "Access-Control-Allow-Origin" not in headers
        assert "Vary" not in headers

    def test_missing_origin(self):
        assert "Access-Control-Allow-Origin" not in self.policy.headers_for(None)

    def test_fixed_headers_always_present(self):
        headers = self.policy.headers_for(None)
        assert headers["Access-Control-Allow-Methods"] == "GET, POST, PUT, DELETE, PATCH, OPTIONS"
        assert headers["Access-Control-Allow-Headers"] == "Content-Type, Authorization"
        assert headers["Access-Control-Allow-Credentials"] == "true"

    def test_preflight_is_empty_204(self):
        response = self.policy.preflight("http://localhost:3000")
        assert response.status_code == 204
        assert response.body is None
        assert response.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"

    def test_from_settings_splits_the_list(self):
        policy = CorsPolicy.from_settings(Settings(cors_origins="http://a.test, http://b.test"))
        assert policy.allowed_origins == {"http://a.test", "http://b.test"}
