"""Tests for the HTTP smoke test."""

import httpx
import pytest
from pydantic import ValidationError

from ebdeploy.config import SmokeTestConfig
from ebdeploy.core.exceptions import SmokeTestFailure
from ebdeploy.deploy.smoke_test import HttpSmokeTest


def transport_returning(status_code, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(str(request.url))
        return httpx.Response(status_code, text="ok")

    return httpx.MockTransport(handler)


class TestSmokeTestConfig:
    """Tests for SmokeTestConfig."""

    def test_default_values(self):
        config = SmokeTestConfig()
        assert config.path == "/"
        assert config.protocol == "http"
        assert config.timeout == 10
        assert config.expected_status == 200

    def test_protocol_normalised(self):
        assert SmokeTestConfig(protocol="HTTPS").protocol == "https"

    def test_invalid_protocol(self):
        with pytest.raises(ValidationError):
            SmokeTestConfig(protocol="ftp")

    def test_path_must_be_absolute(self):
        with pytest.raises(ValidationError):
            SmokeTestConfig(path="health")

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            SmokeTestConfig(timeout=0)

    def test_expected_status_range(self):
        with pytest.raises(ValidationError):
            SmokeTestConfig(expected_status=700)

    def test_immutable(self):
        config = SmokeTestConfig()
        with pytest.raises(ValidationError):
            config.path = "/other"


class TestHttpSmokeTest:
    """Tests for HttpSmokeTest."""

    def test_passes_on_expected_status(self):
        seen: list[str] = []
        smoke_test = HttpSmokeTest(
            SmokeTestConfig(path="/health", protocol="https"),
            transport=transport_returning(200, seen),
        )

        smoke_test.run("myapp-prod.us-east-1.elasticbeanstalk.com")

        assert seen == ["https://myapp-prod.us-east-1.elasticbeanstalk.com/health"]

    def test_custom_expected_status(self):
        smoke_test = HttpSmokeTest(SmokeTestConfig(expected_status=204), transport=transport_returning(204))
        smoke_test.run("example.com")

    def test_unexpected_status_fails(self):
        smoke_test = HttpSmokeTest(SmokeTestConfig(), transport=transport_returning(503))

        with pytest.raises(SmokeTestFailure) as exc_info:
            smoke_test.run("example.com")

        assert exc_info.value.status_code == 503
        assert exc_info.value.url == "http://example.com/"
        assert "503" in str(exc_info.value)

    def test_request_error_fails(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        smoke_test = HttpSmokeTest(SmokeTestConfig(), transport=httpx.MockTransport(handler))

        with pytest.raises(SmokeTestFailure, match="connection refused"):
            smoke_test.run("example.com")
