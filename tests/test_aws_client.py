"""Tests for the AWS client factory and helpers."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError
from moto import mock_aws

from ebdeploy.clients.aws import AWSClientFactory, handle_aws_error, paginate
from ebdeploy.config import AWSConfig
from ebdeploy.core.exceptions import AWSError


@pytest.fixture(autouse=True)
def set_aws_region(monkeypatch):
    """Set AWS region for all tests."""
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


class TestAWSClientFactory:
    """Tests for AWSClientFactory class."""

    @mock_aws
    def test_elasticbeanstalk_client(self):
        client = AWSClientFactory(AWSConfig(region="us-east-1")).elasticbeanstalk
        assert client.meta.service_model.service_name == "elasticbeanstalk"

    @mock_aws
    def test_session_is_cached(self):
        factory = AWSClientFactory(AWSConfig(region="us-east-1"))
        assert factory.session is factory.session

    @mock_aws
    def test_region_from_config(self, monkeypatch):
        monkeypatch.delenv("AWS_DEFAULT_REGION", raising=False)

        factory = AWSClientFactory(AWSConfig(region="eu-west-1"))
        assert factory.region == "eu-west-1"

    @mock_aws
    def test_endpoint_url(self):
        factory = AWSClientFactory(AWSConfig(region="us-east-1", endpoint_url="http://localhost:4566"))
        assert factory.client("elasticbeanstalk").meta.endpoint_url == "http://localhost:4566"


class TestHandleAWSError:
    """Tests for the handle_aws_error decorator."""

    def test_client_error(self):
        @handle_aws_error
        def call():
            raise ClientError({"Error": {"Code": "TooManyEnvironmentsException", "Message": "limit"}}, "CreateEnvironment")

        with pytest.raises(AWSError) as exc_info:
            call()

        assert exc_info.value.message == "TooManyEnvironmentsException: limit"
        assert exc_info.value.details == {"code": "TooManyEnvironmentsException"}

    def test_botocore_error(self):
        @handle_aws_error
        def call():
            raise EndpointConnectionError(endpoint_url="https://elasticbeanstalk.invalid")

        with pytest.raises(AWSError, match="elasticbeanstalk.invalid"):
            call()

    def test_passthrough(self):
        @handle_aws_error
        def call(value):
            return value

        assert call(3) == 3


def test_paginate_collects_pages():
    client = MagicMock()
    client.get_paginator.return_value.paginate.return_value = [{"Events": [1, 2]}, {"Events": [3]}, {}]

    assert paginate(client, "describe_events", "Events", ApplicationName="myapp") == [1, 2, 3]
    client.get_paginator.return_value.paginate.assert_called_once_with(ApplicationName="myapp")
