"""Shared fixtures for awskit tests."""

import boto3
import pytest

from awskit.core.logging import configure_logging
from awskit.infrastructure.aws import AwsClientFactory


def _client(service):
    return boto3.client(
        service,
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def dynamodb_client():
    """Real botocore DynamoDB client for use with Stubber."""
    return _client("dynamodb")


@pytest.fixture
def logs_client():
    """Real botocore CloudWatch Logs client for use with Stubber."""
    return _client("logs")


@pytest.fixture(autouse=True)
def clear_client_cache():
    """Keep cached boto3 clients from leaking between tests."""
    AwsClientFactory().clear()
    yield
    AwsClientFactory().clear()


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore default log level after commands run with --verbose."""
    yield
    configure_logging()
