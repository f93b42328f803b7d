"""AWS client module for awskit.

boto3 clients shared across concurrent batch submissions (read-only use).
"""

from awskit.infrastructure.aws.client import AwsClientFactory, get_client

__all__ = ["AwsClientFactory", "get_client"]
