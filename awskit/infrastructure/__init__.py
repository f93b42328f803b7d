"""Infrastructure module for awskit.

Provides shared AWS client construction.
"""

from awskit.infrastructure.aws import AwsClientFactory, get_client

__all__ = ["AwsClientFactory", "get_client"]
