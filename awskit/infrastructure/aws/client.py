"""boto3 client factory for awskit.

One shared client per (service, region, profile) for the lifetime of the process.
Credentials come from the standard boto3 provider chain.
"""

import threading
from typing import Any, Dict, Optional, Tuple

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ProfileNotFound

from awskit.config import config
from awskit.core.errors import ConfigurationError
from awskit.core.logging import logger

ClientKey = Tuple[str, Optional[str], Optional[str]]


class AwsClientFactory:
    """Singleton boto3 client cache with lazy initialization."""

    _instance: Optional["AwsClientFactory"] = None
    _lock = threading.Lock()

    def __new__(cls):
        """Ensure only one instance exists."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._clients = {}
        return cls._instance

    def get_client(self, service: str, region: Optional[str] = None, profile: Optional[str] = None) -> Any:
        """Get a boto3 client, creating it on first use.

        Args:
            service: AWS service name (e.g. "dynamodb", "logs")
            region: Region override (falls back to AWS_REGION / AWS_DEFAULT_REGION)
            profile: Profile override (falls back to AWS_PROFILE)

        Returns:
            boto3 client

        Raises:
            ConfigurationError: If the profile does not exist or the client cannot be built
        """
        region = region or config.aws_region()
        profile = profile or config.aws_profile()
        key: ClientKey = (service, region, profile)

        clients: Dict[ClientKey, Any] = self._clients
        with self._lock:
            if key not in clients:
                clients[key] = self._create_client(service, region, profile)
            return clients[key]

    def clear(self) -> None:
        """Drop cached clients (used by tests and profile switches)."""
        with self._lock:
            self._clients.clear()

    @staticmethod
    def _create_client(service: str, region: Optional[str], profile: Optional[str]) -> Any:
        try:
            session = boto3.Session(profile_name=profile, region_name=region)
            client = session.client(
                service,
                config=BotoConfig(retries={"max_attempts": 3, "mode": "standard"}),
            )
        except ProfileNotFound as e:
            raise ConfigurationError(
                f"AWS profile '{profile}' not found", config_key="profile", actual=profile
            ) from e
        except BotoCoreError as e:
            raise ConfigurationError(
                f"Failed to create {service} client: {e}", config_key="region", actual=region
            ) from e

        logger.debug("aws_client_initialized", service=service, region=region, profile=profile)
        return client


def get_client(service: str, region: Optional[str] = None, profile: Optional[str] = None) -> Any:
    """Get a shared boto3 client for a service."""
    return AwsClientFactory().get_client(service, region=region, profile=profile)
