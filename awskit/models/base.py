"""Base Pydantic models for awskit commands.

Shared AWS client fields inherited by command-specific request models.
"""

import re
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

REGION_PATTERN = re.compile(r"^[a-z]{2}(-gov|-iso[a-z]*)?-[a-z]+-\d+$")
PROFILE_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")


class BaseAwsRequest(BaseModel):
    """Base model for commands that talk to AWS."""

    region: Optional[str] = Field(None, description="AWS region override")
    profile: Optional[str] = Field(
        None, max_length=64, description="AWS profile to use for authentication"
    )
    format: Literal["table", "json"] = Field("table", description="Output format for results")
    verbose: bool = Field(False, description="Enable verbose output")

    @field_validator("region")
    @classmethod
    def validate_region(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not REGION_PATTERN.match(value):
            raise ValueError("Must be a valid AWS region (e.g. us-east-1)")
        return value

    @field_validator("profile")
    @classmethod
    def validate_profile(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not PROFILE_PATTERN.match(value):
            raise ValueError(
                "AWS profile name can only contain letters, numbers, dots, underscores, and hyphens"
            )
        return value
