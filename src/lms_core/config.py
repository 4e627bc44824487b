"""Configuration module for the idempotency gate.

This module provides the IdempotencyConfig class that controls which requests
the gate inspects, how cache keys are built and how long captured responses
stay replayable.

Example:
    Basic usage with defaults:

        >>> config = IdempotencyConfig()
        >>> config.enabled_methods
        ['POST']
        >>> config.ttl_seconds
        86400

    Loading from environment:

        >>> import os
        >>> os.environ['IDEMPOTENCY_TTL_SECONDS'] = '3600'
        >>> config = IdempotencyConfig.from_env()

    Loading from dictionary:

        >>> config = IdempotencyConfig.from_dict({'ttl_seconds': 600})
"""

import os
from typing import Any

from pydantic import BaseModel, Field, field_validator

# Valid HTTP methods for idempotency
VALID_HTTP_METHODS = {
    "GET",
    "HEAD",
    "POST",
    "PUT",
    "DELETE",
    "CONNECT",
    "OPTIONS",
    "TRACE",
    "PATCH",
}

# Hard upper bound on key length accepted from clients
MAX_KEY_LENGTH = 255


class IdempotencyConfig(BaseModel):
    """Configuration for the idempotency gate.

    Attributes:
        enabled_methods: HTTP methods the gate inspects. Requests using any
            other method pass through untouched. Default is ["POST"].
        header_name: Request header carrying the client key.
            Matched case-insensitively. Default is "Idempotency-Key".
        cache_key_prefix: Prefix prepended to the raw key to form the cache
            lookup key. Default is "idempotency:".
        ttl_seconds: How long a captured response stays replayable.
            Must be between 1 and 604800 (7 days). Default is 86400 (24 hours).
        max_key_length: Longest key accepted, in characters. Must be between
            1 and 255. Default is 255.
        default_content_type: Content type recorded when the handler set none.

    Note:
        This class is immutable (frozen=True). Create a new instance if you
        need different settings.
    """

    enabled_methods: list[str] | str = Field(
        default=["POST"],
        description="HTTP methods inspected by the idempotency gate",
    )
    header_name: str = Field(
        default="Idempotency-Key",
        min_length=1,
        description="Request header carrying the idempotency key",
    )
    cache_key_prefix: str = Field(
        default="idempotency:",
        description="Prefix for cache lookup keys",
    )
    ttl_seconds: int = Field(
        default=86400,
        description="Time-to-live in seconds for captured responses (1-604800)",
    )
    max_key_length: int = Field(
        default=MAX_KEY_LENGTH,
        description="Maximum idempotency key length in characters (1-255)",
    )
    default_content_type: str = Field(
        default="application/json",
        description="Content type stored when the response carries none",
    )

    model_config = {"frozen": True}

    @field_validator("enabled_methods", mode="before")
    @classmethod
    def validate_enabled_methods(cls, v: Any) -> list[str]:
        """Validate and normalize enabled HTTP methods.

        Args:
            v: List of HTTP method strings or comma-separated string.

        Returns:
            List of uppercase, validated HTTP methods.

        Raises:
            ValueError: If any method is not a valid HTTP method.
        """
        if isinstance(v, str):
            # Comma-separated string from environment variables
            v = [method.strip() for method in v.split(",") if method.strip()]

        if not isinstance(v, list):
            raise ValueError("enabled_methods must be a list or comma-separated string")

        methods = [method.upper() for method in v]

        invalid_methods = set(methods) - VALID_HTTP_METHODS
        if invalid_methods:
            raise ValueError(
                f"Invalid HTTP methods: {', '.join(sorted(invalid_methods))}. "
                f"Valid methods are: {', '.join(sorted(VALID_HTTP_METHODS))}"
            )

        return methods

    @field_validator("ttl_seconds")
    @classmethod
    def validate_ttl_seconds(cls, v: int) -> int:
        """Validate TTL is within acceptable range.

        Raises:
            ValueError: If TTL is not between 1 and 604800 (7 days).
        """
        if not (1 <= v <= 604800):
            raise ValueError(f"ttl_seconds must be between 1 and 604800 (7 days), got {v}")
        return v

    @field_validator("max_key_length")
    @classmethod
    def validate_max_key_length(cls, v: int) -> int:
        """Validate the key length limit.

        Raises:
            ValueError: If the limit is not between 1 and 255.
        """
        if not (1 <= v <= MAX_KEY_LENGTH):
            raise ValueError(
                f"max_key_length must be between 1 and {MAX_KEY_LENGTH}, got {v}"
            )
        return v

    @classmethod
    def from_env(cls, prefix: str = "IDEMPOTENCY_") -> "IdempotencyConfig":
        """Create configuration from environment variables.

        Variable names are the uppercase field names with the prefix, for
        example IDEMPOTENCY_TTL_SECONDS. Missing variables keep their defaults.

        Args:
            prefix: Prefix for environment variable names.

        Returns:
            IdempotencyConfig instance populated from environment variables.
        """
        config_dict: dict[str, Any] = {}

        field_types = {
            "enabled_methods": list,
            "header_name": str,
            "cache_key_prefix": str,
            "ttl_seconds": int,
            "max_key_length": int,
            "default_content_type": str,
        }

        for field_name, field_type in field_types.items():
            env_value = os.environ.get(f"{prefix}{field_name.upper()}")

            if env_value is not None:
                if field_type is int:
                    config_dict[field_name] = int(env_value)
                else:
                    config_dict[field_name] = env_value

        return cls(**config_dict)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "IdempotencyConfig":
        """Create configuration from a dictionary.

        Raises:
            ValidationError: If the dictionary contains invalid values.
        """
        return cls(**config_dict)
