"""AI client factory with Helicone integration support."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict

import httpx
from openai import AsyncOpenAI

from application.exceptions import CalorieEstimatorNotConfiguredError
from backend.settings import Settings, get_settings


logger = logging.getLogger(__name__)

# Helicone proxy URL (private - implementation detail)
_HELICONE_OPENAI_BASE_URL = "https://oai.helicone.ai/v1"

# Default client timeout
DEFAULT_TIMEOUT = 60.0

# Header name validation pattern (RFC 7230)
_VALID_HEADER_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9\-]+$")


def _create_httpx_client(timeout: float = DEFAULT_TIMEOUT) -> httpx.AsyncClient:
    """
    Create the async httpx client used under the OpenAI SDK.

    Debug logging is left off so request headers (credentials) are never
    written to logs.

    Args:
        timeout: Request timeout in seconds

    Returns:
        Configured httpx.AsyncClient instance
    """
    return httpx.AsyncClient(
        timeout=timeout,
        limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
    )


def _sanitize_header_value(value: str) -> str:
    """
    Sanitize a header value to prevent header injection.

    Removes newlines and other control characters that could break
    HTTP headers.

    Args:
        value: The header value to sanitize

    Returns:
        Sanitized header value safe for HTTP headers
    """
    return "".join(char for char in value if char.isprintable() and ord(char) < 128)


def _sanitize_header_name(name: str) -> str:
    """
    Sanitize a header name to ensure it only contains valid characters.

    Args:
        name: The header name to sanitize

    Returns:
        Sanitized header name, or empty string if invalid
    """
    sanitized = name.replace("_", "-").title()
    if _VALID_HEADER_NAME_PATTERN.match(sanitized):
        return sanitized
    return ""


@dataclass
class AIRequestContext:
    """Context for AI requests, used for tracking and observability."""

    user_id: str | None = None
    session_id: str | None = None
    feature_name: str | None = None
    custom_properties: Dict[str, str] = field(default_factory=dict)

    def to_tracking_headers(self, environment: str) -> Dict[str, str]:
        """Convert context to Helicone tracking headers.

        Header values are sanitized to prevent header injection attacks.
        """
        headers: Dict[str, str] = {}

        if self.user_id:
            headers["Helicone-User-Id"] = _sanitize_header_value(self.user_id)

        if self.session_id:
            headers["Helicone-Session-Id"] = _sanitize_header_value(self.session_id)

        if self.feature_name:
            headers["Helicone-Property-Feature"] = _sanitize_header_value(self.feature_name)

        headers["Helicone-Property-Environment"] = _sanitize_header_value(environment)

        for key, value in self.custom_properties.items():
            header_name = _sanitize_header_name(key)
            if header_name:
                headers[f"Helicone-Property-{header_name}"] = _sanitize_header_value(str(value))

        return headers


class AIClientFactory:
    """Factory for creating AI clients with optional Helicone integration."""

    @staticmethod
    def create_openai_client(
        settings: Settings | None = None,
        context: AIRequestContext | None = None,
        timeout: float | None = None,
    ) -> AsyncOpenAI:
        """
        Create an async OpenAI client, optionally proxied through Helicone.

        SDK-level retries are disabled: an estimation request is sent once.

        Args:
            settings: Settings to read credentials from (default: get_settings())
            context: Request context for tracking and observability
            timeout: Client timeout in seconds (default: from settings)

        Returns:
            AsyncOpenAI client instance

        Raises:
            CalorieEstimatorNotConfiguredError: If no OpenAI API key is configured
        """
        settings = settings or get_settings()
        api_key = settings.openai_api_key
        if not api_key:
            raise CalorieEstimatorNotConfiguredError(
                "OpenAI API key not configured. Set OPENAI_API_KEY environment variable."
            )

        timeout = timeout or settings.calorie_estimation_timeout_seconds
        client_kwargs: Dict[str, Any] = {
            "api_key": api_key,
            "timeout": timeout,
            "max_retries": 0,
        }

        if settings.helicone_enabled:
            if not settings.helicone_api_key:
                logger.warning(
                    "helicone_enabled=true but helicone_api_key not set. "
                    "Falling back to direct OpenAI API calls."
                )
            else:
                client_kwargs["base_url"] = _HELICONE_OPENAI_BASE_URL

                default_headers = {
                    "Helicone-Auth": f"Bearer {settings.helicone_api_key}",
                }
                if context:
                    default_headers.update(context.to_tracking_headers(settings.environment))

                client_kwargs["default_headers"] = default_headers
                client_kwargs["http_client"] = _create_httpx_client(timeout)

                logger.debug("Creating OpenAI client with Helicone proxy")
                return AsyncOpenAI(**client_kwargs)

        logger.debug("Creating OpenAI client (direct)")
        client_kwargs["http_client"] = _create_httpx_client(timeout)
        return AsyncOpenAI(**client_kwargs)
