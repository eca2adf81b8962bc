"""
Retriever configuration.

Values come from explicit arguments or from the environment (the CLI loads a
.env file first). Only the job URL and some way to reach a browser are
required; everything else has a working default.
"""
import os
import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

from job_retriever.core.lexicons import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

CLOUD_CDP_URL = "wss://cloud.lightpanda.io/ws"
DEFAULT_GATEWAY_URL = "https://api.lightpanda.io/v1"
DEFAULT_TIMEOUT_MS = 30000

TRANSPORT_CDP = "cdp"
TRANSPORT_GATEWAY = "gateway"

AGENT_SELF_HOSTED = "lightpanda+playwright"
AGENT_CLOUD_CDP = "lightpanda-cloud-cdp+playwright"
AGENT_GATEWAY = "lightpanda-cloud-api+httpx"


class ConfigError(ValueError):
    """Raised when the configuration cannot drive a retrieval."""


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"[config] Ignoring non-numeric {name}={raw!r}, using {default}")
        return default


@dataclass
class RetrieverConfig:
    """Settings for one retrieval run."""

    job_url: str = ""
    transport: str = TRANSPORT_CDP
    ws_endpoint: Optional[str] = None
    token: Optional[str] = None
    browser: str = "chrome"
    proxy: Optional[str] = None
    country: Optional[str] = None
    gateway_url: str = DEFAULT_GATEWAY_URL
    user_agent: str = DEFAULT_USER_AGENT
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    http_proxy: Optional[str] = None
    https_proxy: Optional[str] = None
    max_retries: int = 3
    retry_backoff_ms: int = 2000
    settle_ms: int = 3000
    click_settle_ms: int = 1000
    batch_delay_s: float = 1.0

    @classmethod
    def from_env(cls, job_url: Optional[str] = None) -> "RetrieverConfig":
        """
        Build a config from environment variables.

        Args:
            job_url: Overrides JOB_URL when given (e.g. from --job-url)

        Returns:
            RetrieverConfig
        """
        return cls(
            job_url=job_url or os.getenv("JOB_URL", ""),
            transport=os.getenv("RETRIEVER_TRANSPORT", TRANSPORT_CDP).lower(),
            ws_endpoint=os.getenv("LIGHTPANDA_WS") or None,
            token=os.getenv("LIGHTPANDA_TOKEN") or os.getenv("LIGHTPANDA_API_KEY") or None,
            browser=os.getenv("LIGHTPANDA_BROWSER", "chrome"),
            proxy=os.getenv("LIGHTPANDA_PROXY") or None,
            country=os.getenv("LIGHTPANDA_COUNTRY") or None,
            gateway_url=os.getenv("LIGHTPANDA_API_URL", DEFAULT_GATEWAY_URL),
            user_agent=os.getenv("USER_AGENT") or DEFAULT_USER_AGENT,
            timeout_ms=_int_env("TIMEOUT", DEFAULT_TIMEOUT_MS),
            http_proxy=os.getenv("HTTP_PROXY") or None,
            https_proxy=os.getenv("HTTPS_PROXY") or None,
        )

    @property
    def browser_proxy(self) -> Optional[str]:
        return self.https_proxy or self.http_proxy

    def build_cloud_ws_url(self) -> str:
        """Managed cloud CDP endpoint carrying token, engine and proxy options."""
        if not self.token:
            raise ConfigError("LIGHTPANDA_TOKEN is required for the cloud browser")
        params = {"token": self.token, "browser": self.browser}
        if self.proxy:
            params["proxy"] = self.proxy
        if self.country:
            params["country"] = self.country
        return f"{CLOUD_CDP_URL}?{urlencode(params)}"

    def resolve_ws_endpoint(self) -> Optional[str]:
        """Explicit endpoint wins; otherwise derive the cloud URL from the token."""
        if self.ws_endpoint:
            return self.ws_endpoint
        if self.token:
            return self.build_cloud_ws_url()
        return None

    @property
    def agent(self) -> str:
        if self.transport == TRANSPORT_GATEWAY:
            return AGENT_GATEWAY
        if not self.ws_endpoint and self.token:
            return AGENT_CLOUD_CDP
        return AGENT_SELF_HOSTED

    def validate(self):
        """Raise ConfigError when a retrieval cannot even start."""
        if not self.job_url:
            raise ConfigError("JOB_URL environment variable or --job-url argument is required")
        if self.transport not in (TRANSPORT_CDP, TRANSPORT_GATEWAY):
            raise ConfigError(f"Unknown transport {self.transport!r} (expected 'cdp' or 'gateway')")
        if self.transport == TRANSPORT_GATEWAY and not self.token:
            raise ConfigError("LIGHTPANDA_API_KEY environment variable is required for the gateway transport")
