"""
Process-wide Langfuse client for agent tracing.

Built once from the ``langfuse`` config section. Without both keys, or when
the server rejects the credentials, the client stays disconnected and every
tracing call in ``context.py`` becomes a no-op.
"""

import logging
from typing import Optional

from langfuse import Langfuse

from ..models import LangfuseConfig

logger = logging.getLogger(__name__)


def _connect(config: LangfuseConfig) -> Optional[Langfuse]:
    """Create a Langfuse client and check its credentials, or return None."""
    if not config.is_configured:
        logger.debug("Tracing disabled: Langfuse keys not configured")
        return None

    if config.host and not config.host.startswith(("http://", "https://")):
        logger.warning(
            f"LANGFUSE_HOST '{config.host}' has no scheme; "
            "expected http://hostname:port or https://hostname:port"
        )

    options = {
        "public_key": config.public_key,
        "secret_key": config.secret_key,
        "debug": config.debug,
    }
    if config.host:
        options["host"] = config.host

    try:
        langfuse = Langfuse(**options)
        authenticated = langfuse.auth_check()
    except Exception as e:
        logger.warning(f"Tracing disabled: could not reach Langfuse: {e}")
        return None

    if not authenticated:
        logger.warning("Tracing disabled: Langfuse rejected the credentials")
        return None

    logger.info(f"Langfuse tracing enabled (host: {config.host or 'default'})")
    return langfuse


class TracingClient:
    """Holds the connected Langfuse client, if any."""

    def __init__(self, config: Optional[LangfuseConfig] = None):
        self.client: Optional[Langfuse] = _connect(config or LangfuseConfig())

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def shutdown(self) -> None:
        """Flush pending observations and disconnect."""
        if self.client is None:
            return
        try:
            self.client.shutdown()
        except Exception as e:
            logger.warning(f"Langfuse shutdown failed: {e}")
        self.client = None


_tracing_client: Optional[TracingClient] = None


def init_tracing_client(config: Optional[LangfuseConfig] = None) -> TracingClient:
    """Replace the process-wide tracing client."""
    global _tracing_client
    _tracing_client = TracingClient(config)
    return _tracing_client


def get_tracing_client() -> Optional[TracingClient]:
    return _tracing_client


def shutdown_tracing() -> None:
    """Shut down and forget the process-wide tracing client."""
    global _tracing_client
    if _tracing_client is not None:
        _tracing_client.shutdown()
        _tracing_client = None
