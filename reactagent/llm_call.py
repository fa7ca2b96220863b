"""
LLM Call Interface for the ReAct agent.

Wraps the OpenAI SDK for a single chat completion call against any
OpenAI-compatible endpoint, mapping SDK failures to TransportError.
"""

import logging
from typing import Optional

import openai
from openai import OpenAI

from .errors import TransportError
from .models import LLMConfig

logger = logging.getLogger(__name__)


class LLMClient:
    """Client for an OpenAI-compatible chat completion endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url
        self.model = model
        client_kwargs: dict = {"base_url": base_url, "api_key": api_key}
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        self.client = OpenAI(**client_kwargs)

    @classmethod
    def from_config(cls, config: LLMConfig) -> "LLMClient":
        """Build a client from the ``llm`` configuration section."""
        return cls(
            base_url=config.base_url,
            api_key=config.api_key,
            model=config.model,
            timeout=config.timeout,
        )

    def create_chat_completion(
        self,
        messages: list[dict],
        model: Optional[str] = None,
    ):
        """Call the completion endpoint with an ordered message list.

        Args:
            messages: Chat messages in OpenAI wire format
            model: Model identifier, defaults to the client's model

        Returns:
            The SDK ChatCompletion response

        Raises:
            TransportError: On any network, HTTP or provider failure
        """
        resolved_model = model or self.model
        try:
            return self.client.chat.completions.create(
                model=resolved_model,
                messages=messages,  # type: ignore[arg-type]
            )
        except openai.APIStatusError as e:
            logger.error(f"Completion call to {self.base_url} failed: {e}")
            raise TransportError(
                f"Completion call failed: {e.message}", status_code=e.status_code
            ) from e
        except openai.OpenAIError as e:
            logger.error(f"Completion call to {self.base_url} failed: {e}")
            raise TransportError(f"Completion call failed: {e}") from e

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        self.client.close()
