"""
Conversation session: ordered message history plus the completion call.

The session is the only writer of its history. ``step`` appends the user
message, sends the whole history to the completion endpoint and appends
the assistant reply, all under one lock so that no other caller can
interleave between the request and the reply.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import EmptyChoicesError, EmptyContentError
from ..llm_call import LLMClient
from ..tracing import TracingContext

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """Author of a chat message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """A single chat message."""

    role: Role
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role.value, "content": self.content}


class ConversationSession:
    """
    Owns the ordered conversation history of one agent.

    If a system prompt is given it becomes the first message and stays
    the only system message for the lifetime of the session.
    """

    def __init__(
        self,
        name: str,
        description: str,
        model: str,
        system_prompt: Optional[str] = None,
        llm_client: Optional[LLMClient] = None,
        tracing_context: Optional[TracingContext] = None,
    ):
        """
        Initialize the session.

        Args:
            name: Agent name
            description: What the agent does
            model: Model identifier sent with every completion call
            system_prompt: Optional system prompt placed first in the history
            llm_client: Client for the completion endpoint
            tracing_context: Optional tracing context for completion calls
        """
        self.name = name
        self.description = description
        self.model = model
        self.system_prompt = system_prompt
        self.llm_client = llm_client
        self.tracing_context = tracing_context

        self._lock = threading.Lock()
        self._messages: list[Message] = []
        if system_prompt is not None:
            self._messages.append(Message(Role.SYSTEM, system_prompt))

    @property
    def history(self) -> tuple[Message, ...]:
        """Snapshot of the conversation history in transcript order."""
        with self._lock:
            return tuple(self._messages)

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)

    def step(self, text: str) -> str:
        """
        Send one user turn and return the assistant reply.

        The user message is appended before the call and stays in the
        history even when the call fails, so a retry resends it alongside
        the copy that is already there.

        Raises:
            TransportError: The completion call failed
            EmptyChoicesError: The response had no choices
            EmptyContentError: The first choice had no text content
        """
        if self.llm_client is None:
            raise RuntimeError(f"Session '{self.name}' has no LLM client")

        with self._lock:
            self._messages.append(Message(Role.USER, text))
            payload = [m.to_dict() for m in self._messages]
            logger.debug("Session '%s' sending %d messages", self.name, len(payload))

            content = self._complete(payload)

            self._messages.append(Message(Role.ASSISTANT, content))
            return content

    def _complete(self, payload: list[dict]) -> str:
        if self.tracing_context is None:
            return self._extract_content(
                self.llm_client.create_chat_completion(payload, model=self.model)
            )

        with self.tracing_context.generation(
            name="completion", model=self.model, input=payload
        ) as gen:
            try:
                response = self.llm_client.create_chat_completion(
                    payload, model=self.model
                )
                content = self._extract_content(response)
            except Exception:
                gen.set_status("error")
                raise
            usage = getattr(response, "usage", None)
            if usage is not None:
                gen.set_usage(
                    prompt_tokens=getattr(usage, "prompt_tokens", None),
                    completion_tokens=getattr(usage, "completion_tokens", None),
                )
            gen.set_output(content)
            return content

    @staticmethod
    def _extract_content(response) -> str:
        choices = getattr(response, "choices", None)
        if not choices:
            raise EmptyChoicesError()
        content = choices[0].message.content
        if content is None:
            raise EmptyContentError()
        return content

