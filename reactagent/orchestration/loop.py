"""
ReAct loop controller.

Drives a ConversationSession, the action protocol parser and a
ToolRegistry through bounded iterations until the model answers.

Per-iteration flow:
    1. Count the iteration; fail once the budget is exceeded
    2. Send the current prompt through the session
    3. Parse the reply into an action envelope
    4. ``answer``: return the envelope's thought as the final answer
    5. ``pause``: dispatch the tool (or echo the thought for ``none``)
       and make the observation the next prompt

Transport failures and unparseable replies are retried with the same
prompt. Each retry uses up one iteration, so the budget bounds retries
and reasoning steps alike. Tool failures end the run immediately.
"""

import json
import logging
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Optional

from ..errors import (
    AgentError,
    IterationBudgetExceeded,
    ToolExecutionError,
    TransportError,
)
from ..tracing import TracingContext
from .protocol import ActionEnvelope, ParseFailure, parse_action
from .session import ConversationSession

if TYPE_CHECKING:
    from ..tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 10

OBSERVATION_PREFIX = "**Observation**: "


@dataclass
class LoopState:
    """Mutable state of one loop run."""

    iteration_count: int
    max_iterations: int
    current_prompt: str


@dataclass
class OrchestrationStep:
    """A single iteration of the loop, kept for tracing."""

    step_number: int
    reasoning: Optional[str] = None
    action: Optional[str] = None
    action_input: Optional[Any] = None
    observation: Optional[str] = None
    error: Optional[str] = None
    is_final: bool = False
    final_answer: Optional[str] = None


def format_observation(observation: str) -> str:
    """Wrap an observation as the next user prompt."""
    return f"{OBSERVATION_PREFIX}{observation}"


def _to_observation(tool_name: str, result: Any) -> str:
    try:
        return json.dumps(result, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise ToolExecutionError(
            tool_name, f"result is not JSON serialisable: {e}"
        ) from e


class ReactLoop:
    """
    Bounded ReAct loop over one session and one tool registry.

    The loop does not own the session or the registry; several loops may
    run at once as long as each has its own session.
    """

    def __init__(
        self,
        session: ConversationSession,
        registry: "ToolRegistry",
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        tracing_context: Optional[TracingContext] = None,
    ):
        """
        Initialize the loop.

        Args:
            session: Conversation session that talks to the model
            registry: Tools the model may call
            max_iterations: Maximum number of iterations per run
            tracing_context: Optional tracing context for the run

        Raises:
            ValueError: If max_iterations is less than 1
        """
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")
        self.session = session
        self.registry = registry
        self.max_iterations = max_iterations
        self.tracing_context = tracing_context

        self.steps: list[OrchestrationStep] = []
        self.iterations = 0

    @property
    def name(self) -> str:
        return self.session.name

    @property
    def description(self) -> str:
        return self.session.description

    def run(self, query: str) -> str:
        """
        Run the loop for a query.

        Args:
            query: The user's question

        Returns:
            The final answer text.

        Raises:
            IterationBudgetExceeded: No answer within max_iterations
            ToolNotFoundError: The model asked for an unregistered tool
            ToolExecutionError: A tool failed
        """
        self.steps = []
        self.iterations = 0

        logger.debug("Starting ReAct loop for: %s", query)

        if self.tracing_context is None:
            return self._run_loop(query)

        with self.tracing_context.span(
            name="react_loop",
            metadata={"max_iterations": self.max_iterations},
            input={"query": query},
        ) as loop_span:
            try:
                answer = self._run_loop(query)
            except AgentError as e:
                loop_span.set_status("error")
                loop_span.set_output({"error": str(e), "iterations": self.iterations})
                raise
            loop_span.set_output({"answer": answer, "iterations": self.iterations})
            return answer

    def _run_loop(self, query: str) -> str:
        state = LoopState(
            iteration_count=0,
            max_iterations=self.max_iterations,
            current_prompt=query,
        )

        while True:
            state.iteration_count += 1
            if state.iteration_count > state.max_iterations:
                logger.warning("Max iterations (%d) reached", state.max_iterations)
                raise IterationBudgetExceeded(state.max_iterations)
            self.iterations = state.iteration_count

            step = OrchestrationStep(step_number=state.iteration_count)
            self.steps.append(step)
            logger.debug("Prompt (iteration %d): %s", state.iteration_count, state.current_prompt)

            try:
                reply = self.session.step(state.current_prompt)
            except TransportError as e:
                logger.warning("Failed to get response from agent: %s", e)
                step.error = str(e)
                continue

            parsed = parse_action(reply)
            if isinstance(parsed, ParseFailure):
                logger.warning(
                    "Failed to parse action call JSON (%s): <BEGIN>\n%s\n<END>",
                    parsed.reason,
                    parsed.raw,
                )
                step.error = str(parsed.to_error())
                continue

            step.reasoning = parsed.thought
            step.action = parsed.action.tool
            step.action_input = parsed.action.input

            if parsed.is_answer:
                step.is_final = True
                step.final_answer = parsed.thought
                logger.info(
                    "Answer after %d iteration%s",
                    state.iteration_count,
                    "" if state.iteration_count == 1 else "s",
                )
                return parsed.thought

            observation = self._observe(parsed, state.iteration_count)
            step.observation = observation
            logger.debug("Observation: %s", observation)
            state.current_prompt = format_observation(observation)

    def _observe(self, envelope: ActionEnvelope, step_num: int) -> str:
        """Produce the observation for a pause envelope."""
        if not envelope.is_tool_call:
            return envelope.thought
        return self._execute_tool(envelope.action.tool, envelope.action.input, step_num)

    def _execute_tool(self, tool_name: str, tool_args: Any, step_num: int) -> str:
        """Dispatch a tool and stringify its JSON result. Errors propagate."""
        if self.tracing_context is None:
            result = self.registry.dispatch(tool_name, tool_args)
            return _to_observation(tool_name, result)

        with self.tracing_context.span(
            name=f"tool:{tool_name}",
            metadata={"step": step_num},
            input=tool_args,
        ) as tool_span:
            try:
                result = self.registry.dispatch(tool_name, tool_args)
                observation = _to_observation(tool_name, result)
            except AgentError as e:
                tool_span.set_status("error")
                tool_span.set_output({"error": str(e)})
                raise
            tool_span.set_output(result)
            return observation

    def get_trace(self) -> list[dict]:
        """Trace of the last run, one dict per iteration."""
        return [{"step": s.step_number, **asdict(s)} for s in self.steps]
