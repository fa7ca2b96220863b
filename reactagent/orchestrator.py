"""
Agent factory for the weather ReAct agent.

Wires configuration, tool descriptors, the system prompt, the session, the
tool registry and the loop together.
"""

import logging
import uuid
from typing import Optional

from .config_loader import validate_app_config
from .llm_call import LLMClient
from .models import AppConfig
from .orchestration import (
    ConversationSession,
    FunctionSchemaStyle,
    ReactLoop,
    build_tool_definitions,
    create_system_prompt,
)
from .tools import GetGeoLocationTool, GetWeatherTool, Tool, ToolRegistry
from .tracing import TracingContext

logger = logging.getLogger(__name__)

QUERY_TEMPLATE = "What is the weather like in {location} today?"


def build_weather_query(location: str) -> str:
    """Question the agent is asked for a location."""
    return QUERY_TEMPLATE.format(location=location)


def new_tracing_context() -> TracingContext:
    """Fresh tracing context with a unique execution id."""
    return TracingContext(execution_id=f"exec-{uuid.uuid4().hex[:12]}")


def default_tools(config: AppConfig) -> list[Tool]:
    """The geocoding and weather tools, in the order they are advertised."""
    return [
        GetWeatherTool(config.tools.weather, timeout=config.tools.timeout),
        GetGeoLocationTool(config.tools.geo, timeout=config.tools.timeout),
    ]


def create_agent(
    config: AppConfig,
    llm_client: Optional[LLMClient] = None,
    tools: Optional[list[Tool]] = None,
    example: Optional[str] = None,
    max_iterations: Optional[int] = None,
    tracing_context: Optional[TracingContext] = None,
) -> ReactLoop:
    """
    Build a ready-to-run ReAct loop.

    Args:
        config: Validated application configuration
        llm_client: Completion client, built from ``config.llm`` if omitted
        tools: Tools to register, defaults to the weather tools
        example: Example session for the system prompt
        max_iterations: Overrides ``config.agent.max_iterations``
        tracing_context: Optional tracing context

    Returns:
        A ReactLoop with its own session and registry.
    """
    tools = default_tools(config) if tools is None else tools
    style = FunctionSchemaStyle(config.agent.schema_style)

    descriptors = build_tool_definitions(tools, style)
    system_prompt = create_system_prompt(descriptors, example)

    session = ConversationSession(
        name=config.agent.name,
        description=config.agent.description,
        model=config.llm.model,
        system_prompt=system_prompt,
        llm_client=llm_client or LLMClient.from_config(config.llm),
        tracing_context=tracing_context,
    )

    registry = ToolRegistry()
    for tool in tools:
        registry.add(tool)

    logger.debug(f"Created agent '{session.name}' with tools:\n{registry.get_tools_summary()}")

    return ReactLoop(
        session=session,
        registry=registry,
        max_iterations=(
            config.agent.max_iterations if max_iterations is None else max_iterations
        ),
        tracing_context=tracing_context,
    )


def run_query(
    location: str,
    config: AppConfig,
    llm_client: Optional[LLMClient] = None,
    max_iterations: Optional[int] = None,
) -> str:
    """
    Validate the configuration and answer the weather question for a location.

    Raises:
        ConfigurationError: Required configuration is missing
        AgentError: The loop failed
    """
    validate_app_config(config)

    agent = create_agent(
        config,
        llm_client=llm_client,
        max_iterations=max_iterations,
        tracing_context=new_tracing_context(),
    )

    return run_agent(agent, build_weather_query(location))


def run_agent(agent: ReactLoop, query: str) -> str:
    """Run the agent on a query inside a trace when the agent has a tracing context."""
    tracing_context = agent.tracing_context
    if tracing_context is None:
        return agent.run(query)

    tracing_context.start_trace(name="weather_query", query=query)
    try:
        answer = agent.run(query)
    except Exception as e:
        tracing_context.end_trace(output=str(e), status="error")
        raise
    tracing_context.end_trace(output=answer)
    return answer
