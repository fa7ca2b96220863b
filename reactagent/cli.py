#!/usr/bin/env python3
"""
ReAct weather agent CLI

Asks the agent what the weather is like in a location and prints the
final answer.
"""

import argparse
import json
import logging
import sys
from typing import Optional

from .config_loader import load_app_config, validate_app_config
from .errors import AgentError, ConfigurationError
from .llm_call import LLMClient
from .orchestrator import build_weather_query, create_agent, new_tracing_context, run_agent
from .tracing import init_tracing_client, shutdown_tracing

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, level: str = "INFO") -> None:
    """Configure logging based on verbosity level."""
    resolved = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def print_trace(trace: list[dict]) -> None:
    """Print the reasoning trace of a run."""
    print("\n" + "═" * 70)
    print("REACT TRACE")
    print("═" * 70)

    for step in trace:
        print(f"\n┌─ Iteration {step['step']}" + ("  [FINAL]" if step["is_final"] else ""))
        if step["error"]:
            print(f"│  Retried: {step['error']}")
        if step["reasoning"]:
            print(f"│  Thought: {step['reasoning']}")
        if step["action"]:
            print(f"│  Action: {step['action']}")
        if step["action_input"]:
            print(f"│  Input: {json.dumps(step['action_input'], ensure_ascii=False)}")
        if step["observation"]:
            obs = step["observation"]
            if len(obs) > 200:
                obs = obs[:200] + "..."
            print(f"│  Observation: {obs}")
        print("└" + "─" * 68)

    print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reactagent",
        description="Ask a ReAct agent for the current weather in a location",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s London                       # Weather in London
  %(prog)s Beijing -d /path/to/.env     # Load credentials from a dotenv file
  %(prog)s Paris -v --trace             # Verbose logging and reasoning trace
""",
    )

    parser.add_argument(
        "location",
        help="Region name to check current weather",
    )

    parser.add_argument(
        "-d",
        "--dotenv-absolute-path",
        type=str,
        default=None,
        help=(
            "Load the .env at this path; otherwise the .env in the current "
            "directory or its parents is used"
        ),
    )

    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="Path to a YAML config file (default: CONFIG_PATH env or packaged config)",
    )

    parser.add_argument(
        "-n",
        "--max-iterations",
        type=int,
        default=None,
        help="Maximum loop iterations (default: from config)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "--trace",
        action="store_true",
        help="Print the reasoning trace after the answer",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON (for scripting)",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose)

    try:
        config = load_app_config(
            path=args.config,
            dotenv_path=args.dotenv_absolute_path,
            reload=True,
        )
        if args.max_iterations is not None:
            config.agent.max_iterations = args.max_iterations
        validate_app_config(config)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    if not args.verbose:
        logging.getLogger().setLevel(getattr(logging, config.log_level, logging.INFO))

    if not args.json:
        print(f"\nOPENAI_BASE_URL: {config.llm.base_url}")
        print(f"LLM Model: {config.llm.model}")

    init_tracing_client(config.langfuse)
    llm_client = LLMClient.from_config(config.llm)
    agent = create_agent(
        config,
        llm_client=llm_client,
        tracing_context=new_tracing_context(),
    )
    query = build_weather_query(args.location)

    try:
        answer = run_agent(agent, query)
    except AgentError as e:
        if args.json:
            output = {"query": query, "error": str(e), "trace": agent.get_trace()}
            print(json.dumps(output, indent=2, ensure_ascii=False))
        else:
            print(f"Error: {e}")
            if args.trace:
                print_trace(agent.get_trace())
        return 1
    finally:
        llm_client.close()
        shutdown_tracing()

    if args.json:
        output = {
            "query": query,
            "answer": answer,
            "iterations": agent.iterations,
            "trace": agent.get_trace(),
        }
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        print("\n\nFinal answer: ")
        print("--" * 30)
        print(answer)
        print(f"\n(Completed in {agent.iterations} iteration{'s' if agent.iterations != 1 else ''})")
        if args.trace:
            print_trace(agent.get_trace())

    return 0


if __name__ == "__main__":
    sys.exit(main())
