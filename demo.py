#!/usr/bin/env python
"""Run the demo tools against an OpenAI-compatible server.

Registers the weather, calculator and clock tools, sends prompts through
generate_with_tools and prints every tool call, tool result and final answer.

Usage:
    python demo.py --parse-sample
    python demo.py "What's the weather in Tokyo?"
    python demo.py --base-url https://api.groq.com/openai/v1 --model llama-3.1-8b-instant
    python demo.py --no-auto-execute --max-tool-calls 1 -v

Connection defaults come from TOOLCALL_BASE_URL, TOOLCALL_API_KEY and
TOOLCALL_MODEL (a .env file next to this script is loaded first).
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path

sys.path.insert(0, 'src')

from toolcall_engine import (
    GenerationConfig,
    LLMConfig,
    ModelInvocationError,
    OpenAIChatModel,
    Orchestrator,
    TagParser,
    ToolCallingResult,
    ToolRegistry,
)
from toolcall_engine.demo_tools import DEMO_TOOLS, register_demo_tools

# Load .env file if it exists
env_file = Path(__file__).parent / ".env"
if env_file.exists():
    with open(env_file) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, value = line.split("=", 1)
                os.environ.setdefault(key.strip(), value.strip())


SAMPLE_OUTPUT = (
    "I'll check the weather for you.\n"
    '<tool_call>{"name": "get_weather", "arguments": {"city": "San Francisco"}}</tool_call>'
)

DEFAULT_PROMPTS = [
    "What's the weather in San Francisco?",
    "Calculate 25 * 4 + 10",
    "What time is it in America/New_York?",
]


def print_parse_sample() -> None:
    """Parse the canned sample output and print what was found."""
    parsed = TagParser().parse(SAMPLE_OUTPUT)
    print("=" * 70)
    print("Parse Test")
    print("=" * 70)
    if parsed.tool_call:
        print(f"Tool: {parsed.tool_call.tool_name}")
        print(f"Args: {json.dumps(parsed.tool_call.arguments, indent=2)}")
        print(f'Clean text: "{parsed.text}"')
    else:
        print(f'No tool call detected. Text: "{parsed.text}"')


def print_result(prompt: str, result: ToolCallingResult) -> None:
    """Print calls, results and the final response of one request."""
    print(f"\n{'='*70}")
    print(f"Prompt: {prompt}")
    print("=" * 70)

    if not result.has_calls:
        print("\n[info] The model responded without calling any tools")

    for i, call in enumerate(result.tool_calls):
        print(f"\n[tool_call] {call.tool_name}")
        print(json.dumps(call.arguments, indent=2))
        if i < len(result.tool_results):
            tool_result = result.tool_results[i]
            status = "success" if tool_result.success else "failed"
            print(f"[tool_result] {tool_result.tool_name} ({status})")
            if tool_result.success:
                print(json.dumps(tool_result.result, indent=2, default=str))
            else:
                print(tool_result.error)

    if result.budget_exhausted:
        print("\n[info] Tool call budget exhausted")

    print(f"\n[response] {result.text or '(empty)'}")


async def run_prompts(args: argparse.Namespace) -> int:
    config = LLMConfig.from_env()
    if args.base_url:
        config.base_url = args.base_url
    if args.api_key:
        config.api_key = args.api_key
    if args.model:
        config.model = args.model

    registry = ToolRegistry()
    names = register_demo_tools(registry)
    print(f"Registered {len(names)} tools: {', '.join(names)}")

    orchestrator = Orchestrator(registry, OpenAIChatModel(config))
    generation = GenerationConfig(
        tools=DEMO_TOOLS,
        max_tool_calls=args.max_tool_calls,
        auto_execute=not args.no_auto_execute,
        temperature=args.temperature,
        max_tokens=args.max_tokens,
    )

    failures = 0
    for prompt in args.prompts or DEFAULT_PROMPTS:
        try:
            result = await orchestrator.generate_with_tools(prompt, generation)
        except ModelInvocationError as e:
            print(f"\n[error] Generation failed: {e}")
            failures += 1
            continue
        print_result(prompt, result)

    return 1 if failures else 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Tool calling demo")
    parser.add_argument("prompts", nargs="*", help="Prompts to send (defaults to a built-in set)")
    parser.add_argument("--parse-sample", action="store_true", help="Only parse a canned model output")
    parser.add_argument("--base-url", help="OpenAI-compatible server URL")
    parser.add_argument("--api-key", help="API key for the server")
    parser.add_argument("--model", help="Model name (auto-detected if omitted)")
    parser.add_argument("--max-tool-calls", type=int, default=3, help="Tool call budget per prompt")
    parser.add_argument("--no-auto-execute", action="store_true", help="Report calls without executing them")
    parser.add_argument("--temperature", type=float, default=0.7)
    parser.add_argument("--max-tokens", type=int, default=512)
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.parse_sample:
        print_parse_sample()
        return 0

    return asyncio.run(run_prompts(args))


if __name__ == "__main__":
    sys.exit(main())
