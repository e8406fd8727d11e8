"""
Example: Driving the sandboxed tools from an agent loop

This example shows how an agent hands tool schemas to an LLM and feeds
the model's tool calls back into the tool system. The "model" here is a
scripted stand-in that replays a fixed plan, so the example runs without
any LLM server.

Usage:
    python examples/agent_tool_loop.py /path/to/workspace
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from bcoder_tools import ToolCall, ToolResult, create_tool_system


class ScriptedModel:
    """Replays a list of tool-call rounds, then answers."""

    def __init__(self, rounds: list[list[dict[str, Any]]]):
        self.rounds = list(rounds)

    async def complete(self, messages: list[dict], tools: list[dict]) -> dict:
        if self.rounds:
            return {"tool_calls": self.rounds.pop(0)}
        return {"content": "Done. Created notes/todo.md and updated it."}


async def run_agent(workspace: Path) -> None:
    system = create_tool_system(workspace)
    schemas = system.get_tool_schemas()
    print(f"Offering {len(schemas)} tools to the model")

    model = ScriptedModel(
        [
            [
                {"name": "create_directory", "arguments": {"path": "notes"}},
                {
                    "name": "write_file",
                    "arguments": {"path": "notes/todo.md", "content": "- [ ] write tests\n"},
                },
            ],
            [
                {
                    "name": "edit_file",
                    "arguments": {
                        "path": "notes/todo.md",
                        "old_text": "[ ]",
                        "new_text": "[x]",
                    },
                },
                # Outside the sandbox: comes back as a failed result
                {"name": "read_file", "arguments": {"path": "/etc/passwd"}},
            ],
            [{"name": "search_in_files", "arguments": {"query": "tests"}}],
        ]
    )

    messages: list[dict] = [{"role": "user", "content": "Keep a todo list in notes/"}]
    while True:
        response = await model.complete(messages, tools=schemas)
        if "content" in response:
            print(f"Model: {response['content']}")
            break

        calls = [ToolCall.model_validate(c) for c in response["tool_calls"]]
        results: list[ToolResult] = await system.execute_tools(calls)

        for call, result in zip(calls, results):
            print(f"  {call.name}: {result}")
            messages.append(
                {
                    "role": "tool",
                    "name": call.name,
                    "content": json.dumps(result.model_dump(exclude_none=True), default=str),
                }
            )


if __name__ == "__main__":
    root = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.cwd()
    asyncio.run(run_agent(root.resolve()))
