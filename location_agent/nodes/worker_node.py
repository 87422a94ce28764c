import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage, ToolMessage
from langchain_core.messages.tool import ToolCall
from langchain_core.tools import BaseTool, ToolException
from pydantic import ValidationError

from location_agent.errors import LLMInvocationError
from location_agent.helpers import message_text
from location_agent.states.agent_state import AgentState


logger = logging.getLogger(__name__)

NO_ANSWER = "I could not find any data to answer this request."


@dataclass(frozen=True)
class WorkerSpec:
    """Static description of a worker: its node name, its instructions and its tools."""

    name: str
    instructions: str
    tools: Tuple[BaseTool, ...] = field(default_factory=tuple)


async def execute_tool_call(tools_by_name: Dict[str, BaseTool], tool_call: ToolCall) -> ToolMessage:
    """Run one requested tool call. Bad arguments or unknown tools come back as error messages."""
    tool = tools_by_name.get(tool_call["name"])
    if tool is None:
        logger.warning("Model asked for unknown tool %r", tool_call["name"])
        return ToolMessage(
            content=f"Error: unknown tool '{tool_call['name']}'.",
            name=tool_call["name"],
            tool_call_id=tool_call["id"],
            status="error",
        )

    try:
        observation = await tool.ainvoke(tool_call["args"])
    except (ValidationError, ToolException) as e:
        logger.warning("Tool %s rejected its arguments %r: %s", tool.name, tool_call["args"], e)
        return ToolMessage(
            content=f"Error: invalid arguments for {tool.name}: {e}",
            name=tool.name,
            tool_call_id=tool_call["id"],
            status="error",
        )

    return ToolMessage(content=str(observation), name=tool.name, tool_call_id=tool_call["id"])


def _skipped(tool_call: ToolCall) -> ToolMessage:
    return ToolMessage(
        content="Skipped: only one tool call is run per turn.",
        name=tool_call["name"],
        tool_call_id=tool_call["id"],
        status="error",
    )


def make_worker_node(spec: WorkerSpec, llm: BaseChatModel, max_tool_rounds: int = 1):
    """
    Build the graph node for one worker.

    The worker sees the whole conversation plus its own instructions. Each tool round runs
    the first tool call the model asks for and feeds the result back. After max_tool_rounds
    rounds the next model reply is taken as final, so a worker can never loop on tools.
    The node always contributes exactly one message, attributed to the worker.
    """
    model = llm.bind_tools(list(spec.tools)) if spec.tools else llm
    tools_by_name = {tool.name: tool for tool in spec.tools}

    async def call_model(messages: List[BaseMessage]) -> AIMessage:
        try:
            return await model.ainvoke(messages)
        except Exception as exc:
            raise LLMInvocationError(f"Worker '{spec.name}' model call failed: {exc}", node=spec.name) from exc

    async def worker_node(state: AgentState) -> dict:
        # 1. The worker reasons over its instructions and the full shared history.
        messages: List[BaseMessage] = [SystemMessage(content=spec.instructions), *state["messages"]]

        rounds = 0
        while True:
            response = await call_model(messages)
            tool_calls = getattr(response, "tool_calls", None) or []
            if not tool_calls or rounds >= max_tool_rounds:
                break

            # 2. Run the first requested tool; any others are answered as skipped.
            first, rest = tool_calls[0], tool_calls[1:]
            results = [await execute_tool_call(tools_by_name, first), *(_skipped(tc) for tc in rest)]
            messages = [*messages, response, *results]
            rounds += 1

        # 3. Only the final answer goes back into the shared conversation.
        content = message_text(response) or NO_ANSWER
        logger.debug("Worker %s answered after %d tool round(s)", spec.name, rounds)
        return {"messages": [HumanMessage(content=content, name=spec.name)]}

    worker_node.__name__ = spec.name
    return worker_node


def make_worker_nodes(workers: Sequence[WorkerSpec], llm: BaseChatModel, max_tool_rounds: int = 1) -> dict:
    return {spec.name: make_worker_node(spec, llm, max_tool_rounds) for spec in workers}
