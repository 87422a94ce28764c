"""
A single ReAct agent holding every tool, without a supervisor.

It is a self-contained loop: the agent node thinks, the tools node acts, and the flow
returns to the agent until it answers without asking for a tool.
"""

from typing import Any, Dict, Literal, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import SystemMessage
from langchain_core.tools import BaseTool
from langgraph.graph import END, START, StateGraph

from location_agent.errors import LLMInvocationError
from location_agent.helpers import get_today_str
from location_agent.nodes.worker_node import execute_tool_call
from location_agent.prompts import single_agent_prompt
from location_agent.states.agent_state import AgentState


AGENT = "agent"
TOOLS = "tools"


def should_continue(state: AgentState) -> Literal["tools", "__end__"]:
    """Continue to the tools node while the agent keeps asking for tools."""
    last_message = state["messages"][-1]

    # If the last message from the LLM contains tool calls, we continue the loop.
    if getattr(last_message, "tool_calls", None):
        return TOOLS

    # Otherwise the agent has answered and the run ends.
    return END


def build_agent_graph(llm: BaseChatModel, tools: Sequence[BaseTool]):
    """Compile the single-agent graph over the given tools."""
    model_with_tools = llm.bind_tools(list(tools))
    tools_by_name = {tool.name: tool for tool in tools}

    async def agent(state: AgentState) -> dict:
        """The 'brain': analyzes the conversation and decides to call a tool or answer."""
        messages = [SystemMessage(content=single_agent_prompt.format(date=get_today_str()))] + state["messages"]
        try:
            response = await model_with_tools.ainvoke(messages)
        except Exception as exc:
            raise LLMInvocationError(f"Agent model call failed: {exc}", node=AGENT) from exc
        return {"messages": [response]}

    async def tool_node(state: AgentState) -> dict:
        """The 'hands': executes every tool call from the previous LLM response."""
        tool_calls = state["messages"][-1].tool_calls
        return {"messages": [await execute_tool_call(tools_by_name, tool_call) for tool_call in tool_calls]}

    builder = StateGraph(AgentState)
    builder.add_node(AGENT, agent)
    builder.add_node(TOOLS, tool_node)

    # The entry point is always the agent.
    builder.add_edge(START, AGENT)
    builder.add_conditional_edges(AGENT, should_continue, {TOOLS: TOOLS, END: END})

    # After the tools act, the flow loops back to the agent to read the results.
    builder.add_edge(TOOLS, AGENT)

    return builder.compile()


def agent_finished(node: str, update: Dict[str, Any]) -> bool:
    """True for the node output that ends a single-agent run."""
    if node != AGENT:
        return False
    messages = (update or {}).get("messages") or []
    return not (messages and getattr(messages[-1], "tool_calls", None))
