from typing import Annotated, Any, List, Optional, TypedDict, Union

from langchain_core.messages import BaseMessage, HumanMessage


# The routing value that ends a run.
FINISH = "FINISH"


def concat_messages(
    left: Optional[List[BaseMessage]],
    right: Union[BaseMessage, List[BaseMessage], None],
) -> List[BaseMessage]:
    """Append new messages after the existing history, preserving order."""
    if right is None:
        right = []
    elif isinstance(right, BaseMessage):
        right = [right]
    return [*(left or []), *right]


def last_route(left: Optional[str], right: Optional[str]) -> str:
    """The latest routing decision wins; an unset route means FINISH."""
    return right or left or FINISH


# The state shared by the supervisor and every worker.
class AgentState(TypedDict):
    # The whole conversation. Nodes only ever append to it.
    messages: Annotated[List[BaseMessage], concat_messages]

    # The node the supervisor picked to act next, or FINISH.
    next: Annotated[str, last_route]


def initial_state(question: str) -> AgentState:
    """Seed a run with the user's question."""
    return AgentState(messages=[HumanMessage(content=question)], next=FINISH)


def merge_state(state: AgentState, update: Optional[dict[str, Any]]) -> AgentState:
    """Apply one node's partial update with the same reducers the graph uses."""
    update = update or {}
    return AgentState(
        messages=concat_messages(state.get("messages"), update.get("messages")),
        next=last_route(state.get("next"), update.get("next")),
    )
