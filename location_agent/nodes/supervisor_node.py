import logging
from typing import Literal, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder
from pydantic import BaseModel, Field, ValidationError, create_model

from location_agent.errors import LLMInvocationError, RoutingContractViolation
from location_agent.prompts import supervisor_routing_prompt, supervisor_system_prompt
from location_agent.states.agent_state import FINISH, AgentState


logger = logging.getLogger(__name__)

SUPERVISOR = "supervisor"
ROUTE_TOOL = "route"


def build_route_schema(options: Sequence[str]) -> type[BaseModel]:
    """A single-field schema whose only valid values are the given routes."""
    return create_model(
        ROUTE_TOOL,
        __doc__="Select the next role.",
        next=(Literal[tuple(options)], Field(description="The worker to act next, or FINISH.")),
    )


class Supervisor:
    """
    The router of the workflow. It reads the whole conversation and names the next worker,
    or FINISH. The model is forced to answer through the 'route' tool, so its answer is
    always parsed as one enumerated field rather than free text.
    """

    def __init__(self, llm: BaseChatModel, members: Sequence[str]):
        if not members:
            raise ValueError("A supervisor needs at least one worker")
        if FINISH in members:
            raise ValueError(f"'{FINISH}' is reserved and cannot name a worker")

        self.members = tuple(members)
        self.options = (FINISH, *self.members)
        self.route_schema = build_route_schema(self.options)

        prompt = ChatPromptTemplate.from_messages(
            [
                ("system", supervisor_system_prompt),
                MessagesPlaceholder("messages"),
                ("system", supervisor_routing_prompt),
            ]
        ).partial(options=", ".join(self.options), members=", ".join(self.members))

        self._chain = prompt | llm.bind_tools([self.route_schema], tool_choice=ROUTE_TOOL)

    async def decide(self, messages: Sequence[BaseMessage]) -> str:
        """Ask the model who acts next. Returns a worker name or FINISH."""
        try:
            response = await self._chain.ainvoke({"messages": list(messages)})
        except Exception as exc:
            raise LLMInvocationError(f"Supervisor model call failed: {exc}", node=SUPERVISOR) from exc

        route_calls = [tc for tc in getattr(response, "tool_calls", None) or [] if tc["name"] == ROUTE_TOOL]
        if not route_calls:
            raise RoutingContractViolation("Supervisor answered without calling the route tool", node=SUPERVISOR)

        args = route_calls[0]["args"]
        try:
            decision = self.route_schema.model_validate(args)
        except ValidationError as exc:
            raise RoutingContractViolation(
                f"Supervisor picked {args!r}, expected one of {list(self.options)}", node=SUPERVISOR
            ) from exc

        logger.info("Supervisor routed to %s", decision.next)
        return decision.next


def make_supervisor_node(supervisor: Supervisor):
    """Wrap a Supervisor as a graph node that only writes the 'next' field."""

    async def supervisor_node(state: AgentState) -> dict:
        return {"next": await supervisor.decide(state["messages"])}

    return supervisor_node
