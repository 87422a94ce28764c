"""
Running a compiled workflow.

The runner streams node outputs from the graph, merges each one into its own copy of the
conversation state with the same reducers the graph uses, and enforces the step budget.
Every abort is raised as a WorkflowError carrying the last merged state.
"""

import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Dict, Optional

from langgraph.errors import GraphRecursionError

from location_agent.errors import StepBudgetExceeded, WorkflowError
from location_agent.states.agent_state import AgentState, initial_state, merge_state


logger = logging.getLogger(__name__)

DEFAULT_STEP_BUDGET = 25


@dataclass(frozen=True)
class NodeOutput:
    """One node execution: what it returned, and the merged state right after it."""

    step: int
    node: str
    update: Dict[str, Any]
    state: AgentState


class WorkflowRunner:
    def __init__(
        self,
        graph: Any,
        is_final: Callable[[str, Dict[str, Any]], bool],
        step_budget: int = DEFAULT_STEP_BUDGET,
    ) -> None:
        """
        Args:
            graph:       A compiled graph over AgentState.
            is_final:    Tells whether a node output is the last one of the run.
            step_budget: Maximum number of node executions per run.
        """
        if step_budget < 1:
            raise ValueError("step_budget must be at least 1")
        self._graph = graph
        self._is_final = is_final
        self.step_budget = step_budget

    async def astream(self, question: str, step_budget: Optional[int] = None) -> AsyncIterator[NodeOutput]:
        """Run the workflow on *question*, yielding each node's output as it completes.

        Raises:
            StepBudgetExceeded: the budget was used up before the run finished.
            WorkflowError:      any other abort (routing violation, model failure).
        """
        budget = step_budget if step_budget is not None else self.step_budget
        if budget < 1:
            raise ValueError("step_budget must be at least 1")

        state = initial_state(question)
        step = 0
        # The graph's own recursion limit only backs up the budget check below.
        config = {"recursion_limit": budget + 2}

        try:
            async for chunk in self._graph.astream(state, config=config, stream_mode="updates"):
                for node, update in chunk.items():
                    update = update or {}
                    step += 1
                    state = merge_state(state, update)
                    logger.debug("Step %d: %s -> %s", step, node, update)
                    yield NodeOutput(step=step, node=node, update=update, state=state)

                    if step >= budget and not self._is_final(node, update):
                        raise StepBudgetExceeded(budget, node=node, state=state)
        except GraphRecursionError as exc:
            logger.error("Run hit the graph recursion limit after %d steps", step)
            raise StepBudgetExceeded(budget, state=state) from exc
        except WorkflowError as exc:
            if exc.state is None:
                exc.state = state
            logger.error("Run aborted at node %s: %s", exc.node, exc)
            raise

    async def arun(self, question: str, step_budget: Optional[int] = None) -> AgentState:
        """Run the workflow to completion and return the final state."""
        state = initial_state(question)
        async for output in self.astream(question, step_budget=step_budget):
            state = output.state
        return state
