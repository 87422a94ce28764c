"""
The supervisor workflow.

The supervisor is the only node that decides anything: it names the worker to act next
or FINISH. Every worker reports straight back to the supervisor, so there are no
worker-to-worker edges and the run alternates supervisor, worker, supervisor, ...
"""

from typing import Any, Callable, Dict

from langgraph.graph import END, START, StateGraph

from location_agent.nodes.supervisor_node import SUPERVISOR, Supervisor, make_supervisor_node
from location_agent.states.agent_state import FINISH, AgentState


def route_after_supervisor(state: AgentState) -> str:
    """Read the supervisor's decision; FINISH (or nothing) ends the run."""
    decision = state.get("next") or FINISH
    return END if decision == FINISH else decision


def build_supervisor_graph(supervisor: Supervisor, workers: Dict[str, Callable[..., Any]]):
    """Compile the supervisor/worker graph.

    Args:
        supervisor: The router deciding who acts next.
        workers: Worker nodes keyed by name. The names must match the supervisor's members.

    Returns:
        The compiled graph.
    """
    if set(workers) != set(supervisor.members):
        raise ValueError(f"Workers {sorted(workers)} do not match supervisor members {sorted(supervisor.members)}")

    # We initialize the StateGraph over the shared conversation state.
    builder = StateGraph(AgentState)

    # The supervisor and one node per worker.
    builder.add_node(SUPERVISOR, make_supervisor_node(supervisor))
    for name, node in workers.items():
        builder.add_node(name, node)

        # After a worker completes, it always reports back to the supervisor.
        builder.add_edge(name, SUPERVISOR)

    # The entry point is always the supervisor.
    builder.add_edge(START, SUPERVISOR)

    # The supervisor's decision picks the next worker, or ends the run.
    path_map = {name: name for name in workers}
    path_map[END] = END
    builder.add_conditional_edges(SUPERVISOR, route_after_supervisor, path_map)

    return builder.compile()


def supervisor_finished(node: str, update: Dict[str, Any]) -> bool:
    """True for the node output that ends a supervisor run."""
    return node == SUPERVISOR and (update or {}).get("next", FINISH) == FINISH
