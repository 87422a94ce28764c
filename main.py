import asyncio
import logging
from enum import Enum
from typing import Optional

import typer

from location_agent.config import get_settings
from location_agent.errors import ConfigurationError, StepBudgetExceeded, WorkflowError
from location_agent.graphs.agent_graph import agent_finished
from location_agent.graphs.location_graph import build_location_graph, build_single_agent_graph
from location_agent.graphs.supervisor_graph import supervisor_finished
from location_agent.helpers import message_text
from location_agent.nodes.supervisor_node import SUPERVISOR
from location_agent.runner import WorkflowRunner


app = typer.Typer(help="Answer questions about a place with a supervisor and two worker agents.")


class Mode(str, Enum):
    supervisor = "supervisor"
    single = "single"


DEFAULT_QUESTION = "What is the exact address? locationId: 229968"


async def run_workflow(question: str, mode: Mode, step_budget: Optional[int]) -> None:
    settings = get_settings()

    if mode is Mode.single:
        runner = WorkflowRunner(build_single_agent_graph(settings), agent_finished, settings.step_budget)
    else:
        runner = WorkflowRunner(build_location_graph(settings), supervisor_finished, settings.step_budget)

    final_state = None
    async for output in runner.astream(question, step_budget=step_budget):
        # We print every node's contribution as it arrives.
        if output.node == SUPERVISOR:
            print(f"[{output.step}] supervisor -> {output.update['next']}")
        else:
            for message in output.update.get("messages", []):
                print(f"[{output.step}] {output.node}: {message_text(message)}")
        print("----")
        final_state = output.state

    print("=== Final Output ===")
    print(message_text(final_state["messages"][-1]))


@app.command()
def run(
    question: str = typer.Argument(DEFAULT_QUESTION, help="The question to answer."),
    mode: Mode = typer.Option(Mode.supervisor, "--mode", help="Supervisor workflow or a single agent."),
    step_budget: Optional[int] = typer.Option(None, "--step-budget", min=1, help="Maximum node executions."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every step."),
) -> None:
    """Run one question through the workflow and print each step."""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        asyncio.run(run_workflow(question, mode, step_budget))
    except ConfigurationError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    except StepBudgetExceeded as e:
        messages = (e.state or {}).get("messages", [])
        typer.echo(f"{e} ({len(messages)} messages so far)", err=True)
        raise typer.Exit(code=2)
    except WorkflowError as e:
        typer.echo(f"Run failed at node {e.node or 'unknown'}: {e}", err=True)
        raise typer.Exit(code=2)


if __name__ == "__main__":
    app()
