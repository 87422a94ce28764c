"""
Building the location workflow.

Two workers sit behind the supervisor: a web researcher with the Tavily search tool, and
a TripAdvisor worker with the location info tool. The supervisor picks one of them per
turn until it decides the user's question is answered.
"""

from typing import List, Optional, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.tools import BaseTool

from location_agent.config import Settings
from location_agent.graphs.agent_graph import build_agent_graph
from location_agent.graphs.supervisor_graph import build_supervisor_graph
from location_agent.helpers import get_today_str
from location_agent.models.chat_models import get_chat_model
from location_agent.nodes.supervisor_node import Supervisor
from location_agent.nodes.worker_node import WorkerSpec, make_worker_nodes
from location_agent.prompts import researcher_prompt, tripadvisor_prompt
from location_agent.tools.location_tools import make_location_tool
from location_agent.tools.search_tools import make_search_tool


RESEARCHER = "researcher"
TRIPADVISOR = "tripadvisorApi"


def default_workers(search_tool: BaseTool, location_tool: BaseTool) -> List[WorkerSpec]:
    """The researcher and TripAdvisor workers, each scoped to its one tool."""
    return [
        WorkerSpec(
            name=RESEARCHER,
            instructions=researcher_prompt.format(date=get_today_str()),
            tools=(search_tool,),
        ),
        WorkerSpec(
            name=TRIPADVISOR,
            instructions=tripadvisor_prompt,
            tools=(location_tool,),
        ),
    ]


def default_tools(settings: Settings) -> List[BaseTool]:
    """The search tool and the location tool, in that order."""
    return [make_search_tool(settings), make_location_tool(settings)]


def build_location_graph(
    settings: Settings,
    llm: Optional[BaseChatModel] = None,
    supervisor_llm: Optional[BaseChatModel] = None,
    tools: Optional[Sequence[BaseTool]] = None,
):
    """Compile the supervisor workflow.

    Args:
        settings: Loaded application settings.
        llm: Chat model for the workers. Built from settings when omitted.
        supervisor_llm: Chat model for the supervisor. Defaults to the configured
            supervisor model, or to the workers' model.
        tools: (search_tool, location_tool). Built from settings when omitted.
    """
    if llm is None:
        llm = get_chat_model(settings)
    if supervisor_llm is None:
        supervisor_llm = get_chat_model(settings, settings.supervisor_model_name) if settings.supervisor_model_name else llm
    search_tool, location_tool = tools if tools is not None else default_tools(settings)

    workers = default_workers(search_tool, location_tool)
    supervisor = Supervisor(supervisor_llm, [spec.name for spec in workers])
    return build_supervisor_graph(supervisor, make_worker_nodes(workers, llm, settings.max_tool_rounds))


def build_single_agent_graph(
    settings: Settings,
    llm: Optional[BaseChatModel] = None,
    tools: Optional[Sequence[BaseTool]] = None,
):
    """Compile the single-agent workflow with both tools."""
    if llm is None:
        llm = get_chat_model(settings)
    return build_agent_graph(llm, list(tools) if tools is not None else default_tools(settings))
