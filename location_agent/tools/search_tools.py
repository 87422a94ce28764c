import logging
from typing import Any, Dict, List, Optional

from langchain_core.tools import BaseTool, StructuredTool
from pydantic import BaseModel, Field, field_validator
from tavily import AsyncTavilyClient
from tavily.errors import MissingAPIKeyError

from location_agent.config import Settings
from location_agent.errors import ConfigurationError


logger = logging.getLogger(__name__)

NO_RESULTS = "No valid search results found."


class SearchQuery(BaseModel):
    """Arguments for the web search tool."""

    query: str = Field(description="A single, specific search query to execute.")

    @field_validator("query")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("query must not be empty")
        return value


def deduplicate_search_results(search_results: List[dict]) -> Dict[str, dict]:
    """Deduplicates a list of search responses based on the URL."""
    unique_results = {}

    for response in search_results:
        for result in response.get("results", []):
            url = result.get("url")

            # We use the URL as a key in a dictionary to automatically handle duplicates.
            if url and url not in unique_results:
                unique_results[url] = result
    return unique_results


def format_search_output(unique_results: Dict[str, dict]) -> str:
    """Formats the search results into a clean string for the agent."""
    if not unique_results:
        return NO_RESULTS

    formatted_output = "Search results: \n\n"
    for i, (url, result) in enumerate(unique_results.items(), 1):
        formatted_output += f"\n\n--- SOURCE {i}: {result.get('title', url)} ---\n"
        formatted_output += f"URL: {url}\n\n"
        formatted_output += f"SUMMARY:\n{result.get('content', '')}\n\n"
        formatted_output += "-" * 80 + "\n"
    return formatted_output


def make_search_tool(settings: Settings, client: Optional[Any] = None) -> BaseTool:
    """Build the Tavily web search tool.

    The client is created here, at startup, so a missing Tavily key fails before any run.
    """
    if client is None:
        try:
            client = AsyncTavilyClient(api_key=settings.tavily_api_key)
        except MissingAPIKeyError as exc:
            raise ConfigurationError("TAVILY_API_KEY is required for web search") from exc
    tavily_client = client

    async def web_search(query: str) -> str:
        logger.info("Executing Tavily search for query: %s", query)
        try:
            response = await tavily_client.search(query, max_results=settings.search_max_results)
        except Exception as e:
            # Tavily raises its own error types on top of transport errors; all of them mean "no results".
            logger.warning("Tavily search for %r failed: %s", query, e)
            return NO_RESULTS

        return format_search_output(deduplicate_search_results([response]))

    return StructuredTool.from_function(
        coroutine=web_search,
        name="web_search",
        description="Search the web for up-to-date information. Returns titled snippets with their source URLs.",
        args_schema=SearchQuery,
    )
