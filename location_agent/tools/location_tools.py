import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from langchain_core.tools import BaseTool, StructuredTool
from pydantic import BaseModel, Field, field_validator

from location_agent.config import Settings


logger = logging.getLogger(__name__)


class LocationQuery(BaseModel):
    """Arguments for the location info tool."""

    location_id: str = Field(description="Location id to search the trip advisor api")

    @field_validator("location_id")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("location_id must be a non-empty TripAdvisor location id")
        return value


def make_location_tool(settings: Settings, client: Optional[httpx.AsyncClient] = None) -> BaseTool:
    """Build the TripAdvisor location tool, bound to the given settings.

    Args:
        settings: Loaded application settings (API key, base URL, user agent).
        client: Optional shared httpx client. A short-lived one is created per call otherwise.

    Returns:
        An async-only tool returning the location payload, or {} when the API gave nothing usable.
    """
    headers = {
        "X-TripAdvisor-API-Key": settings.tripadvisor_api_key,
        "User-Agent": settings.tripadvisor_user_agent,
    }
    base_url = settings.tripadvisor_base_url.rstrip("/")

    async def _get(url: str) -> httpx.Response:
        if client is not None:
            return await client.get(url, headers=headers)
        async with httpx.AsyncClient(timeout=settings.http_timeout) as session:
            return await session.get(url, headers=headers)

    async def get_location_info(location_id: str) -> Dict[str, Any]:
        url = f"{base_url}/{quote(location_id, safe='')}"
        logger.info("Fetching location info for %s", location_id)
        try:
            response = await _get(url)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            logger.warning("TripAdvisor request for location %s failed: %s", location_id, e)
        except ValueError as e:
            # The body was not JSON.
            logger.warning("TripAdvisor returned an unreadable body for location %s: %s", location_id, e)
        return {}

    return StructuredTool.from_function(
        coroutine=get_location_info,
        name="get_location_info",
        description=(
            "Call the tripadvisor api to get location info including address, location ratings, "
            "user reviews, awards, location name, user rating count."
        ),
        args_schema=LocationQuery,
    )
