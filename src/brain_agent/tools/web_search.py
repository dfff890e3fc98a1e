"""Web search tool returning the results page as markdown."""

import logging

import httpx
from markdownify import markdownify

from brain_agent.conversation import Message, ToolCallRequest, require_string
from brain_agent.tools.base import Tool
from brain_agent.tools.descriptor import ToolDescriptor, ToolParameters, ToolProperty

logger = logging.getLogger(__name__)

DESCRIPTOR = ToolDescriptor(
    name="web_search",
    description=(
        "Perform web search for provided search_term and return response as markdown."
    ),
    parameters=ToolParameters(
        required=["search_term"],
        properties={
            "search_term": ToolProperty(
                type="string", description="term to search for web results"
            ),
        },
    ),
)


class WebSearchTool(Tool):
    """Fetches an HTML search results page and converts it to markdown.

    Attributes:
        search_url: Endpoint queried with ``?q=<search_term>``
        timeout: Request timeout in seconds
    """

    def __init__(self, search_url: str, timeout: float = 30.0) -> None:
        self.search_url = search_url
        self.timeout = timeout

    @property
    def descriptor(self) -> ToolDescriptor:
        return DESCRIPTOR

    async def run(self, call: ToolCallRequest) -> Message:
        term = require_string(call, "search_term")

        async with httpx.AsyncClient(
            timeout=self.timeout, follow_redirects=True
        ) as client:
            response = await client.get(self.search_url, params={"q": term})
            response.raise_for_status()

        markdown = markdownify(response.text).strip()
        logger.debug(f"web_search {term!r}: {len(markdown)} characters")
        return self.result(markdown)
