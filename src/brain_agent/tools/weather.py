"""Weather lookup tool backed by a wttr.in style service."""

import logging
from urllib.parse import quote

import httpx

from brain_agent.conversation import (
    Message,
    ToolCallRequest,
    optional_string,
    require_string,
)
from brain_agent.tools.base import Tool
from brain_agent.tools.descriptor import ToolDescriptor, ToolParameters, ToolProperty

logger = logging.getLogger(__name__)

UNITS = ["celsius", "fahrenheit"]

DESCRIPTOR = ToolDescriptor(
    name="get_weather",
    description="Get the current weather for a location as a one-line report.",
    parameters=ToolParameters(
        required=["location"],
        properties={
            "location": ToolProperty(
                type="string", description="city or place to get the weather for"
            ),
            "unit": ToolProperty(
                type="string",
                description="temperature unit, defaults to celsius",
                enum=UNITS,
            ),
        },
    ),
)


class WeatherTool(Tool):
    def __init__(self, base_url: str, timeout: float = 30.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def descriptor(self) -> ToolDescriptor:
        return DESCRIPTOR

    async def run(self, call: ToolCallRequest) -> Message:
        location = require_string(call, "location")
        unit = optional_string(call, "unit", "celsius", choices=UNITS)

        # wttr.in: "m" for metric, "u" for USCS units
        params = {"format": "3", "m" if unit == "celsius" else "u": ""}
        url = f"{self.base_url}/{quote(location)}"

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(url, params=params)
            response.raise_for_status()

        logger.debug(f"get_weather {location!r}: {response.text.strip()}")
        return self.result(response.text.strip())
