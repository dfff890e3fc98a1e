"""Uniform tool descriptor schema shown to the model backend.

Local tools and tools discovered from MCP servers are all normalized into
a ToolDescriptor before they are offered to the model.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from brain_agent.errors import SchemaViolationError


class ToolProperty(BaseModel):
    """Schema of a single tool parameter."""

    type: str = Field(description="JSON schema type of the parameter")
    description: str = Field(default="", description="Shown to the model")
    enum: list[str] = Field(
        default_factory=list, description="Allowed values, empty if unrestricted"
    )


class ToolParameters(BaseModel):
    """JSON-schema-like object describing a tool's arguments."""

    type: str = "object"
    required: list[str] = Field(default_factory=list)
    properties: dict[str, ToolProperty] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_required(self) -> "ToolParameters":
        missing = [name for name in self.required if name not in self.properties]
        if missing:
            raise SchemaViolationError(
                f"required parameters {missing} are not declared in properties"
            )
        return self


class ToolDescriptor(BaseModel):
    """Name, description and parameter schema of one tool."""

    name: str
    description: str = ""
    parameters: ToolParameters = Field(default_factory=ToolParameters)

    def to_ollama(self) -> dict[str, Any]:
        """Render the descriptor in the shape Ollama expects for ``tools``."""
        properties: dict[str, Any] = {}
        for name, prop in self.parameters.properties.items():
            entry: dict[str, Any] = {"type": prop.type, "description": prop.description}
            if prop.enum:
                entry["enum"] = list(prop.enum)
            properties[name] = entry

        parameters: dict[str, Any] = {
            "type": self.parameters.type,
            "properties": properties,
        }
        if self.parameters.required:
            parameters["required"] = list(self.parameters.required)

        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": parameters,
            },
        }
