from abc import ABC, abstractmethod
from typing import Any, Dict, List
from pydantic import BaseModel, Field


class ToolSchema(BaseModel):
    name: str
    description: str
    # parameter name -> type name
    parameters: Dict[str, str]
    required: List[str] = Field(default_factory=list)

    def argument_errors(self, arguments: Dict[str, Any]) -> List[str]:
        """Problems with a keyword call against this schema; empty when the call is valid."""
        errors = [f"unknown parameter '{name}'" for name in arguments if name not in self.parameters]
        errors.extend(
            f"missing parameter '{name}'" for name in self.required if arguments.get(name) is None
        )
        return errors


class HubTool(ABC):
    """
    Base class for deterministic tools.
    Tools hold no I/O handles; callers own persistence.
    """
    def __init__(self):
        self.schema = self.define_schema()

    @abstractmethod
    def define_schema(self) -> ToolSchema:
        """Declares the keyword arguments run() accepts."""

    @abstractmethod
    def run(self, **kwargs) -> Dict[str, Any]:
        """Executes the tool logic; stateless given its inputs."""

    def invoke(self, **kwargs) -> Dict[str, Any]:
        """Check the arguments against the schema, then run the tool."""
        errors = self.schema.argument_errors(kwargs)
        if errors:
            raise TypeError(f"{self.schema.name}: {', '.join(errors)}")
        return self.run(**kwargs)
