import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from gcloud_mcp.logger import logger


class BaseTool(ABC, BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    title: Optional[str] = None
    description: str
    parameters: Optional[dict] = None

    async def __call__(self, **kwargs) -> Any:
        """Execute the tool with given parameters and log how long it took."""
        start_time = time.time()
        try:
            result = await self.execute(**kwargs)
        except Exception as e:
            logger.warning(
                f"Tool {self.name} raised after {time.time() - start_time:.3f}s: {e}"
            )
            raise
        logger.debug(f"Tool {self.name} finished in {time.time() - start_time:.3f}s")
        return result

    @abstractmethod
    async def execute(self, **kwargs) -> Any:
        """Execute the tool with given parameters."""

    def to_param(self) -> Dict:
        """Convert tool to function call format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


class ToolResult(BaseModel):
    """Represents the result of a tool execution."""

    output: Any = Field(default=None)
    error: Optional[str] = Field(default=None)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def __str__(self):
        return f"Error: {self.error}" if self.error else str(self.output)


class CLIResult(ToolResult):
    """A ToolResult that can be rendered as a CLI output."""


class ToolFailure(ToolResult):
    """A ToolResult that represents a failure."""
