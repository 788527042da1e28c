from typing import Any, Dict

from .base_tool import BaseTool
from ..core.runtime.context import ToolContext


class ExitLoopTool(BaseTool):
    """Lets a model inside a LoopAgent end the loop."""

    def __init__(self):
        super().__init__(
            name="exit_loop",
            description="Exits the loop. Call this function only when you are instructed to do so.",
        )

    async def run_async(self, args: Dict[str, Any], tool_context: ToolContext) -> Dict[str, Any]:
        tool_context.escalate()
        return {"success": True}
