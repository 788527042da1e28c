"""
Mock Google search tool

Returns canned results shaped like a search API response. Useful for wiring
and tests; replace with a real search backend in production.
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from .base_tool import BaseTool
from ..core.runtime.context import ToolContext

logger = logging.getLogger(__name__)


class GoogleSearchTool(BaseTool):
	"""Search the web using Google (mock results)."""

	def __init__(self):
		super().__init__(
			name="google_search",
			description="Search the web using Google",
			parameters={
				"type": "object",
				"properties": {
					"query": {
						"type": "string",
						"description": "The search query to execute"
					},
					"num_results": {
						"type": "integer",
						"description": "Number of results to return (max 10)",
						"default": 5
					}
				},
				"required": ["query"]
			},
		)

	async def run_async(self, args: Dict[str, Any], tool_context: ToolContext) -> Dict[str, Any]:
		query = str(args.get("query") or "").strip()
		if not query:
			raise ValueError("query is required")
		num_results = max(1, min(int(args.get("num_results") or 5), 10))
		logger.info(f"Executing Google search for: {query}")

		results = [
			{
				"title": f"Result {i} for {query}",
				"link": f"https://example.com/{i}",
				"snippet": f'Sample result {i} for the query "{query}".',
			}
			for i in range(1, min(num_results, 2) + 1)
		]
		return {"results": results}
