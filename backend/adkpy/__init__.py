"""adkpy: tree-structured LLM agents with sequential, parallel and loop workflows."""

__version__ = "0.1.0"
