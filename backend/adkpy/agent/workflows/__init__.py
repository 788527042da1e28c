"""
Composite workflow agents
"""

from .loop_agent import LoopAgent
from .parallel_agent import ParallelAgent
from .sequential_agent import SequentialAgent

__all__ = ["LoopAgent", "ParallelAgent", "SequentialAgent"]
