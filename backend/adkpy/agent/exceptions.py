"""
Custom exceptions for agent construction, resolution and execution
"""

from typing import Optional


class AgentError(Exception):
    """Base exception for all agent runtime errors."""
    pass


class AgentTreeError(AgentError):
    """Base exception for invalid agent construction or tree mutation."""

    def __init__(self, message: str, agent_name: Optional[str] = None, parent_name: Optional[str] = None):
        super().__init__(message)
        self.agent_name = agent_name
        self.parent_name = parent_name


class InvalidAgentNameError(AgentTreeError):
    """Agent name is not a valid identifier."""
    pass


class ReservedAgentNameError(AgentTreeError):
    """Agent name collides with the name reserved for end-user input."""
    pass


class AlreadyParentedError(AgentTreeError):
    """Agent already has a parent; an agent can only be attached once."""
    pass


class DuplicateSiblingNameError(AgentTreeError):
    """Parent already has a sub-agent with the same name."""
    pass


class UnresolvedModelError(AgentError):
    """No registered provider pattern matches the model identifier."""

    def __init__(self, model: str):
        super().__init__(f"No LLM found for model: {model}")
        self.model = model


class CredentialRefreshError(AgentError):
    """Token refresh attempted on a credential that cannot refresh."""
    pass
