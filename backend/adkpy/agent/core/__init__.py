"""Core runtime for agents.

Provider-agnostic primitives: message and request models, invocation
contexts, the LLM adapter contract with its registry, and auth objects.
"""
