from .session import AgentViewSession

__all__ = ["AgentViewSession"]
