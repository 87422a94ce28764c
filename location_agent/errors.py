"""Errors raised while configuring or running the workflow."""

from typing import Any, Optional


class ConfigurationError(Exception):
    """Startup configuration is missing or invalid."""


class WorkflowError(Exception):
    """A run aborted. Carries the failing node and the last merged state."""

    def __init__(self, message: str, *, node: Optional[str] = None, state: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.node = node
        self.state = state


class RoutingContractViolation(WorkflowError):
    """The supervisor produced something outside the closed set of routes."""


class StepBudgetExceeded(WorkflowError):
    """The run did not reach FINISH within the configured number of node executions."""

    def __init__(self, budget: int, **kwargs: Any):
        super().__init__(f"Run did not finish within {budget} steps", **kwargs)
        self.budget = budget


class LLMInvocationError(WorkflowError):
    """The chat model call itself failed (auth, quota, timeout, ...)."""
