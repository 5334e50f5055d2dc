"""Unified exception hierarchy for flyweave.

All framework exceptions inherit from FlyweaveException, enabling unified
error handling across modules.

Categories:
- InfrastructureException: cache, filesystem and container failures
- ConfigurationException: invalid or incomplete build configuration (fatal)
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class FlyweaveException(Exception):
    """Base exception for all flyweave errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "AOP_POINTCUT_TAG").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(FlyweaveException):
    """Infrastructure failures: cache backends, filesystem, container."""


class ConfigurationException(InfrastructureException):
    """The build is misconfigured and cannot continue."""
