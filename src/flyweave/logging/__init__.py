"""flyweave logging — hexagonal logging port and adapters."""

from flyweave.logging.port import LoggingPort
from flyweave.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter"]
