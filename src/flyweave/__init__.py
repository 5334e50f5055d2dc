"""flyweave — build-time AOP proxy compilation for service containers."""

__version__ = "0.1.0"
