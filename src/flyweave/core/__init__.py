"""flyweave core — configuration."""

from flyweave.core.config import Config, config_properties

__all__ = ["Config", "config_properties"]
