"""Configuration module for screenflow."""

from screenflow.config.settings import EngineSettings, ServerSettings

__all__ = ["EngineSettings", "ServerSettings"]
