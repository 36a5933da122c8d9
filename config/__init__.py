"""Configuration package for the answer analysis service."""
from .routes import AppConfig, LlmRoute, SpeechRoute, default_config, load_config
from .settings import Settings, settings

__all__ = [
    "AppConfig",
    "LlmRoute",
    "SpeechRoute",
    "default_config",
    "load_config",
    "Settings",
    "settings",
]
