"""
Domain models — Pydantic types for the bootstrap configuration.

All models are re-exported here for convenient access:

    from setup_my_mac.core.models import Config, GitConfig, DotfileEntry
"""

from setup_my_mac.core.models.config import (
    Config,
    DotfileEntry,
    GitConfig,
    GitInit,
    GitMerge,
    GitPull,
    GitPush,
    HomebrewConfig,
    SshConfig,
    SystemConfig,
    TrackpadConfig,
    UserConfig,
)

__all__ = [
    "Config",
    "DotfileEntry",
    "GitConfig",
    "GitInit",
    "GitMerge",
    "GitPull",
    "GitPush",
    "HomebrewConfig",
    "SshConfig",
    "SystemConfig",
    "TrackpadConfig",
    "UserConfig",
]
