"""Adapters — bindings for the macOS tools that steps drive.

Public re-exports for convenient access.
"""

from setup_my_mac.adapters.macos import (
    enable_touch_id,
    ensure_defaults_bool,
    ensure_timezone,
    read_defaults_bool,
)

__all__ = [
    "enable_touch_id",
    "ensure_defaults_bool",
    "ensure_timezone",
    "read_defaults_bool",
]
