"""System step — timezone, Touch ID for sudo, trackpad preferences."""

from __future__ import annotations

from setup_my_mac.adapters.macos import enable_touch_id, ensure_defaults_bool, ensure_timezone
from setup_my_mac.core.engine.context import StepContext

SPARKLES = "✨"

# The built-in and Bluetooth trackpads keep separate preference domains.
TRACKPAD_DOMAINS = (
    "com.apple.AppleMultitouchTrackpad",
    "com.apple.driver.AppleBluetoothMultitouch.trackpad",
)


def run(ctx: StepContext) -> None:
    system = ctx.config.system

    if not system.has_tasks():
        ctx.status("No system settings configured, skipping")
        return

    if system.timezone is not None:
        ctx.info(f"{SPARKLES} Setting timezone to {system.timezone}")
        ensure_timezone(ctx.sudo, system.timezone)

    if system.touch_id_sudo:
        ctx.info(f"{SPARKLES} Enabling Touch ID for sudo")
        enable_touch_id(ctx.sudo)

    trackpad = system.trackpad
    if trackpad.clicking is not None:
        ctx.info(f"{SPARKLES} Trackpad clicking -> {_flag(trackpad.clicking)}")
        _ensure_trackpad_bool("Clicking", trackpad.clicking)

    if trackpad.three_finger_drag is not None:
        ctx.info(f"{SPARKLES} Trackpad three finger drag -> {_flag(trackpad.three_finger_drag)}")
        _ensure_trackpad_bool("TrackpadThreeFingerDrag", trackpad.three_finger_drag)


def _ensure_trackpad_bool(key: str, desired: bool) -> None:
    for domain in TRACKPAD_DOMAINS:
        ensure_defaults_bool(domain, key, desired)


def _flag(value: bool) -> str:
    return "true" if value else "false"
