"""Per-device identifier sent when a flow requests offline access."""

from __future__ import annotations

import platform
from typing import Protocol, runtime_checkable


@runtime_checkable
class DeviceIdProvider(Protocol):
    """Supplies a stable per-device string."""

    async def get_device_id(self) -> str: ...


class PlatformDeviceIdProvider:
    """Derive the device id from the host OS name and network node name."""

    async def get_device_id(self) -> str:
        return f"{platform.system() or 'unknown'} {platform.node() or 'unknown'}"


class StaticDeviceIdProvider:
    """Return a fixed, caller-chosen device id."""

    def __init__(self, device_id: str) -> None:
        self.device_id = device_id

    async def get_device_id(self) -> str:
        return self.device_id
