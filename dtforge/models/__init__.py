from dtforge.models.build_script import BuildScript
from dtforge.models.device import DeviceConfig
from dtforge.models.repository import DeviceRepository

__all__ = [
    "BuildScript",
    "DeviceConfig",
    "DeviceRepository",
]
