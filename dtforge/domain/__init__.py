from dtforge.domain.build_script_operations import build_script_ops
from dtforge.domain.device_operations import device_ops
from dtforge.domain.repository_operations import device_repository_ops

__all__ = [
    "build_script_ops",
    "device_ops",
    "device_repository_ops",
]
