# Services package

from dtforge.services.build_script import BuildScriptOptions, render_build_script
from dtforge.services.device_upload import upload_device_repositories

__all__ = [
    "BuildScriptOptions",
    "render_build_script",
    "upload_device_repositories",
]
