from dtforge.schemas.build_script import BuildScriptRead, GenerateScriptRequest
from dtforge.schemas.upload import (
    DeviceSummary,
    RepositoryUploadResult,
    UploadRequest,
    UploadResponse,
)

__all__ = [
    "BuildScriptRead",
    "DeviceSummary",
    "GenerateScriptRequest",
    "RepositoryUploadResult",
    "UploadRequest",
    "UploadResponse",
]
