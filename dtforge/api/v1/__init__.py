from dtforge.api.v1 import build_scripts, github

__all__ = [
    "build_scripts",
    "github",
]
