from fastapi import APIRouter

from dtforge.api.v1 import build_scripts, github

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(github.router)
api_router.include_router(build_scripts.router)
