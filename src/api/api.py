from api.endpoints import organize
from fastapi import APIRouter

api_router = APIRouter()
api_router.include_router(organize.router, prefix="/organize", tags=["Geotag and Cluster Photos"])
