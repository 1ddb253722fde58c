from fastapi import APIRouter

from hallpass.api import auth, classes, devices, parents, points, system

api_router = APIRouter()
api_router.include_router(system.router)
api_router.include_router(auth.router)
api_router.include_router(classes.router)
api_router.include_router(points.router)
api_router.include_router(parents.router)
api_router.include_router(devices.router)
