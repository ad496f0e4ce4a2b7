from fastapi import APIRouter

from app.api.routers import maintenance, users, vehicles

api_router = APIRouter()

api_router.include_router(users.router)
api_router.include_router(vehicles.router)
api_router.include_router(maintenance.router)
