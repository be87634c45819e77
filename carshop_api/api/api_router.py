from fastapi import APIRouter
from .routes import authentication_routes, cars_routes

api_router = APIRouter()

api_router.include_router(authentication_routes.router, prefix="/auth", tags=["Authentication & Users"])

api_router.include_router(cars_routes.router, prefix="/cars", tags=["Cars"])
