from fastapi import APIRouter

from hygieneresto.api.routes.admin import router as admin_router
from hygieneresto.api.routes.admin_client import router as admin_client_router
from hygieneresto.api.routes.auth import router as auth_router
from hygieneresto.api.routes.employer import router as employer_router
from hygieneresto.api.routes.traceability import router as traceability_router
from hygieneresto.api.routes.users import router as users_router

api_router = APIRouter()

api_router.include_router(auth_router)
api_router.include_router(users_router)
api_router.include_router(admin_router)
api_router.include_router(admin_client_router)
api_router.include_router(employer_router)
api_router.include_router(traceability_router)
