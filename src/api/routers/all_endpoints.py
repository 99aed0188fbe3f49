# File: api/routers/all_endpoints.py

from fastapi import APIRouter

from api.routers.admins import admins, auth
from api.routers.categories import categories
from api.routers.utility_routes import router as utility_router

# Main router
all_routers = APIRouter()

# Admin auth routes go first so /admins/login never reaches /admins/{admin_id}
all_routers.include_router(auth.router)
all_routers.include_router(admins.router)
all_routers.include_router(categories.router)
all_routers.include_router(utility_router)
