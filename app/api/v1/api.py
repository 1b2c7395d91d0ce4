from fastapi import APIRouter
from app.api.v1.endpoints.catalog import brands, categories
from app.api.v1.endpoints.audit import audit_logs

api_router = APIRouter()

# Catalog routes
api_router.include_router(categories.router, prefix="/catalog/category", tags=["Catalog"])
api_router.include_router(brands.router, prefix="/catalog/brand", tags=["Catalog"])

# Audit routes
api_router.include_router(audit_logs.router, prefix="/audit/logs", tags=["Audit"])
