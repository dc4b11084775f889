from fastapi import APIRouter

from crr_pricer.api.endpoints import meta, pricing

api_router = APIRouter()

api_router.include_router(pricing.router, prefix="/v1/pricing", tags=["pricing"])
api_router.include_router(meta.router, prefix="/v1/meta", tags=["meta"])
