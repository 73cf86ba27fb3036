from fastapi import APIRouter, Depends
from typing import Dict, Any

from ..services import Services
from .deps import get_services

router = APIRouter()


@router.get("/healthz")
async def health_check(services: Services = Depends(get_services)) -> Dict[str, Any]:
    """Upstream reachability and cache sizes. Always answers 200."""

    provider_status = {
        services.token_provider.name: await services.token_provider.health_check(),
        services.logo_provider.name: await services.logo_provider.health_check(),
    }

    catalog_ok = provider_status[services.token_provider.name]["status"] == "healthy"

    return {
        "status": "healthy" if catalog_ok else "degraded",
        "providers": provider_status,
        "response_cache_entries": services.cache.size(),
        "stored_logos": await services.logo_store.size(),
    }
