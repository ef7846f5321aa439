"""API routes for ProviderHub."""

from providerhub.infrastructure.api.routes.providers_router import router as providers_router

__all__ = ["providers_router"]
