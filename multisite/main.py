"""
multisite - Main Application

A small CMS with virtual sites bound to domain names.
"""
import logging
from typing import Optional

from fastapi import FastAPI

from multisite.cms import CMS
from multisite.config import Settings, get_settings
from multisite.multi_site import MultiSiteExtension, SiteMiddleware

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, data: Optional[dict] = None) -> FastAPI:
    """Build the CMS, boot its extensions and wrap it in a FastAPI app."""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    cms = CMS(settings, data=data)
    cms.load_extension(MultiSiteExtension())
    cms.boot()

    app = FastAPI(
        title=settings.app_name,
        description="CMS with virtual sites bound to domain names",
        version=MultiSiteExtension.version,
        debug=settings.debug
    )
    app.state.cms = cms

    # Routes requests to sites
    if settings.multisite_enabled:
        app.add_middleware(SiteMiddleware, sites=cms.sites)

    app.include_router(cms.router)

    @app.on_event("shutdown")
    async def shutdown_event():
        """Deactivate extensions on shutdown."""
        cms.shutdown()

    return app


app = create_app()
