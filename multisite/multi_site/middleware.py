"""
Site Routing Middleware for multisite

Attaches the site matching the Host header to each request.
"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from multisite.multi_site.store import SiteStore


class SiteMiddleware(BaseHTTPMiddleware):
    """Middleware that attaches site context to each request."""

    def __init__(self, app, sites: SiteStore):
        super().__init__(app)
        self.sites = sites

    async def dispatch(self, request: Request, call_next):
        # Get domain from Host header
        host = request.headers.get("host", "localhost")

        # Attach to request state
        request.state.site = self.sites.find_for_host(host)

        return await call_next(request)
