"""
Multi-site behavior for the host classes

Each mixin is included into one host class by ``MultiSiteExtension.activate``
and overrides a single seam of it.
"""
from __future__ import annotations
import logging
from contextvars import ContextVar
from typing import Optional

from multisite.multi_site.store import Site, normalize_host

logger = logging.getLogger(__name__)

# Site the current request is being served for
current_site: ContextVar[Optional[Site]] = ContextVar("current_site", default=None)


class PageScoping:
    """Page tree: the root is the homepage of the current site."""

    def root(self):
        site = current_site.get()
        if site is not None and site.homepage_id is not None:
            homepage = self.get(site.homepage_id)
            if homepage is not None:
                return homepage
        return super().root()


class SiteResolution:
    """Site controller: serve pages from the tree of the site for the host."""

    def resolve_site(self) -> Optional[Site]:
        site = getattr(self.request.state, "site", None)
        if site is None:
            site = self.cms.sites.find_for_host(self.request.headers.get("host", ""))
        return site

    def show_page(self, url: str):
        site = self.resolve_site()
        logger.debug("Serving %r for site %r", url, site.name if site else None)
        token = current_site.set(site)
        try:
            return super().show_page(url)
        finally:
            current_site.reset(token)


class PagesScoping:
    """Admin pages index: rooted at ``?root=<page>`` or ``?site=<site>``."""

    def root_page(self):
        params = self.request.query_params

        if params.get("root"):
            page = self.cms.pages.get(params["root"])
            if page is not None:
                return page

        if params.get("site"):
            site = self.cms.sites.find(params["site"])
            if site is not None and site.homepage_id is not None:
                page = self.cms.pages.get(site.homepage_id)
                if page is not None:
                    return page

        return super().root_page()


class HostCacheKeys:
    """Response cache: the same path on two hosts is two entries."""

    def cache_key(self, request) -> str:
        host = normalize_host(request.headers.get("host", ""))
        return host + super().cache_key(request)
