"""
Multi-site extension

Enables virtual sites to be created with associated domain names, and scopes
the page tree to any given page (or the root of an individual site).
"""
from __future__ import annotations
import logging

from multisite.cms.extension import Extension
from multisite.multi_site.mixins import HostCacheKeys, PageScoping, PagesScoping, SiteResolution
from multisite.multi_site.sites_controller import SitesController, site_subnav
from multisite.multi_site.store import SiteStore
from multisite.resourceful import resources

logger = logging.getLogger(__name__)

SITE_MEMBER_ACTIONS = {
    "move_higher": "POST",
    "move_lower": "POST",
    "move_to_top": "PUT",
    "move_to_bottom": "PUT",
}


class MultiSiteExtension(Extension):
    """Virtual sites bound to domain names."""

    version = "0.3"
    description = (
        "Enables virtual sites to be created with associated domain names. "
        "Also scopes the sitemap view to any given page (or the root of an "
        "individual site)."
    )
    url = "https://github.com/radiant/radiant-multi-site-extension"

    def enabled(self, cms) -> bool:
        return cms.settings.multisite_enabled

    def define_routes(self, cms) -> None:
        if self.enabled(cms):
            resources(cms.router, "/admin/sites", SitesController, member=SITE_MEMBER_ACTIONS)

    def activate(self, cms) -> None:
        if not self.enabled(cms):
            logger.info("Multi-site disabled")
            return

        cms.sites = SiteStore.from_records(cms.records("sites"))

        cms.include("page_tree", PageScoping)
        cms.include("site_controller", SiteResolution)
        cms.include("pages_controller", PagesScoping)
        cms.include("response_cache", HostCacheKeys)

        if cms.config.table_exists():
            cms.config["dev.host"] = "preview"

        # Add site navigation
        cms.admin.register_partial("site_subnav", site_subnav)
        cms.admin.pages.index.add("top", "site_subnav")
        cms.admin.tabs.add("Sites", "/admin/sites", visibility=["admin"])
        logger.info("Multi-site enabled with %d sites", len(cms.sites))

    def deactivate(self, cms) -> None:
        cms.admin.tabs.remove("Sites")
