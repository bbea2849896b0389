"""Virtual sites bound to domain names."""
from multisite.multi_site.extension import MultiSiteExtension
from multisite.multi_site.middleware import SiteMiddleware
from multisite.multi_site.mixins import current_site
from multisite.multi_site.sites_controller import SitesController
from multisite.multi_site.store import DuplicateDomainError, Site, SiteError, SiteStore

__all__ = [
    "MultiSiteExtension",
    "SiteMiddleware",
    "current_site",
    "SitesController",
    "DuplicateDomainError",
    "Site",
    "SiteError",
    "SiteStore",
]
