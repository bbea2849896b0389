"""Host CMS the extensions plug into."""
from multisite.cms.admin import AdminUI, Tab
from multisite.cms.cache import ResponseCache
from multisite.cms.config_store import ConfigStore
from multisite.cms.controllers import PagesController, SiteController
from multisite.cms.extension import Extension
from multisite.cms.host import CMS, load_data
from multisite.cms.pages import Page, PageTree

__all__ = [
    "AdminUI",
    "Tab",
    "ResponseCache",
    "ConfigStore",
    "PagesController",
    "SiteController",
    "Extension",
    "CMS",
    "load_data",
    "Page",
    "PageTree",
]
