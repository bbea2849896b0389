"""
CMS host

Holds the extendable host classes, loads extensions and wires the routes
the application serves.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from fastapi import APIRouter, Request

from multisite.cms.admin import AdminUI
from multisite.cms.cache import ResponseCache
from multisite.cms.config_store import ConfigStore
from multisite.cms.controllers import PagesController, SiteController
from multisite.cms.extension import Extension
from multisite.cms.pages import PageTree
from multisite.config import Settings

logger = logging.getLogger(__name__)


def load_data(path) -> Optional[dict]:
    """Load the YAML data file, None when it does not exist."""
    path = Path(path)
    if not path.exists():
        logger.info("No data file at %s", path)
        return None

    with open(path) as f:
        return yaml.safe_load(f) or {}


class CMS:
    """
    The host application extensions plug into.

    Host classes live in ``classes`` until ``boot()`` so that extensions
    can extend them with ``include()`` while activating.
    """

    default_classes = {
        "page_tree": PageTree,
        "site_controller": SiteController,
        "pages_controller": PagesController,
        "response_cache": ResponseCache,
    }

    def __init__(self, settings: Settings, data: Optional[dict] = None):
        self.settings = settings
        self.data = data if data is not None else load_data(settings.data_path)
        self.classes: Dict[str, type] = dict(self.default_classes)
        self.config = ConfigStore(
            (self.data.get("config") or {}) if self.data is not None else None
        )
        self.admin = AdminUI()
        self.router = APIRouter()
        self.extensions: List[Extension] = []
        self.pages: Optional[PageTree] = None
        self.response_cache: Optional[ResponseCache] = None
        self.booted = False

    def records(self, section: str) -> list:
        """Records of one section of the data file."""
        if self.data is None:
            return []
        return list(self.data.get(section) or [])

    def include(self, name: str, mixin: type) -> type:
        """Extend host class ``name`` with ``mixin``; its methods win."""
        if self.booted:
            raise RuntimeError(f"Cannot extend {name!r} after boot")
        base = self.classes[name]
        if issubclass(base, mixin):
            return base
        extended = type(base.__name__, (mixin, base), {})
        self.classes[name] = extended
        logger.debug("Extended %s with %s", base.__name__, mixin.__name__)
        return extended

    def load_extension(self, extension: Extension) -> None:
        self.extensions.append(extension)

    def boot(self) -> None:
        """Activate extensions, then build the host objects and routes."""
        for extension in self.extensions:
            extension.define_routes(self)
            extension.activate(self)
            logger.info("Activated %s %s", extension.name, extension.version)

        self.pages = self.classes["page_tree"].from_records(self.records("pages"))
        self.response_cache = self.classes["response_cache"](
            ttl_seconds=self.settings.cache_ttl_seconds
        )
        self._define_host_routes()
        self.booted = True

    def shutdown(self) -> None:
        for extension in reversed(self.extensions):
            extension.deactivate(self)
            logger.info("Deactivated %s", extension.name)

    def site_controller(self, request: Request) -> SiteController:
        return self.classes["site_controller"](self, request)

    def pages_controller(self, request: Request) -> PagesController:
        return self.classes["pages_controller"](self, request)

    def _define_host_routes(self) -> None:
        cms = self

        @self.router.get("/admin/pages", include_in_schema=False)
        async def admin_pages(request: Request):
            """Admin page tree."""
            return cms.pages_controller(request).index()

        @self.router.get("/{url:path}", include_in_schema=False)
        async def show_page(request: Request, url: str):
            """Serve a public page. Must stay the last route."""
            return cms.site_controller(request).show_page(url)
