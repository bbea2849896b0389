"""
CMS controllers

Public page serving and the admin page index.
"""
from __future__ import annotations
import html
import logging
from typing import TYPE_CHECKING, Optional

from fastapi import HTTPException
from fastapi.responses import HTMLResponse, JSONResponse, Response
from starlette.requests import Request

from multisite.cms.pages import Page
from multisite.resourceful.formats import Format, negotiate

if TYPE_CHECKING:
    from multisite.cms.host import CMS

logger = logging.getLogger(__name__)


class SiteController:
    """Serves published pages by URL, through the response cache."""

    def __init__(self, cms: "CMS", request: Request):
        self.cms = cms
        self.request = request

    def show_page(self, url: str) -> Response:
        cache = self.cms.response_cache
        cached = cache.get(self.request)
        if cached is not None:
            return Response(content=cached.body, media_type=cached.media_type)

        page = self.find_page(url)
        if page is None or not page.published:
            raise HTTPException(status_code=404, detail="Page not found")

        body = self.render_page(page)
        cache.store(self.request, body)
        return HTMLResponse(content=body)

    def find_page(self, url: str) -> Optional[Page]:
        return self.cms.pages.find_by_url(url)

    def render_page(self, page: Page) -> str:
        return (
            f"<!DOCTYPE html><html><head><title>{html.escape(page.title)}</title></head>"
            f"<body><h1>{html.escape(page.title)}</h1>{page.body}</body></html>"
        )


class PagesController:
    """Admin index of the page tree."""

    def __init__(self, cms: "CMS", request: Request):
        self.cms = cms
        self.request = request

    def root_page(self) -> Optional[Page]:
        return self.cms.pages.root()

    def index(self) -> Response:
        root = self.root_page()
        tree = self.cms.pages.tree(root) if root is not None else None

        if negotiate(self.request) is Format.JSON:
            return JSONResponse(content={"root": tree})

        context = {"cms": self.cms, "request": self.request, "root": root}
        top = self.cms.admin.render_region(self.cms.admin.pages.index, "top", context)
        body = top + (self._render_node(tree) if tree else "<p>No pages yet.</p>")
        return HTMLResponse(content=self.cms.admin.layout("Pages", body))

    def _render_node(self, node: dict) -> str:
        children = "".join(self._render_node(child) for child in node["children"])
        return (
            f'<ul><li data-id="{node["id"]}">{html.escape(node["title"])} '
            f"<small>{html.escape(node['url'])}</small>{children}</li></ul>"
        )
