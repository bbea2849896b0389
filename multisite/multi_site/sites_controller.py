"""
Admin controller for sites

CRUD through the resourceful DSL plus the reordering member actions.
"""
from __future__ import annotations
import html
import logging

from multisite.resourceful import ResourcefulController

logger = logging.getLogger(__name__)

SITE_ATTRIBUTES = ["id", "name", "domain", "base_domain", "homepage_id", "position"]


class SitesController(ResourcefulController):
    """``/admin/sites``"""

    model_name = "site"

    def get_store(self):
        return self.request.app.state.cms.sites

    def _reorder(self, move) -> object:
        site = self.current_object()
        move(site)
        self.after("reorder")
        logger.info("Moved site %r to position %d", site.name, site.position)
        return self.response_for("reorder")

    def move_higher(self):
        return self._reorder(self.get_store().move_higher)

    def move_lower(self):
        return self._reorder(self.get_store().move_lower)

    def move_to_top(self):
        return self._reorder(self.get_store().move_to_top)

    def move_to_bottom(self):
        return self._reorder(self.get_store().move_to_bottom)

    def describe(self, site) -> str:
        return f"{site.name} ({site.domain})"


def expire_cached_pages(controller):
    """Host to site mapping changed; cached pages may belong elsewhere now."""
    controller.request.app.state.cms.response_cache.clear()


def log_change(controller):
    logger.info("Site %s: %s", controller.action_name, controller.current_object().name)


with SitesController.make_resourceful() as build:
    build.actions("all")
    build.after("create", "update", "destroy", "reorder", handler=expire_cached_pages)
    build.after("create", "update", "destroy", handler=log_change)
    build.publish("xml", "json", "yaml", attributes=SITE_ATTRIBUTES)

    @build.response_for("reorder").json
    def reordered_json(controller):
        return controller.render(json=controller.serialize(
            controller.current_objects(), "json", attributes=["id", "position"]
        ))


def site_subnav(context: dict) -> str:
    """Links scoping the admin page tree to each site."""
    sites = context["cms"].sites.all()
    links = "".join(
        f'<li><a href="/admin/pages?site={site.id}">{html.escape(site.name)}</a></li>'
        for site in sites
    )
    return f'<ul id="site_subnav">{links}</ul>'
