"""
Extension base class

An extension is a loadable unit that adds routes and alters host classes
when the CMS boots.
"""
from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from multisite.cms.host import CMS


class Extension:
    """Base class for CMS extensions."""

    version = "0.0"
    description = ""
    url = ""

    @property
    def name(self) -> str:
        return type(self).__name__

    def define_routes(self, cms: "CMS") -> None:
        """Add routes to ``cms.router``. Runs before ``activate``."""

    def activate(self, cms: "CMS") -> None:
        """Extend host classes and register admin UI entries."""

    def deactivate(self, cms: "CMS") -> None:
        """Undo what can be undone of ``activate``."""
