"""
Admin UI registry

Navigation tabs and the per-screen regions extensions can add partials to.
"""
from __future__ import annotations
import html
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

Partial = Callable[[dict], str]


@dataclass
class Tab:
    """An admin navigation tab."""
    name: str
    url: str
    visibility: List[str] = field(default_factory=lambda: ["all"])

    def shown_for(self, role: str) -> bool:
        return "all" in self.visibility or role in self.visibility


class TabSet:
    """Ordered admin tabs, unique by name."""

    def __init__(self):
        self._tabs: List[Tab] = []

    def add(self, name: str, url: str, visibility: Optional[List[str]] = None) -> Tab:
        if self.get(name) is not None:
            raise ValueError(f"Tab {name!r} already exists")
        tab = Tab(name=name, url=url, visibility=list(visibility or ["all"]))
        self._tabs.append(tab)
        return tab

    def remove(self, name: str) -> None:
        self._tabs = [tab for tab in self._tabs if tab.name != name]

    def get(self, name: str) -> Optional[Tab]:
        return next((tab for tab in self._tabs if tab.name == name), None)

    def visible_to(self, role: str) -> List[Tab]:
        return [tab for tab in self._tabs if tab.shown_for(role)]

    def __iter__(self) -> Iterator[Tab]:
        return iter(self._tabs)

    def __len__(self) -> int:
        return len(self._tabs)


class RegionSet:
    """Named regions of one admin screen, each an ordered list of partial names."""

    def __init__(self):
        self._regions: Dict[str, List[str]] = {}

    def add(self, region: str, partial: str) -> None:
        self._regions.setdefault(region, []).append(partial)

    def __getitem__(self, region: str) -> List[str]:
        return list(self._regions.get(region, []))


class ScreenRegions:
    """Regions for the screens of one admin controller."""

    def __init__(self):
        self.index = RegionSet()
        self.edit = RegionSet()


class AdminUI:
    """Everything extensions can add to the admin interface."""

    def __init__(self):
        self.tabs = TabSet()
        self.pages = ScreenRegions()
        self.partials: Dict[str, Partial] = {}
        self.tabs.add("Pages", "/admin/pages")

    def register_partial(self, name: str, render: Partial) -> None:
        self.partials[name] = render

    def render_region(self, regions: RegionSet, region: str, context: dict) -> str:
        rendered = []
        for name in regions[region]:
            partial = self.partials.get(name)
            if partial is None:
                logger.warning("Missing admin partial %r in region %r", name, region)
                continue
            rendered.append(partial(context))
        return "".join(rendered)

    def layout(self, title: str, body: str, role: str = "admin") -> str:
        nav = "".join(
            f'<li><a href="{html.escape(tab.url)}">{html.escape(tab.name)}</a></li>'
            for tab in self.tabs.visible_to(role)
        )
        return (
            f"<!DOCTYPE html><html><head><title>{html.escape(title)}</title></head>"
            f'<body><ul id="tabs">{nav}</ul><h1>{html.escape(title)}</h1>{body}</body></html>'
        )
