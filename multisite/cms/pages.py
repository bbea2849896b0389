"""
Page Tree

Content pages of the CMS, addressed by slug path from the root page.
"""
from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Optional


@dataclass
class Page:
    """A content page."""
    id: int
    title: str
    slug: str
    parent_id: Optional[int] = None
    body: str = ""
    status: str = "published"

    @property
    def published(self) -> bool:
        return self.status == "published"


class PageTree:
    """In-memory page tree."""

    def __init__(self, pages: Iterable[Page] = ()):
        self._pages: Dict[int, Page] = {}
        for page in pages:
            self.add(page)

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "PageTree":
        """Build a tree from the ``pages:`` list of the data file."""
        return cls(Page(**record) for record in records)

    def add(self, page: Page) -> Page:
        self._pages[page.id] = page
        return page

    def get(self, page_id) -> Optional[Page]:
        try:
            return self._pages.get(int(page_id))
        except (TypeError, ValueError):
            return None

    def children(self, page: Page) -> List[Page]:
        return sorted(
            (p for p in self._pages.values() if p.parent_id == page.id),
            key=lambda p: p.id
        )

    def root(self) -> Optional[Page]:
        """The page every URL is resolved from."""
        roots = sorted(
            (p for p in self._pages.values() if p.parent_id is None),
            key=lambda p: p.id
        )
        return roots[0] if roots else None

    def find_by_url(self, url: str) -> Optional[Page]:
        page = self.root()
        if page is None:
            return None
        for slug in (part for part in url.strip("/").split("/") if part):
            page = next((child for child in self.children(page) if child.slug == slug), None)
            if page is None:
                return None
        return page

    def url_for(self, page: Page) -> str:
        """Path of ``page`` relative to ``root()``."""
        root = self.root()
        parts = []
        current = page
        while current is not None and current.parent_id is not None:
            if root is not None and current.id == root.id:
                break
            parts.append(current.slug)
            current = self.get(current.parent_id)
        return "/" + "/".join(reversed(parts))

    def tree(self, page: Page) -> dict:
        """Nested description of ``page`` and its descendants."""
        node = asdict(page)
        node["url"] = self.url_for(page)
        node["children"] = [self.tree(child) for child in self.children(page)]
        return node

    def __len__(self) -> int:
        return len(self._pages)
