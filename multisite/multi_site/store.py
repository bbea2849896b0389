"""
Site Store for multisite

Keeps the virtual sites, resolves host names to sites and keeps their
display order.
"""
from __future__ import annotations
import logging
import re
from dataclasses import asdict, dataclass
from threading import Lock
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from multisite.resourceful.errors import RecordInvalid

logger = logging.getLogger(__name__)


class SiteError(Exception):
    """Base class for site store errors."""


class DuplicateDomainError(SiteError, RecordInvalid):
    """Another site already answers to this domain."""

    def __init__(self, domain: str):
        self.domain = domain
        RecordInvalid.__init__(self, {"domain": f"{domain!r} is already taken"})


@dataclass
class Site:
    """A virtual site bound to a domain."""
    id: Optional[int]
    name: str
    domain: str
    base_domain: str = ""
    homepage_id: Optional[int] = None
    position: int = 0

    def matches(self, host: str) -> bool:
        """Does ``host`` (lower-cased, without port) belong to this site?"""
        if self.base_domain and host == self.base_domain.lower():
            return True
        try:
            return re.fullmatch(self.domain, host, re.IGNORECASE) is not None
        except re.error:
            return self.domain.lower() == host


class SiteParams(BaseModel):
    """Validated attributes of a site."""

    name: str = Field(..., min_length=1)
    domain: str = Field(..., min_length=1)
    base_domain: str = ""
    homepage_id: Optional[int] = None

    @field_validator("domain")
    @classmethod
    def domain_compiles(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"not a valid pattern: {e}")
        return value

    @field_validator("homepage_id", mode="before")
    @classmethod
    def blank_homepage(cls, value):
        return None if value in ("", None) else value


def _errors(error: ValidationError) -> Dict[str, str]:
    return {
        ".".join(str(part) for part in e["loc"]) or "site": e["msg"]
        for e in error.errors()
    }


def normalize_host(host: str) -> str:
    """Lower-case a Host header value and strip the port."""
    return host.lower().split(":")[0]


class SiteStore:
    """Loads and manages sites."""

    def __init__(self, sites: Iterable[Site] = ()):
        self._sites: Dict[int, Site] = {}
        self._lock = Lock()
        self._next_id = 1
        for site in sites:
            self.save(site)

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "SiteStore":
        """Build the store from the ``sites:`` list of the data file."""
        store = cls()
        # Records without a position keep file order, after positioned ones
        records = sorted(
            (dict(record) for record in records),
            key=lambda record: record.get("position") or float("inf")
        )
        for record in records:
            record.pop("position", None)
            site = Site(id=record.pop("id", None), **SiteParams(**record).model_dump())
            store.save(site)
        return store

    def all(self) -> List[Site]:
        """All sites in display order."""
        with self._lock:
            return self._ordered()

    def find(self, site_id) -> Optional[Site]:
        try:
            return self._sites.get(int(site_id))
        except (TypeError, ValueError):
            return None

    def find_for_host(self, host: str) -> Optional[Site]:
        """
        Site serving ``host``: an exact base domain first, then a domain
        pattern match, then the first site as the default.
        """
        host = normalize_host(host)
        sites = self.all()

        for site in sites:
            if site.base_domain and site.base_domain.lower() == host:
                return site
        for site in sites:
            if site.matches(host):
                return site

        if sites:
            logger.debug("No site for %r, using default %r", host, sites[0].name)
            return sites[0]
        return None

    def build(self, params: Dict[str, Any]) -> Site:
        """Unsaved site from submitted attributes."""
        return Site(
            id=None,
            name=params.get("name", "") or "",
            domain=params.get("domain", "") or "",
            base_domain=params.get("base_domain", "") or "",
            homepage_id=params.get("homepage_id") or None,
        )

    def _validate(self, site: Site) -> SiteParams:
        try:
            return SiteParams(
                name=site.name,
                domain=site.domain,
                base_domain=site.base_domain,
                homepage_id=site.homepage_id,
            )
        except ValidationError as e:
            raise RecordInvalid(_errors(e)) from e

    def save(self, site: Site) -> Site:
        """
        Insert or update ``site``.

        Raises ``RecordInvalid`` when the attributes do not validate and
        ``DuplicateDomainError`` when another site has the same domain.
        """
        params = self._validate(site)
        with self._lock:
            for other in self._sites.values():
                if other is site or other.id == site.id:
                    continue
                if other.domain.lower() == params.domain.lower():
                    raise DuplicateDomainError(params.domain)

            site.homepage_id = params.homepage_id
            if site.id is None:
                site.id = self._next_id
            self._next_id = max(self._next_id, site.id + 1)
            if site.id not in self._sites and not site.position:
                site.position = len(self._sites) + 1
            self._sites[site.id] = site
            self._renumber()
        return site

    def update(self, site: Site, params: Dict[str, Any]) -> Site:
        """Apply submitted attributes and save; the site is untouched on failure."""
        original = asdict(site)
        for name in ("name", "domain", "base_domain", "homepage_id"):
            if name in params:
                setattr(site, name, params[name])
        try:
            return self.save(site)
        except RecordInvalid:
            for name, value in original.items():
                setattr(site, name, value)
            raise

    def destroy(self, site: Site) -> bool:
        with self._lock:
            if self._sites.pop(site.id, None) is None:
                return False
            self._renumber()
        return True

    def move_higher(self, site: Site) -> None:
        self._move(site, lambda index, count: max(index - 1, 0))

    def move_lower(self, site: Site) -> None:
        self._move(site, lambda index, count: min(index + 1, count - 1))

    def move_to_top(self, site: Site) -> None:
        self._move(site, lambda index, count: 0)

    def move_to_bottom(self, site: Site) -> None:
        self._move(site, lambda index, count: count - 1)

    def _move(self, site: Site, target) -> None:
        with self._lock:
            ordered = self._ordered()
            index = next((i for i, s in enumerate(ordered) if s.id == site.id), None)
            if index is None:
                raise SiteError(f"Site {site.id} is not in the store")
            moved = ordered.pop(index)
            ordered.insert(target(index, len(ordered) + 1), moved)
            for position, s in enumerate(ordered, start=1):
                s.position = position

    def _ordered(self) -> List[Site]:
        """Sites by position. Called within lock."""
        return sorted(self._sites.values(), key=lambda s: (s.position, s.id))

    def _renumber(self) -> None:
        """Close gaps in positions. Called within lock."""
        for position, site in enumerate(self._ordered(), start=1):
            site.position = position

    def __len__(self) -> int:
        return len(self._sites)
