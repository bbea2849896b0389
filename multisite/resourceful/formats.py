"""
Response formats for resourceful controllers

Closed set of formats a controller can respond with, the selector used to
register per-format handlers, and serialization of records.
"""
from __future__ import annotations
import json
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Sequence
from xml.etree import ElementTree

import yaml
from starlette.requests import Request

from multisite.resourceful.errors import ConfigurationError


class Format(str, Enum):
    """A response format a controller may register a handler for."""

    HTML = "html"
    JS = "js"
    JSON = "json"
    XML = "xml"
    YAML = "yaml"
    TXT = "txt"
    PNG = "png"

    @property
    def media_type(self) -> str:
        return MEDIA_TYPES[self]

    @property
    def render_key(self) -> str:
        """Keyword used with ``render()`` to emit a payload of this format."""
        return RENDER_KEYS.get(self, self.value)

    @classmethod
    def coerce(cls, value) -> "Format":
        """Turn a name into a ``Format``, failing for unsupported ones."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigurationError(f"Unknown response format: {value!r}") from None


MEDIA_TYPES = {
    Format.HTML: "text/html",
    Format.JS: "text/javascript",
    Format.JSON: "application/json",
    Format.XML: "application/xml",
    Format.YAML: "application/x-yaml",
    Format.TXT: "text/plain",
    Format.PNG: "image/png",
}

# YAML has no dedicated render primitive and goes out as text
RENDER_KEYS = {
    Format.YAML: "text",
    Format.TXT: "text",
}

DEFAULT_FORMAT = Format.HTML

Handler = Callable[[Any], Any]


class FormatSelector:
    """
    Registers ``(format, handler)`` pairs for a group of actions.

    Every format is reachable as an attribute::

        f = builder.response_for("create")
        f.html(redirect_home)
        f.json(lambda c: c.render(json=c.current_object().name))

    or as a decorator::

        @f.xml
        def created_xml(controller):
            ...
    """

    def __init__(self, register: Callable[[Format, Handler], None]):
        self._register = register

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)
        fmt = Format.coerce(name)

        def add(handler: Handler) -> Handler:
            self._register(fmt, handler)
            return handler

        add.__name__ = fmt.value
        return add


def _record(obj: Any, attributes: Sequence[str]) -> dict:
    """Pick ``attributes`` off a record, a mapping or a dataclass."""
    if isinstance(obj, dict):
        return {name: obj.get(name) for name in attributes}
    return {name: getattr(obj, name, None) for name in attributes}


def _root_name(target: Any, root: Optional[str]) -> str:
    if root:
        return root
    return type(target).__name__.lower()


def _xml_element(tag: str, record: dict) -> ElementTree.Element:
    element = ElementTree.Element(tag)
    for name, value in record.items():
        child = ElementTree.SubElement(element, name.replace("_", "-"))
        if value is None:
            child.set("nil", "true")
        else:
            child.text = str(value)
    return element


def serialize(
    target: Any,
    fmt,
    attributes: Iterable[str],
    root: Optional[str] = None
) -> str:
    """
    Serialize a record, or a list of records, restricted to ``attributes``.

    ``root`` names the XML element of a single record; a list is wrapped in
    the plural of it.
    """
    fmt = Format.coerce(fmt)
    attributes = list(attributes)
    many = isinstance(target, (list, tuple))

    if many:
        data: Any = [_record(item, attributes) for item in target]
    else:
        data = _record(target, attributes)

    if fmt is Format.JSON:
        return json.dumps(data)
    if fmt is Format.YAML:
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    if fmt is Format.XML:
        if many:
            item_tag = _root_name(target[0], root) if target else (root or "record")
            element = ElementTree.Element(item_tag + "s")
            element.set("type", "array")
            for record in data:
                element.append(_xml_element(item_tag, record))
        else:
            element = _xml_element(_root_name(target, root), data)
        return ElementTree.tostring(element, encoding="unicode")

    raise ConfigurationError(f"Cannot serialize to {fmt.value}")


def _accepted(accept: str) -> List[Format]:
    """Formats named by an Accept header, in the order given."""
    by_media_type = {media_type: fmt for fmt, media_type in MEDIA_TYPES.items()}
    by_media_type["text/xml"] = Format.XML
    by_media_type["text/yaml"] = Format.YAML
    by_media_type["application/javascript"] = Format.JS

    formats = []
    for part in accept.split(","):
        media_type = part.split(";")[0].strip().lower()
        if media_type in by_media_type:
            formats.append(by_media_type[media_type])
    return formats


def negotiate(request: Request) -> Optional[Format]:
    """
    Work out the format a request asks for.

    Looks at a ``format`` path parameter (``/sites/1.json``), the ``format``
    query parameter, then the Accept header. Returns ``None`` for a format
    name outside the supported set.
    """
    name = request.path_params.get("format") or request.query_params.get("format")
    if name:
        try:
            return Format(name.lower())
        except ValueError:
            return None

    accepted = _accepted(request.headers.get("accept", ""))
    if accepted:
        return accepted[0]
    return DEFAULT_FORMAT
