"""
Resourceful Controller

Request-scoped controller whose actions, callbacks and responses are
declared with the ``Builder`` DSL. One instance handles one request.
"""
from __future__ import annotations
import html
import logging
from contextlib import contextmanager
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Optional

from fastapi import HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from starlette.requests import Request

from multisite.resourceful.builder import ACTIONS, Builder
from multisite.resourceful.errors import RecordInvalid
from multisite.resourceful.formats import Format, negotiate, serialize

logger = logging.getLogger(__name__)

RENDER_MEDIA_TYPES = {
    "html": "text/html",
    "text": "text/plain",
    "json": "application/json",
    "xml": "application/xml",
    "js": "text/javascript",
    "png": "image/png",
}


class ResourcefulController:
    """
    Base class for controllers configured with ``make_resourceful``.

    Subclasses provide ``get_store()``; the store needs ``all()``,
    ``find(id)``, ``build(params)``, ``save(obj)``, ``update(obj, params)``
    and ``destroy(obj)``. Anything else (callbacks, per-format responses)
    is declared through the builder.
    """

    plural = True
    model_name = "record"

    # Extra routable methods, name -> HTTP method
    member_actions: Dict[str, str] = {}

    enabled_actions = frozenset()
    hidden_actions = ACTIONS
    before_filters: tuple = ()
    resourceful_callbacks = MappingProxyType({"before": MappingProxyType({}), "after": MappingProxyType({})})
    resourceful_responses = MappingProxyType({})
    resourceful_parents: tuple = ()

    def __init__(
        self,
        request: Request,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
        prefix: str = ""
    ):
        self.request = request
        self.params = dict(params or {})
        self.body = dict(body or {})
        self.prefix = prefix
        self.action_name: Optional[str] = None
        self.format: Optional[Format] = None
        self.object: Any = None
        self.objects: Optional[List[Any]] = None
        self.errors: Dict[str, str] = {}
        self.parent_objects: Dict[str, Any] = {}

    @classmethod
    @contextmanager
    def make_resourceful(cls) -> Iterator[Builder]:
        """Configure the controller; the builder is applied on exit."""
        builder = Builder(cls)
        yield builder
        builder.apply()

    # Dispatch

    def dispatch(self, action: str):
        """Run ``action`` after the before-filters."""
        if action not in self.enabled_actions and action not in self.member_actions:
            raise HTTPException(status_code=404, detail=f"No action {action!r}")
        self.action_name = action
        for before_filter in self.before_filters:
            before_filter(self)
        return getattr(self, action)()

    def before(self, action: str) -> None:
        for callback in self.resourceful_callbacks["before"].get(action, ()):
            callback(self)

    def after(self, action: str) -> None:
        for callback in self.resourceful_callbacks["after"].get(action, ()):
            callback(self)

    def response_for(self, action: str):
        """
        Answer ``action`` in the requested format.

        The first handler registered for that format runs with this
        controller as its argument. A handler returning ``None``, or html
        with no handler at all, gets the default response.
        """
        self.format = negotiate(self.request)
        for fmt, handler in self.resourceful_responses.get(action, ()):
            if fmt is self.format:
                response = handler(self)
                if response is not None:
                    return response
                return self.default_response(action)

        if self.format is Format.HTML:
            return self.default_response(action)
        logger.debug("No %s response for %s#%s", self.format, type(self).__name__, action)
        raise HTTPException(status_code=406, detail=f"Cannot respond to {action} in that format")

    # Records

    def get_store(self):
        raise NotImplementedError(f"{type(self).__name__} must provide get_store()")

    def plural_action(self) -> bool:
        return self.action_name == "index"

    def current_objects(self) -> List[Any]:
        if self.objects is None:
            self.objects = list(self.get_store().all())
        return self.objects

    def load_objects(self) -> None:
        self.current_objects()

    def current_object(self):
        if self.object is None:
            self.object = self.get_store().find(self.params.get("id"))
            if self.object is None:
                raise HTTPException(status_code=404, detail=f"{self.model_name} not found")
        return self.object

    def load_object(self) -> None:
        self.current_object()

    def object_parameters(self) -> Dict[str, Any]:
        """Submitted attributes, nested under ``model_name`` or flat."""
        nested = self.body.get(self.model_name)
        if isinstance(nested, dict):
            return nested
        return {k: v for k, v in self.body.items() if k not in ("id", "format")}

    def build_object(self) -> None:
        self.object = self.get_store().build(self.object_parameters())

    def save_object(self) -> bool:
        try:
            self.get_store().save(self.current_object())
        except RecordInvalid as e:
            self.errors = e.errors
            return False
        return True

    def update_object(self) -> bool:
        try:
            self.get_store().update(self.current_object(), self.object_parameters())
        except RecordInvalid as e:
            self.errors = e.errors
            return False
        return True

    def destroy_object(self) -> bool:
        return bool(self.get_store().destroy(self.current_object()))

    def load_parent_objects(self) -> None:
        for parent in self.resourceful_parents:
            parent_id = self.params.get(f"{parent}_id")
            if parent_id is None:
                continue
            found = self.find_parent(parent, parent_id)
            if found is None:
                raise HTTPException(status_code=404, detail=f"{parent} not found")
            self.parent_objects[parent] = found

    def find_parent(self, name: str, parent_id):
        raise NotImplementedError(f"{type(self).__name__} cannot load parent {name!r}")

    # Rendering primitives

    def serialize(self, target, fmt, **options) -> str:
        options.setdefault("root", self.model_name)
        return serialize(target, fmt, **options)

    def render(self, status_code: int = 200, **payload) -> Response:
        """Render one payload, e.g. ``render(json=body)`` or ``render(text=body)``."""
        if len(payload) != 1:
            raise TypeError("render() takes exactly one payload keyword")
        key, content = next(iter(payload.items()))
        if self.format is not None and self.format.render_key == key:
            media_type = self.format.media_type
        else:
            media_type = RENDER_MEDIA_TYPES[key]
        return Response(content=content, media_type=media_type, status_code=status_code)

    def redirect_to(self, url: str, status_code: int = 303) -> Response:
        return RedirectResponse(url=url, status_code=status_code)

    def collection_url(self) -> str:
        return self.prefix or "/"

    def object_url(self, obj=None) -> str:
        obj = obj if obj is not None else self.current_object()
        return f"{self.prefix}/{obj.id}"

    def describe(self, obj) -> str:
        return str(getattr(obj, "name", None) or obj)

    # Default html responses

    def default_response(self, action: str) -> Response:
        if action == "index":
            items = "".join(
                f'<li><a href="{html.escape(self.object_url(obj))}">'
                f"{html.escape(self.describe(obj))}</a></li>"
                for obj in self.current_objects()
            )
            return self._page(f"{self.model_name.title()}s", f"<ul>{items}</ul>")
        if action in ("show", "edit", "new"):
            return self._page(f"{action.title()} {self.model_name}", self._fields())
        if action in ("create", "update"):
            return self.redirect_to(self.object_url())
        if action == "create_fails":
            return self._page(f"New {self.model_name}", self._fields(), status_code=422)
        if action == "update_fails":
            return self._page(f"Edit {self.model_name}", self._fields(), status_code=422)
        if action == "destroy_fails":
            return self.redirect_to(self.object_url())
        return self.redirect_to(self.collection_url())

    def _fields(self) -> str:
        obj = self.object
        values = vars(obj) if obj is not None and hasattr(obj, "__dict__") else {}
        rows = "".join(
            f"<dt>{html.escape(str(k))}</dt><dd>{html.escape(str(v))}</dd>"
            for k, v in values.items()
        )
        errors = "".join(
            f"<li>{html.escape(k)}: {html.escape(v)}</li>" for k, v in self.errors.items()
        )
        if errors:
            return f'<ul class="errors">{errors}</ul><dl>{rows}</dl>'
        return f"<dl>{rows}</dl>"

    def _page(self, title: str, body: str, status_code: int = 200) -> HTMLResponse:
        return HTMLResponse(
            content=f"<!DOCTYPE html><html><head><title>{html.escape(title)}</title></head>"
                    f"<body><h1>{html.escape(title)}</h1>{body}</body></html>",
            status_code=status_code
        )
