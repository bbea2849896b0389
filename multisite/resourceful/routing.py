"""
Routes for resourceful controllers

Maps the enabled actions of a controller onto a FastAPI router, the way a
``resources`` declaration does in the admin: only un-hidden actions and the
declared member actions become routable.
"""
from __future__ import annotations
import logging
import re
from typing import Dict, Optional

from fastapi import APIRouter, Request

from multisite.resourceful.errors import ConfigurationError

logger = logging.getLogger(__name__)

_NESTED_KEY = re.compile(r"^(\w+)\[(\w+)\]$")

# action -> (HTTP methods, path suffix, accepts a .format suffix)
ACTION_ROUTES = {
    "index": (["GET"], "", True),
    "create": (["POST"], "", True),
    "new": (["GET"], "/new", False),
    "edit": (["GET"], "/{id}/edit", False),
    "show": (["GET"], "/{id}", True),
    "update": (["PUT", "PATCH"], "/{id}", True),
    "destroy": (["DELETE"], "/{id}", True),
}


async def read_body(request: Request) -> dict:
    """Submitted attributes from a JSON or form body; ``site[name]`` keys nest."""
    if request.method in ("GET", "HEAD", "DELETE"):
        return {}

    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        data = await request.json()
        return data if isinstance(data, dict) else {}

    body: dict = {}
    form = await request.form()
    for key, value in form.multi_items():
        match = _NESTED_KEY.match(key)
        if match:
            body.setdefault(match.group(1), {})[match.group(2)] = value
        else:
            body[key] = value
    return body


def _endpoint(controller_cls, action: str, prefix: str):
    async def endpoint(request: Request):
        params = dict(request.query_params)
        params.update(request.path_params)
        body = await read_body(request)
        controller = controller_cls(request, params=params, body=body, prefix=prefix)
        return controller.dispatch(action)

    endpoint.__name__ = f"{controller_cls.__name__}_{action}"
    return endpoint


def resources(
    router: APIRouter,
    prefix: str,
    controller_cls,
    member: Optional[Dict[str, str]] = None,
    name: Optional[str] = None
) -> None:
    """
    Register routes for ``controller_cls`` under ``prefix``.

    ``member`` maps extra controller methods to the HTTP method that reaches
    them at ``{prefix}/{id}/{method name}``.
    """
    prefix = prefix.rstrip("/")
    name = name or controller_cls.model_name
    member = dict(member or {})

    for action in member:
        if not callable(getattr(controller_cls, action, None)):
            raise ConfigurationError(
                f"{controller_cls.__name__} has no member action {action!r}"
            )
    controller_cls.member_actions = {**controller_cls.member_actions, **member}

    def add(action: str, methods, path: str, route_name: str):
        router.add_api_route(
            prefix + path,
            _endpoint(controller_cls, action, prefix),
            methods=methods,
            name=route_name,
            include_in_schema=False
        )

    enabled = [action for action in ACTION_ROUTES if action in controller_cls.enabled_actions]

    for action in enabled:
        methods, path, _ = ACTION_ROUTES[action]
        if action in ("index", "create", "new"):
            add(action, methods, path, f"{name}_{action}")

    for action, http_method in member.items():
        add(action, [http_method.upper()], f"/{{id}}/{action}", f"{name}_{action}")

    # ".{format}" variants come before "/{id}", which would match "1.json" as an id
    for action in enabled:
        methods, path, formatted = ACTION_ROUTES[action]
        if formatted:
            add(action, methods, path + ".{format}", f"{name}_{action}_formatted")

    for action in enabled:
        methods, path, _ = ACTION_ROUTES[action]
        if action not in ("index", "create", "new"):
            add(action, methods, path, f"{name}_{action}")

    logger.debug(
        "Routed %s at %s: %s", controller_cls.__name__, prefix,
        ", ".join(enabled + list(member))
    )
