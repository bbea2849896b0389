"""
Resourceful Builder

Collects the declarative configuration of a resourceful controller (enabled
actions, callbacks, per-format responses, parent resources) and writes it
onto the controller class once, in ``apply()``.
"""
from __future__ import annotations
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from multisite.resourceful import default_actions
from multisite.resourceful.errors import ConfigurationError
from multisite.resourceful.formats import DEFAULT_FORMAT, Format, FormatSelector

ACTIONS = ("index", "show", "edit", "update", "create", "new", "destroy")
SINGULAR_ACTIONS = tuple(action for action in ACTIONS if action != "index")

PHASES = ("before", "after")

# Publishing targets these actions unless narrowed with only/except_
PUBLISH_ACTIONS = ("index", "show")

Handler = Callable[[Any], Any]


def _names(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(v) for v in value]
    return [str(value)]


def load_parent_objects(controller) -> None:
    """Before-filter installed by ``Builder.apply``."""
    controller.load_parent_objects()


class Builder:
    """
    Configuration accumulator for a ``ResourcefulController`` subclass.

    Usually reached through ``make_resourceful``::

        with SitesController.make_resourceful() as build:
            build.actions("all")
            build.publish("json", "xml", attributes=["id", "name"])

    Nothing on the controller changes until ``apply()``.
    """

    def __init__(self, controller):
        self.controller = controller
        self.action_names: Tuple[str, ...] = ()
        self.callbacks: Dict[str, Dict[str, List[Handler]]] = {phase: {} for phase in PHASES}
        self.responses: Dict[str, List[Tuple[Format, Handler]]] = {}
        # publish() entries follow response_for() entries, whatever the call order
        self.published: Dict[str, List[Tuple[Format, Handler]]] = {}
        self.parents: List[str] = []

    @property
    def allowed_actions(self) -> Tuple[str, ...]:
        return ACTIONS if getattr(self.controller, "plural", True) else SINGULAR_ACTIONS

    def actions(self, *names) -> "Builder":
        """
        Enable ``names``; ``"all"`` enables every action the controller
        supports (no ``index`` for a singular controller).
        """
        allowed = self.allowed_actions
        if [str(name) for name in names] == ["all"]:
            self.action_names = allowed
            return self

        selected = []
        for name in names:
            name = str(name)
            if name not in allowed:
                raise ConfigurationError(
                    f"Unknown action {name!r} for {self.controller.__name__}; "
                    f"allowed: {', '.join(allowed)}"
                )
            if name not in selected:
                selected.append(name)
        self.action_names = tuple(selected)
        return self

    def _callback(self, phase: str, names: Iterable, handler: Handler) -> Handler:
        for name in names:
            self.callbacks[phase].setdefault(str(name), []).append(handler)
        return handler

    def before(self, *names, handler: Optional[Handler] = None):
        """
        Run ``handler(controller)`` before each named action.

        The handler may also be passed last, as in ``before("show", fn)``.
        Without a handler this returns a decorator.
        """
        names, handler = _split_handler(names, handler)
        if handler is None:
            return lambda fn: self._callback("before", names, fn)
        self._callback("before", names, handler)
        return self

    def after(self, *names, handler: Optional[Handler] = None):
        """Run ``handler(controller)`` after each named action."""
        names, handler = _split_handler(names, handler)
        if handler is None:
            return lambda fn: self._callback("after", names, fn)
        self._callback("after", names, handler)
        return self

    def _add_response(self, names: Iterable[str], fmt: Format, handler: Handler) -> None:
        for name in names:
            self.responses.setdefault(str(name), []).append((fmt, handler))

    def response_for(self, *names, handler: Optional[Handler] = None):
        """
        Register responses for the named actions.

        Given a ``handler`` it answers the default (html) format. Without one,
        a ``FormatSelector`` is returned whose attributes register a handler
        per format, in call order.
        """
        names, handler = _split_handler(names, handler)
        names = [str(name) for name in names]
        if handler is not None:
            self._add_response(names, DEFAULT_FORMAT, handler)
            return self
        return FormatSelector(lambda fmt, fn: self._add_response(names, fmt, fn))

    def publish(self, *formats, **options) -> "Builder":
        """
        Respond to ``index`` and ``show`` with serialized records.

        ``attributes`` is required and lists what gets serialized. ``only``
        and ``except_`` narrow the actions; every other option is passed on
        to ``controller.serialize``.
        """
        if "attributes" not in options:
            raise ConfigurationError("Must specify attributes option")

        if "only" in options:
            names = _names(options.pop("only"))
        else:
            names = list(PUBLISH_ACTIONS)
        excluded = _names(options.pop("except_", None))
        names = [name for name in names if name not in excluded]

        for fmt in formats:
            fmt = Format.coerce(fmt)
            handler = _publisher(fmt, dict(options))
            for name in names:
                self.published.setdefault(name, []).append((fmt, handler))
        return self

    def belongs_to(self, *parents) -> "Builder":
        """Declare parent resources loaded from ``<parent>_id`` path params."""
        self.parents.extend(str(parent) for parent in parents)
        return self

    def apply(self) -> None:
        """Write the collected configuration onto the controller class."""
        kontroller = self.controller

        for name in ACTIONS:
            default = getattr(default_actions, name)
            own = kontroller.__dict__.get(name)
            if name in self.action_names:
                if own is None:
                    setattr(kontroller, name, default)
            elif own is default:
                delattr(kontroller, name)

        kontroller.enabled_actions = frozenset(self.action_names)
        kontroller.hidden_actions = tuple(
            name for name in ACTIONS if name not in self.action_names
        )
        if load_parent_objects not in kontroller.before_filters:
            kontroller.before_filters = tuple(kontroller.before_filters) + (load_parent_objects,)

        kontroller.resourceful_callbacks = MappingProxyType({
            phase: MappingProxyType({
                action: tuple(handlers) for action, handlers in table.items()
            })
            for phase, table in self.callbacks.items()
        })
        actions = list(self.responses)
        actions += [action for action in self.published if action not in self.responses]
        kontroller.resourceful_responses = MappingProxyType({
            action: tuple(self.responses.get(action, []) + self.published.get(action, []))
            for action in actions
        })
        kontroller.resourceful_parents = tuple(self.parents)


def _split_handler(names: tuple, handler: Optional[Handler]):
    """Take a trailing callable in ``names`` as the handler."""
    if handler is None and names and callable(names[-1]):
        names, handler = names[:-1], names[-1]
    if any(callable(name) for name in names):
        raise ConfigurationError("A handler may only be given last")
    return names, handler


def _publisher(fmt: Format, options: dict) -> Handler:
    """Handler that renders the current record(s) serialized as ``fmt``."""

    def publish(controller):
        if controller.plural_action():
            target = controller.current_objects()
        else:
            target = controller.current_object()
        payload = controller.serialize(target, fmt, **options)
        return controller.render(**{fmt.render_key: payload})

    publish.__name__ = f"publish_{fmt.value}"
    return publish
