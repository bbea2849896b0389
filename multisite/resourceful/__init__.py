"""Declarative CRUD controllers."""
from multisite.resourceful.builder import ACTIONS, SINGULAR_ACTIONS, Builder
from multisite.resourceful.controller import ResourcefulController
from multisite.resourceful.errors import ConfigurationError, RecordInvalid, ResourcefulError
from multisite.resourceful.formats import DEFAULT_FORMAT, Format, FormatSelector, serialize
from multisite.resourceful.routing import resources

__all__ = [
    "ACTIONS",
    "SINGULAR_ACTIONS",
    "Builder",
    "ResourcefulController",
    "ConfigurationError",
    "RecordInvalid",
    "ResourcefulError",
    "DEFAULT_FORMAT",
    "Format",
    "FormatSelector",
    "serialize",
    "resources",
]
