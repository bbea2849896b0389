"""
Errors raised by the resourceful controller DSL.
"""


class ResourcefulError(Exception):
    """Base class for resourceful errors."""


class ConfigurationError(ResourcefulError):
    """
    A controller was declared improperly.

    Raised while the controller class is being configured, never while
    a request is handled.
    """


class RecordInvalid(ResourcefulError):
    """A record failed validation while being saved."""

    def __init__(self, errors: dict):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.errors.items()))
