"""Exceptions raised by the trip authoring wizard."""

from typing import Any


class WizardError(Exception):
    """Base class for wizard misuse and publish failures."""


class UnknownTabError(WizardError):
    """Raised for a tab identifier outside the wizard's tab set."""

    def __init__(self, tab: Any):
        self.tab = tab
        super().__init__(f"Unknown wizard tab: {tab!r}")


class UnknownFieldError(WizardError):
    """Raised when a field name does not exist on the tab."""

    def __init__(self, tab: str, name: str):
        self.tab = tab
        self.name = name
        super().__init__(f"Tab '{tab}' has no field '{name}'")


class ReadOnlyFieldError(WizardError):
    """Raised when a derived field is written directly."""

    def __init__(self, tab: str, name: str):
        self.tab = tab
        self.name = name
        super().__init__(f"Field '{name}' on tab '{tab}' is derived and read-only")


class InvalidFieldValueError(WizardError):
    """Raised when a value cannot be shaped into the field's type."""

    def __init__(self, tab: str, name: str, errors: Any):
        self.tab = tab
        self.name = name
        self.errors = errors
        super().__init__(f"Invalid value for '{name}' on tab '{tab}'")


class FlowClosedError(WizardError):
    """Raised when a published wizard flow is mutated or published again."""


class PublishNotAllowedError(WizardError):
    """Raised when publish is attempted before every tab is complete."""


class PublishFailedError(WizardError):
    """Raised when the persistence collaborator rejects a publish."""


class PublishInProgressError(WizardError):
    """Raised when a draft is edited or published while a publish is in flight."""
