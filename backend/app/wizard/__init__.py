"""Trip authoring wizard: field sets, validation, completion and publishing."""

from .completion import CompletionSnapshot, recompute
from .controller import WizardController
from .errors import (
    FlowClosedError,
    InvalidFieldValueError,
    PublishFailedError,
    PublishInProgressError,
    PublishNotAllowedError,
    ReadOnlyFieldError,
    UnknownFieldError,
    UnknownTabError,
    WizardError,
)
from .publish import PublishedTrip, build_trip_payload, can_publish, publish
from .store import FieldStore, WizardState
from .tabs import TAB_LABELS, TAB_ORDER, TabId

__all__ = [
    "CompletionSnapshot",
    "FieldStore",
    "FlowClosedError",
    "InvalidFieldValueError",
    "PublishFailedError",
    "PublishInProgressError",
    "PublishNotAllowedError",
    "PublishedTrip",
    "ReadOnlyFieldError",
    "TAB_LABELS",
    "TAB_ORDER",
    "TabId",
    "UnknownFieldError",
    "UnknownTabError",
    "WizardController",
    "WizardError",
    "WizardState",
    "build_trip_payload",
    "can_publish",
    "publish",
    "recompute",
]
