"""Field store and wizard state for one trip authoring session."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple, Union

from pydantic import ValidationError

from backend.app.wizard.errors import (
    InvalidFieldValueError,
    ReadOnlyFieldError,
    UnknownFieldError,
    UnknownTabError,
)
from backend.app.wizard.tabs import TAB_MODELS, TAB_ORDER, FieldSet, TabId


def as_tab(tab: Union[TabId, str]) -> TabId:
    """Normalise a tab identifier, rejecting unknown values."""
    try:
        return TabId(tab)
    except ValueError as exc:
        raise UnknownTabError(tab) from exc


class FieldStore:
    """Per-tab mapping of field name to value.

    Field sets are immutable; every write swaps in a freshly validated copy of
    the tab's field set so derived fields always reflect their inputs.
    """

    def __init__(self, fieldsets: Optional[Iterable[FieldSet]] = None):
        self._fieldsets: Dict[TabId, FieldSet] = {
            tab: model() for tab, model in TAB_MODELS.items()
        }
        for fieldset in fieldsets or ():
            self._fieldsets[as_tab(fieldset.tab)] = fieldset  # type: ignore[attr-defined]

    def fieldset(self, tab: Union[TabId, str]) -> FieldSet:
        """Return the current field set of a tab."""
        return self._fieldsets[as_tab(tab)]

    def fieldsets(self) -> Dict[TabId, FieldSet]:
        """Return a shallow copy of the tab -> field set mapping."""
        return dict(self._fieldsets)

    def get_field(self, tab: Union[TabId, str], name: str, default: Any = None) -> Any:
        """Return a field value, or ``default`` when the tab has no such field."""
        fieldset = self.fieldset(tab)
        model = type(fieldset)
        if name in model.model_fields or name in model.model_computed_fields:
            return copy.deepcopy(getattr(fieldset, name))
        return default

    def set_field(self, tab: Union[TabId, str], name: str, value: Any) -> FieldSet:
        """Replace one field of a tab, preserving every other field."""
        tab_id = as_tab(tab)
        current = self._fieldsets[tab_id]
        model = type(current)
        if name in model.model_computed_fields:
            raise ReadOnlyFieldError(tab_id.value, name)
        if name == "tab" or name not in model.model_fields:
            raise UnknownFieldError(tab_id.value, name)

        data = {key: getattr(current, key) for key in model.model_fields}
        data[name] = value
        try:
            updated = model.model_validate(data)
        except ValidationError as exc:
            errors = [
                {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                for err in exc.errors()
            ]
            raise InvalidFieldValueError(tab_id.value, name, errors) from exc
        self._fieldsets[tab_id] = updated
        return updated


@dataclass
class WizardState:
    """Ordered tabs, their field sets and the set of completed tabs."""

    store: FieldStore = field(default_factory=FieldStore)
    tabs: Tuple[TabId, ...] = TAB_ORDER
    completed_tabs: FrozenSet[TabId] = frozenset()

    @property
    def progress(self) -> float:
        if not self.tabs:
            return 0.0
        return len(self.completed_tabs) / len(self.tabs)
