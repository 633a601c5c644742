"""Wizard controller: active tab, field dispatch and publish orchestration."""

from __future__ import annotations

from typing import Any, Callable, List, Mapping, Optional, Union

from pydantic import BaseModel

from backend.app.wizard.completion import CompletionSnapshot, recompute
from backend.app.wizard.errors import (
    FlowClosedError,
    InvalidFieldValueError,
    PublishInProgressError,
    ReadOnlyFieldError,
)
from backend.app.wizard.publish import PublishedTrip, TripPersister, publish
from backend.app.wizard.store import WizardState, as_tab
from backend.app.wizard.tabs import TabId, resize_itinerary


def _as_list(tab: TabId, name: str, value: Any) -> List[Any]:
    if not isinstance(value, list):
        raise InvalidFieldValueError(tab.value, name, [{"msg": "Field is not a list"}])
    return value


def _as_dict(item: Any) -> Any:
    return item.model_dump() if isinstance(item, BaseModel) else item


class WizardController:
    """Drive one trip authoring session.

    Tab navigation only changes on explicit selection. Every field update is
    followed by a full completion recompute.
    """

    def __init__(self, state: Optional[WizardState] = None):
        self.state = state or WizardState()
        self.active_tab: TabId = self.state.tabs[0]
        self.publishing = False
        self.published: Optional[PublishedTrip] = None
        self.snapshot: CompletionSnapshot = self._refresh()

    @property
    def progress(self) -> float:
        return self.snapshot.progress

    @property
    def can_publish(self) -> bool:
        return (
            self.snapshot.is_complete and not self.publishing and self.published is None
        )

    def _refresh(self) -> CompletionSnapshot:
        self.snapshot = recompute(self.state)
        self.state.completed_tabs = self.snapshot.completed_tabs
        return self.snapshot

    def _ensure_open(self) -> None:
        if self.published is not None:
            raise FlowClosedError(f"Trip already published as {self.published.trip_id}")
        if self.publishing:
            raise PublishInProgressError("A publish is already in progress")

    def select_tab(self, tab: Union[TabId, str]) -> TabId:
        self.active_tab = as_tab(tab)
        return self.active_tab

    def get_field(self, tab: Union[TabId, str], name: str, default: Any = None) -> Any:
        return self.state.store.get_field(tab, name, default)

    def set_field(self, tab: Union[TabId, str], name: str, value: Any) -> CompletionSnapshot:
        """Apply one field-update event and recompute completion."""
        self._ensure_open()
        tab_id = as_tab(tab)
        store = self.state.store
        store.set_field(tab_id, name, value)
        if tab_id is TabId.BASIC and name == "days":
            entries = store.get_field(TabId.ITINERARY, "entries")
            resized = resize_itinerary(entries, store.get_field(TabId.BASIC, "days"))
            if resized != entries:
                store.set_field(TabId.ITINERARY, "entries", resized)
        return self._refresh()

    # --- list helpers, all expressed as get/set pairs ---

    def toggle_item(self, tab: Union[TabId, str], name: str, item: Any) -> CompletionSnapshot:
        """Add ``item`` to a selection list, or remove it when present."""
        tab_id = as_tab(tab)
        current = _as_list(tab_id, name, self.get_field(tab_id, name))
        if item in current:
            updated = [value for value in current if value != item]
        else:
            updated = current + [item]
        return self.set_field(tab_id, name, updated)

    def append_item(self, tab: Union[TabId, str], name: str, item: Any) -> CompletionSnapshot:
        tab_id = as_tab(tab)
        current = _as_list(tab_id, name, self.get_field(tab_id, name))
        if isinstance(item, str):
            item = item.strip()
            if not item:
                return self.snapshot
        return self.set_field(tab_id, name, current + [item])

    def remove_item(self, tab: Union[TabId, str], name: str, index: int) -> CompletionSnapshot:
        tab_id = as_tab(tab)
        current = _as_list(tab_id, name, self.get_field(tab_id, name))
        if not 0 <= index < len(current):
            raise InvalidFieldValueError(tab_id.value, name, [{"msg": "Index out of range"}])
        del current[index]
        return self.set_field(tab_id, name, current)

    def update_list_item(
        self,
        tab: Union[TabId, str],
        name: str,
        index: int,
        changes: Mapping[str, Any],
    ) -> CompletionSnapshot:
        """Merge ``changes`` into one object of a list field."""
        tab_id = as_tab(tab)
        items = _as_list(tab_id, name, self.get_field(tab_id, name))
        if not 0 <= index < len(items) or not isinstance(items[index], (BaseModel, dict)):
            raise InvalidFieldValueError(tab_id.value, name, [{"msg": "Index out of range"}])
        if isinstance(items[index], BaseModel):
            for key in changes:
                if key in type(items[index]).model_computed_fields:
                    raise ReadOnlyFieldError(tab_id.value, f"{name}[{index}].{key}")
        current = [_as_dict(v) for v in items]
        current[index] = {**current[index], **changes}
        return self.set_field(tab_id, name, current)

    async def publish(
        self, persister: TripPersister, url_for: Callable[[str], str]
    ) -> PublishedTrip:
        """Run the publish gate; only a success closes the flow."""
        self._ensure_open()
        self.publishing = True
        try:
            published = await publish(self.state, persister, url_for)
        finally:
            self.publishing = False
        self.published = published
        return published
