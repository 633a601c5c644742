"""Aggregate per-tab validator results into completion progress."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List

from backend.app.wizard.store import WizardState
from backend.app.wizard.tabs import TabId
from backend.app.wizard.validators import missing_requirements


@dataclass(frozen=True)
class CompletionSnapshot:
    """Completed tabs, progress ratio and unmet requirements per tab."""

    completed_tabs: FrozenSet[TabId]
    progress: float
    missing: Dict[TabId, List[str]] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return self.progress == 1.0


def recompute(state: WizardState) -> CompletionSnapshot:
    """Re-run every tab validator against the current field sets."""
    missing = {tab: missing_requirements(state.store.fieldset(tab)) for tab in state.tabs}
    completed = frozenset(tab for tab, unmet in missing.items() if not unmet)
    progress = len(completed) / len(state.tabs) if state.tabs else 0.0
    return CompletionSnapshot(completed_tabs=completed, progress=progress, missing=missing)
