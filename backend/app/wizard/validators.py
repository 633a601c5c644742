"""Per-tab completeness validators.

Each ``missing_*`` function lists the unmet requirements of one tab; the
validators in :data:`VALIDATORS` are the boolean view of the same checks.
Blank means a zero-length trimmed string or a zero-length list.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from backend.app.wizard.tabs import (
    BasicInfo,
    Details,
    FieldSet,
    Itinerary,
    Media,
    Policies,
    Pricing,
    TabId,
)


def is_blank(value: Any) -> bool:
    """Return True for ``None``, whitespace-only strings and empty lists."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def missing_basic_info(fields: BasicInfo) -> List[str]:
    missing = [
        name
        for name in (
            "trip_title",
            "trip_overview",
            "destination",
            "categories",
            "trip_theme",
            "pickup_location",
            "drop_location",
        )
        if is_blank(getattr(fields, name))
    ]
    if fields.days <= 0:
        missing.append("days")
    return missing


def missing_itinerary(fields: Itinerary) -> List[str]:
    if not fields.entries:
        return ["entries"]
    missing: List[str] = []
    for idx, entry in enumerate(fields.entries):
        for name in ("title", "description", "activities"):
            if is_blank(getattr(entry, name)):
                missing.append(f"entries[{idx}].{name}")
    return missing


def missing_media(fields: Media) -> List[str]:
    return ["hero_image"] if is_blank(fields.hero_image) else []


def missing_pricing(fields: Pricing) -> List[str]:
    missing: List[str] = []
    if fields.pricing_model == "customized":
        if fields.base_price <= 0:
            missing.append("base_price")
        if fields.final_price <= 0:
            missing.append("final_price")
        return missing

    if not fields.date_slots:
        missing.append("date_slots")
    for idx, slot in enumerate(fields.date_slots):
        if slot.from_date is None:
            missing.append(f"date_slots[{idx}].from_date")
        if slot.to_date is None:
            missing.append(f"date_slots[{idx}].to_date")
    if not fields.packages:
        missing.append("packages")
    for idx, package in enumerate(fields.packages):
        if is_blank(package.title):
            missing.append(f"packages[{idx}].title")
        if package.base_price <= 0:
            missing.append(f"packages[{idx}].base_price")
    return missing


def missing_details(fields: Details) -> List[str]:
    return [
        name
        for name in ("highlights", "inclusions", "exclusions")
        if is_blank(getattr(fields, name))
    ]


def missing_policies(fields: Policies) -> List[str]:
    return [
        name
        for name in ("terms_conditions", "privacy_policy", "payment_terms")
        if is_blank(getattr(fields, name))
    ]


MISSING_CHECKS: Dict[TabId, Callable[[Any], List[str]]] = {
    TabId.BASIC: missing_basic_info,
    TabId.ITINERARY: missing_itinerary,
    TabId.MEDIA: missing_media,
    TabId.PRICING: missing_pricing,
    TabId.DETAILS: missing_details,
    TabId.POLICIES: missing_policies,
}


def _as_validator(check: Callable[[Any], List[str]]) -> Callable[[Any], bool]:
    def validator(fields: Any) -> bool:
        return not check(fields)

    validator.__name__ = check.__name__.replace("missing_", "validate_")
    return validator


VALIDATORS: Dict[TabId, Callable[[Any], bool]] = {
    tab: _as_validator(check) for tab, check in MISSING_CHECKS.items()
}


def missing_requirements(fieldset: FieldSet) -> List[str]:
    """Dispatch to the missing-requirement check of the field set's tab."""
    return MISSING_CHECKS[TabId(fieldset.tab)](fieldset)  # type: ignore[attr-defined]


def is_tab_complete(fieldset: FieldSet) -> bool:
    """Dispatch to the boolean validator of the field set's tab."""
    return VALIDATORS[TabId(fieldset.tab)](fieldset)  # type: ignore[attr-defined]
