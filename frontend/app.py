"""Streamlit frontend for the travel back office."""

from __future__ import annotations

import json
from datetime import date, datetime
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
import streamlit as st
from st_aggrid import AgGrid, GridOptionsBuilder

try:
    from frontend.backend_client import DEFAULT_BACKEND_URL, BackendClient  # type: ignore[import]
except ModuleNotFoundError:
    import sys

    sys.path.append(str(Path(__file__).resolve().parent))
    from backend_client import DEFAULT_BACKEND_URL, BackendClient

LEAD_STATUSES = ["new", "contacted", "quoted", "awaiting_payment", "booked", "failed"]
LEAD_PRIORITIES = ["low", "medium", "high"]
LEAD_SOURCES = ["website", "referral", "whatsapp", "phone", "walk_in", "trip_page"]
DESTINATION_TYPES = [
    "Beach Destinations",
    "Hill Stations",
    "Adventure Tourism",
    "Cultural Heritage",
    "Wildlife Safari",
    "Spiritual Tourism",
    "International Destinations",
    "Honeymoon Packages",
    "Family Packages",
    "Corporate Tours",
]
HOTEL_CATEGORIES = [
    "Budget (1-2 Star)",
    "Standard (3 Star)",
    "Deluxe (4 Star)",
    "Luxury (5 Star)",
    "Heritage Hotels",
    "Resorts",
]


def get_backend_client() -> BackendClient:
    """Retrieve a backend client configured from session state."""
    base_url: str = st.session_state.get("backend_url", DEFAULT_BACKEND_URL)
    return BackendClient(base_url=base_url)


@lru_cache(maxsize=4)
def load_form_options(base_url: str) -> Dict[str, Any]:
    """Fetch trip form choices once per backend."""
    return BackendClient(base_url=base_url).get("/api/trips/options")


def render_table(data: List[Dict[str, Any]], height: int = 300) -> None:
    """Render a list of dictionaries using AgGrid."""
    if not data:
        st.info("No records to display.")
        return
    df = pd.json_normalize(data)
    builder = GridOptionsBuilder.from_dataframe(df)
    builder.configure_pagination(enabled=True, paginationAutoPageSize=True)
    builder.configure_default_column(
        resizable=True, sortable=True, filter=True, wrapText=True, autoHeight=True
    )
    grid_options = builder.build()
    AgGrid(
        df,
        gridOptions=grid_options,
        height=height,
        theme="streamlit",
    )


def show_json(payload: Any) -> None:
    """Display payload as formatted JSON."""
    st.code(json.dumps(payload, indent=2, default=str), language="json")


def parse_date(raw: Any) -> Optional[date]:
    if not raw:
        return None
    try:
        return date.fromisoformat(str(raw)[:10])
    except ValueError:
        return None


def frame_records(frame: pd.DataFrame, drop: tuple = ()) -> List[Dict[str, Any]]:
    """Turn an edited data frame back into JSON-ready row dicts.

    Empty cells are dropped so the backend falls back to its defaults; rows
    with no values at all are skipped.
    """
    records: List[Dict[str, Any]] = []
    for row in frame.to_dict("records"):
        clean: Dict[str, Any] = {}
        for key, value in row.items():
            if key in drop:
                continue
            if isinstance(value, (list, dict)):
                clean[key] = value
                continue
            if value is None or pd.isna(value) or value == "":
                continue
            if isinstance(value, (datetime, date)):
                value = value.isoformat()[:10]
            elif hasattr(value, "item"):
                value = value.item()
            clean[key] = value
        if any(k != "id" for k in clean):
            records.append(clean)
    return records


# --- Dashboard ---


def dashboard_tab() -> None:
    """Render dashboard overview."""
    st.subheader("Backend Status")
    client = get_backend_client()
    try:
        health = client.get("/api/system/health")
        mode = "mock data" if health.get("use_mock_data") else "live data store"
        st.success(f"{health.get('app_name')} backend reachable ({mode}).")
    except Exception as err:  # noqa: BLE001
        st.error(f"Unable to reach backend: {err}")
        return

    try:
        summary = client.get("/api/dashboard/summary")
    except Exception as err:  # noqa: BLE001
        st.error(f"Dashboard summary failed: {err}")
        return

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total leads", summary["total"])
    col2.metric("Conversion rate", f"{summary['conversion_rate'] * 100:.1f}%")
    col3.metric("Follow-ups due", summary["follow_ups_due"])
    col4.metric("Open trip drafts", summary["open_drafts"])

    st.subheader("Pipeline")
    by_status = pd.DataFrame(
        {"leads": list(summary["by_status"].values())},
        index=list(summary["by_status"].keys()),
    )
    st.bar_chart(by_status)

    st.subheader("Recent Leads")
    render_table(summary.get("recent_leads", []), height=220)


# --- Leads ---


def render_kanban(columns: List[Dict[str, Any]]) -> None:
    """Show leads as cards grouped per pipeline status."""
    st_columns = st.columns(len(columns))
    for st_column, column in zip(st_columns, columns):
        with st_column:
            st.markdown(f"**{column['status'].replace('_', ' ').title()}** ({column['count']})")
            for lead in column["leads"]:
                with st.container(border=True):
                    st.markdown(f"**{lead.get('name')}**")
                    st.caption(lead.get("destination_type") or "No destination type")
                    st.caption(f"Priority: {lead.get('priority', 'medium')}")


def lead_create_form(client: BackendClient) -> None:
    with st.expander("Add Lead", expanded=False):
        with st.form("lead_create_form", clear_on_submit=True):
            col1, col2 = st.columns(2)
            with col1:
                name = st.text_input("Name *")
                email = st.text_input("Email *")
                mobile = st.text_input("Mobile *")
                destination_type = st.selectbox("Destination type", [""] + DESTINATION_TYPES)
                hotel_category = st.selectbox("Hotel category", [""] + HOTEL_CATEGORIES)
                budget = st.text_input("Budget")
            with col2:
                pickup = st.text_input("Pickup")
                drop_location = st.text_input("Drop location")
                travel_from = st.date_input("Travel from", value=None)
                travel_to = st.date_input("Travel to", value=None)
                adults = st.number_input("Adults", min_value=1, value=1, step=1)
                children = st.number_input("Children", min_value=0, value=0, step=1)
            priority = st.selectbox("Priority", LEAD_PRIORITIES, index=1)
            source = st.selectbox("Source", LEAD_SOURCES)
            comments = st.text_area("Comments")
            submit = st.form_submit_button("Add Lead")

    if submit:
        payload = {
            "name": name,
            "email": email,
            "mobile": mobile,
            "destination_type": destination_type or None,
            "hotel_category": hotel_category or None,
            "budget": budget or None,
            "pickup": pickup or None,
            "drop_location": drop_location or None,
            "travel_date_from": travel_from.isoformat() if travel_from else None,
            "travel_date_to": travel_to.isoformat() if travel_to else None,
            "no_of_adults": int(adults),
            "no_of_children": int(children),
            "priority": priority,
            "source": source,
            "comments": comments or None,
        }
        try:
            response = client.post("/api/leads", json=payload)
            st.success(f"Lead created with id {response.get('id')}")
        except Exception as err:  # noqa: BLE001
            st.error(f"Lead creation failed: {err}")


def lead_detail(client: BackendClient, lead: Dict[str, Any]) -> None:
    """Edit form, comments and documents of one lead."""
    lead_id = lead["id"]
    with st.form(f"lead_update_{lead_id}"):
        col1, col2 = st.columns(2)
        with col1:
            status = st.selectbox(
                "Status",
                LEAD_STATUSES,
                index=LEAD_STATUSES.index(lead.get("status") or "new"),
            )
            priority = st.selectbox(
                "Priority",
                LEAD_PRIORITIES,
                index=LEAD_PRIORITIES.index(lead.get("priority") or "medium"),
            )
            assigned_to = st.text_input("Assigned to", value=lead.get("assigned_to") or "")
        with col2:
            follow_up = st.date_input(
                "Follow-up date", value=parse_date(lead.get("follow_up_date"))
            )
            budget = st.text_input("Budget", value=lead.get("budget") or "")
            mobile = st.text_input("Mobile", value=lead.get("mobile") or "")
        notes = st.text_area("Comments", value=lead.get("comments") or "")
        save = st.form_submit_button("Save Lead")

    if save:
        payload = {
            "status": status,
            "priority": priority,
            "assigned_to": assigned_to or None,
            "follow_up_date": follow_up.isoformat() if follow_up else None,
            "budget": budget or None,
            "mobile": mobile,
            "comments": notes or None,
        }
        try:
            client.put(f"/api/leads/{lead_id}", json=payload)
            st.success("Lead updated.")
        except Exception as err:  # noqa: BLE001
            st.error(f"Lead update failed: {err}")

    if st.button("Delete Lead", key=f"lead_delete_{lead_id}"):
        try:
            client.delete(f"/api/leads/{lead_id}")
        except Exception as err:  # noqa: BLE001
            st.error(f"Lead deletion failed: {err}")
        else:
            st.rerun()

    st.markdown("**Comments**")
    try:
        comments = client.get(f"/api/leads/{lead_id}/comments")
    except Exception as err:  # noqa: BLE001
        comments = []
        st.error(f"Could not load comments: {err}")
    for comment in comments:
        st.markdown(f"*{comment.get('user_name')}* ({str(comment.get('created_at'))[:16]})")
        st.write(comment.get("comment"))
    with st.form(f"lead_comment_{lead_id}", clear_on_submit=True):
        text = st.text_area("New comment")
        add_comment = st.form_submit_button("Add Comment")
    if add_comment:
        try:
            client.post(f"/api/leads/{lead_id}/comments", json={"comment": text})
        except Exception as err:  # noqa: BLE001
            st.error(f"Comment failed: {err}")
        else:
            st.rerun()

    st.markdown("**Documents**")
    try:
        documents = client.get(f"/api/leads/{lead_id}/documents")
    except Exception as err:  # noqa: BLE001
        documents = []
        st.error(f"Could not load documents: {err}")
    for document in documents:
        st.markdown(f"- [{document.get('file_name')}]({document.get('file_url')})")
    with st.form(f"lead_document_{lead_id}", clear_on_submit=True):
        file_name = st.text_input("File name")
        file_url = st.text_input("File URL")
        file_type = st.text_input("File type", value="application/pdf")
        add_document = st.form_submit_button("Attach Document")
    if add_document:
        try:
            client.post(
                f"/api/leads/{lead_id}/documents",
                json={"file_name": file_name, "file_url": file_url, "file_type": file_type},
            )
        except Exception as err:  # noqa: BLE001
            st.error(f"Document upload failed: {err}")
        else:
            st.rerun()


def leads_tab() -> None:
    """Render lead listing, kanban and lead management UI."""
    st.subheader("Leads")
    client = get_backend_client()

    col1, col2, col3 = st.columns([3, 2, 2])
    with col1:
        search = st.text_input("Search name, email, mobile or destination")
    with col2:
        status_filter = st.selectbox("Status", ["all"] + LEAD_STATUSES)
    with col3:
        view = st.radio("View", ["List", "Kanban"], horizontal=True)

    params: Dict[str, Any] = {"status": status_filter}
    if search:
        params["search"] = search
    try:
        leads = client.get("/api/leads", params=params)
    except Exception as err:  # noqa: BLE001
        st.error(f"Could not load leads: {err}")
        return

    if view == "Kanban":
        try:
            columns = client.get("/api/leads/pipeline", params={"search": search} if search else None)
            render_kanban(columns)
        except Exception as err:  # noqa: BLE001
            st.error(f"Could not load pipeline: {err}")
    else:
        render_table(leads)

    lead_create_form(client)

    if not leads:
        return
    st.subheader("Lead Detail")
    by_id = {lead["id"]: lead for lead in leads}
    selected = st.selectbox(
        "Lead",
        list(by_id),
        format_func=lambda lead_id: f"{by_id[lead_id].get('name')} ({by_id[lead_id].get('status')})",
    )
    lead_detail(client, by_id[selected])


# --- Add Trip wizard ---


def current_draft() -> Optional[Dict[str, Any]]:
    return st.session_state.get("trip_draft")


def draft_tab(draft: Dict[str, Any], tab_id: str) -> Dict[str, Any]:
    return next(tab for tab in draft["tabs"] if tab["id"] == tab_id)


def send_field(client: BackendClient, tab: str, name: str, value: Any) -> bool:
    """Send one field-update event and keep the returned draft view."""
    draft = current_draft()
    try:
        st.session_state["trip_draft"] = client.patch(
            f"/api/trips/drafts/{draft['draft_id']}/fields",
            json={"tab": tab, "name": name, "value": value},
        )
        return True
    except Exception as err:  # noqa: BLE001
        st.error(f"Could not update {name}: {err}")
        return False


def send_changes(client: BackendClient, tab: str, values: Dict[str, Any]) -> None:
    """Send field events for every value that differs from the draft."""
    fields = draft_tab(current_draft(), tab)["fields"]
    changed = [name for name, value in values.items() if fields.get(name) != value]
    for name in changed:
        if not send_field(client, tab, name, values[name]):
            return
    if changed:
        st.rerun()


def send_toggles(client: BackendClient, tab: str, name: str, selected: List[str]) -> bool:
    """Toggle the items that were added to or removed from a selection."""
    draft = current_draft()
    current = draft_tab(draft, tab)["fields"].get(name) or []
    flips = [item for item in current if item not in selected]
    flips += [item for item in selected if item not in current]
    for item in flips:
        try:
            st.session_state["trip_draft"] = client.post(
                f"/api/trips/drafts/{draft['draft_id']}/toggle",
                json={"tab": tab, "name": name, "item": item},
            )
        except Exception as err:  # noqa: BLE001
            st.error(f"Could not update {name}: {err}")
            return False
    return bool(flips)


def required_badge(tab: Dict[str, Any]) -> None:
    if tab["complete"]:
        st.success("All required fields are filled in.")
    else:
        st.warning("Required: " + ", ".join(tab["missing"]))


def basic_info_form(client: BackendClient, options: Dict[str, Any], tab: Dict[str, Any]) -> None:
    fields = tab["fields"]
    destinations = options["destinations"]
    cities = [""] + options["cities"]
    with st.form("trip_basic_form"):
        title = st.text_input("Trip title *", value=fields["trip_title"], max_chars=100)
        overview = st.text_area("Trip overview *", value=fields["trip_overview"])
        col1, col2 = st.columns(2)
        with col1:
            destination = st.selectbox(
                "Destination *",
                [""] + destinations,
                index=([""] + destinations).index(fields["destination"])
                if fields["destination"] in destinations
                else 0,
            )
            destination_type = st.radio(
                "Destination type",
                ["domestic", "international"],
                index=0 if fields["destination_type"] == "domestic" else 1,
                horizontal=True,
            )
            hotel_category = st.slider("Hotel category (stars)", 1, 5, value=fields["hotel_category"])
        with col2:
            pickup = st.selectbox(
                "Pickup location *",
                cities,
                index=cities.index(fields["pickup_location"]) if fields["pickup_location"] in cities else 0,
            )
            drop = st.selectbox(
                "Drop location *",
                cities,
                index=cities.index(fields["drop_location"]) if fields["drop_location"] in cities else 0,
            )
            days = st.number_input("Days *", min_value=0, max_value=60, value=int(fields["days"]), step=1)
            st.metric("Nights", fields["nights"])
        categories = st.multiselect("Categories *", options["categories"], default=fields["categories"])
        themes = st.multiselect("Trip theme *", options["themes"], default=fields["trip_theme"])
        submit = st.form_submit_button("Save Basic Info")

    if submit:
        flipped = send_toggles(client, "basic", "categories", categories)
        flipped = send_toggles(client, "basic", "trip_theme", themes) or flipped
        send_changes(
            client,
            "basic",
            {
                "trip_title": title,
                "trip_overview": overview,
                "destination": destination,
                "destination_type": destination_type,
                "hotel_category": hotel_category,
                "pickup_location": pickup,
                "drop_location": drop,
                "days": int(days),
            },
        )
        if flipped:
            st.rerun()


def send_item(client: BackendClient, method: str, path: str, **kwargs: Any) -> bool:
    """Send one list-item event and keep the returned draft view."""
    draft = current_draft()
    try:
        st.session_state["trip_draft"] = getattr(client, method)(
            f"/api/trips/drafts/{draft['draft_id']}/items{path}", **kwargs
        )
        return True
    except Exception as err:  # noqa: BLE001
        st.error(f"Could not update list: {err}")
        return False


def list_editor(client: BackendClient, tab: str, name: str, label: str, items: List[str]) -> None:
    """Show a string list with per-entry remove buttons and an add box."""
    st.markdown(f"**{label}**")
    for idx, item in enumerate(items):
        col1, col2 = st.columns([10, 1])
        col1.write(f"- {item}")
        if col2.button("✕", key=f"{tab}_{name}_remove_{idx}"):
            if send_item(client, "delete", f"/{idx}", params={"tab": tab, "name": name}):
                st.rerun()
    with st.form(f"{tab}_{name}_add_form", clear_on_submit=True):
        col1, col2 = st.columns([10, 1])
        new_item = col1.text_input(
            label,
            label_visibility="collapsed",
            placeholder="Add an entry",
            key=f"{tab}_{name}_new",
        )
        submit = col2.form_submit_button("Add")
    if submit and new_item.strip():
        if send_item(client, "post", "", json={"tab": tab, "name": name, "item": new_item.strip()}):
            st.rerun()


def itinerary_form(client: BackendClient, options: Dict[str, Any], tab: Dict[str, Any]) -> None:
    entries = tab["fields"]["entries"]
    if not entries:
        st.info("Set the number of days on the Basic Info tab to plan the itinerary.")
        return
    for idx, entry in enumerate(entries):
        with st.expander(entry["title"] or f"Day {entry['day']}", expanded=idx == 0):
            with st.form(f"trip_itinerary_day_{idx}"):
                title = st.text_input("Title *", value=entry["title"], key=f"it_title_{idx}")
                description = st.text_area(
                    "Description *", value=entry["description"], key=f"it_desc_{idx}"
                )
                activities = st.multiselect(
                    "Activities *",
                    options["activities"],
                    default=[a for a in entry["activities"] if a in options["activities"]],
                    key=f"it_act_{idx}",
                )
                hotel = st.text_input(
                    "Hotel", value=entry["accommodation"]["hotel_name"], key=f"it_hotel_{idx}"
                )
                meals = st.multiselect(
                    "Meals",
                    options["meals"],
                    default=entry["accommodation"]["meals"],
                    key=f"it_meals_{idx}",
                )
                submit = st.form_submit_button(f"Save Day {entry['day']}")
            if not submit:
                continue
            changes = {
                "title": title,
                "description": description,
                "activities": activities,
                "accommodation": {
                    **entry["accommodation"],
                    "hotel_name": hotel,
                    "meals": meals,
                },
            }
            changes = {key: value for key, value in changes.items() if entry.get(key) != value}
            if changes and send_item(
                client,
                "patch",
                f"/{idx}",
                json={"tab": "itinerary", "name": "entries", "changes": changes},
            ):
                st.rerun()


def media_form(client: BackendClient, tab: Dict[str, Any]) -> None:
    fields = tab["fields"]
    with st.form("trip_media_form"):
        hero = st.text_input("Hero image URL *", value=fields["hero_image"] or "")
        submit = st.form_submit_button("Save Hero Image")
    if hero:
        st.image(hero, width=320)
    if submit:
        send_changes(client, "media", {"hero_image": hero or None})
    list_editor(client, "media", "gallery", "Gallery image URLs", fields["gallery"])


def pricing_form(client: BackendClient, tab: Dict[str, Any]) -> None:
    fields = tab["fields"]
    model = st.radio(
        "Pricing model",
        ["fixed", "customized"],
        index=0 if fields["pricing_model"] == "fixed" else 1,
        format_func=lambda m: "Fixed departure" if m == "fixed" else "Customized",
        horizontal=True,
    )
    if model != fields["pricing_model"]:
        if send_field(client, "pricing", "pricing_model", model):
            st.rerun()

    if model == "customized":
        with st.form("trip_pricing_custom_form"):
            price_type = st.radio(
                "Price per",
                ["person", "package"],
                index=0 if fields["price_type"] == "person" else 1,
                horizontal=True,
            )
            base_price = st.number_input("Base price *", min_value=0.0, value=float(fields["base_price"]))
            discount = st.number_input("Discount", min_value=0.0, value=float(fields["discount"]))
            submit = st.form_submit_button("Save Pricing")
        st.metric("Final price", f"{fields['final_price']:,.0f}")
        if submit:
            send_changes(
                client,
                "pricing",
                {"price_type": price_type, "base_price": base_price, "discount": discount},
            )
        return

    slots = pd.DataFrame(
        fields["date_slots"], columns=["id", "from_date", "to_date", "available_slots"]
    )
    for column in ("from_date", "to_date"):
        slots[column] = pd.to_datetime(slots[column]).dt.date
    packages = pd.DataFrame(
        fields["packages"],
        columns=[
            "id", "title", "description", "base_price", "discount",
            "booking_amount", "gst_percentage", "final_price",
        ],
    )
    with st.form("trip_pricing_fixed_form"):
        st.markdown("**Departure dates ***")
        edited_slots = st.data_editor(
            slots,
            num_rows="dynamic",
            use_container_width=True,
            column_config={
                "id": None,
                "from_date": st.column_config.DateColumn("From"),
                "to_date": st.column_config.DateColumn("To"),
                "available_slots": st.column_config.NumberColumn("Slots", min_value=0, default=10),
            },
            key="pricing_slots_editor",
        )
        st.markdown("**Packages ***")
        edited_packages = st.data_editor(
            packages,
            num_rows="dynamic",
            use_container_width=True,
            column_config={
                "id": None,
                "final_price": st.column_config.NumberColumn("Final price", disabled=True),
                "gst_percentage": st.column_config.NumberColumn("GST %", default=18),
            },
            key="pricing_packages_editor",
        )
        submit = st.form_submit_button("Save Pricing")
    if submit:
        send_changes(
            client,
            "pricing",
            {
                "date_slots": frame_records(edited_slots),
                "packages": frame_records(edited_packages, drop=("final_price",)),
            },
        )


def details_form(client: BackendClient, tab: Dict[str, Any]) -> None:
    fields = tab["fields"]
    list_editor(client, "details", "highlights", "Highlights *", fields["highlights"])
    list_editor(client, "details", "inclusions", "Inclusions *", fields["inclusions"])
    list_editor(client, "details", "exclusions", "Exclusions *", fields["exclusions"])
    faqs = pd.DataFrame(fields["faqs"], columns=["id", "question", "answer"])
    with st.form("trip_details_form"):
        st.markdown("**FAQs**")
        edited_faqs = st.data_editor(
            faqs, num_rows="dynamic", use_container_width=True, column_config={"id": None}
        )
        submit = st.form_submit_button("Save FAQs")
    if submit:
        send_changes(client, "details", {"faqs": frame_records(edited_faqs)})


def policies_form(client: BackendClient, options: Dict[str, Any], tab: Dict[str, Any]) -> None:
    fields = tab["fields"]
    templates = options["policy_templates"]
    if st.button("Fill empty policies from templates"):
        blanks = {
            name: text for name, text in templates.items() if not fields.get(name, "").strip()
        }
        send_changes(client, "policies", blanks)

    custom = pd.DataFrame(fields["custom_policies"], columns=["id", "title", "content"])
    with st.form("trip_policies_form"):
        terms = st.text_area("Terms & conditions *", value=fields["terms_conditions"], height=200)
        privacy = st.text_area("Privacy policy *", value=fields["privacy_policy"], height=200)
        payment = st.text_area("Payment terms *", value=fields["payment_terms"], height=200)
        st.markdown("**Custom policies**")
        edited_custom = st.data_editor(
            custom, num_rows="dynamic", use_container_width=True, column_config={"id": None}
        )
        submit = st.form_submit_button("Save Policies")
    if submit:
        send_changes(
            client,
            "policies",
            {
                "terms_conditions": terms,
                "privacy_policy": privacy,
                "payment_terms": payment,
                "custom_policies": frame_records(edited_custom),
            },
        )


def add_trip_tab() -> None:
    """Render the trip authoring wizard."""
    st.subheader("Add Trip")
    client = get_backend_client()

    col1, col2 = st.columns([1, 3])
    with col1:
        if st.button("Start New Trip"):
            try:
                st.session_state["trip_draft"] = client.post("/api/trips/drafts")
            except Exception as err:  # noqa: BLE001
                st.error(f"Could not start a trip draft: {err}")
    with col2:
        try:
            drafts = client.get("/api/trips/drafts")
        except Exception as err:  # noqa: BLE001
            drafts = []
            st.error(f"Could not list drafts: {err}")
        if drafts:
            labels = {
                d["draft_id"]: f"{d['title'] or 'Untitled'} ({d['progress'] * 100:.0f}%)"
                for d in drafts
            }
            draft = current_draft()
            ids = list(labels)
            selected = st.selectbox(
                "Open draft",
                ids,
                index=ids.index(draft["draft_id"]) if draft and draft["draft_id"] in ids else 0,
                format_func=labels.get,
            )
            if not draft or draft["draft_id"] != selected:
                try:
                    st.session_state["trip_draft"] = client.get(f"/api/trips/drafts/{selected}")
                except Exception as err:  # noqa: BLE001
                    st.error(f"Could not load draft: {err}")

    draft = current_draft()
    if not draft:
        st.info("Start a new trip to open the wizard.")
        return

    progress = draft["progress"]
    st.progress(progress, text=f"{progress * 100:.0f}% complete")

    tab_labels = {
        tab["id"]: f"{tab['label']} {'(done)' if tab['complete'] else ''}".strip()
        for tab in draft["tabs"]
    }
    tab_ids = list(tab_labels)
    chosen = st.radio(
        "Section",
        tab_ids,
        index=tab_ids.index(draft["active_tab"]),
        format_func=tab_labels.get,
        horizontal=True,
        key=f"wizard_tab_{draft['draft_id']}",
    )
    if chosen != draft["active_tab"]:
        try:
            draft = client.put(
                f"/api/trips/drafts/{draft['draft_id']}/active-tab", json={"tab": chosen}
            )
            st.session_state["trip_draft"] = draft
        except Exception as err:  # noqa: BLE001
            st.error(f"Could not switch section: {err}")

    tab = draft_tab(draft, draft["active_tab"])
    if draft["published"] is None:
        required_badge(tab)
        options = load_form_options(client.base_url)
        if tab["id"] == "basic":
            basic_info_form(client, options, tab)
        elif tab["id"] == "itinerary":
            itinerary_form(client, options, tab)
        elif tab["id"] == "media":
            media_form(client, tab)
        elif tab["id"] == "pricing":
            pricing_form(client, tab)
        elif tab["id"] == "details":
            details_form(client, tab)
        else:
            policies_form(client, options, tab)
    else:
        with st.expander("Published content", expanded=False):
            show_json(tab["fields"])

    st.divider()
    published = draft["published"]
    if published:
        st.success(f"Trip published: {published['url']}")
        st.session_state["last_trip_id"] = published["trip_id"]
        return
    label = "Publishing..." if draft["publishing"] else "Publish Trip"
    if st.button(label, type="primary", disabled=not draft["can_publish"]):
        try:
            st.session_state["trip_draft"] = client.post(
                f"/api/trips/drafts/{draft['draft_id']}/publish"
            )
        except Exception as err:  # noqa: BLE001
            st.error(f"Publish failed: {err}")
        else:
            st.rerun()


# --- Trip page ---


def enquiry_form(client: BackendClient, trip_id: str) -> None:
    """Booking and enquiry request form shown on the trip page."""
    kind = st.radio("Request", ["booking", "enquiry"], horizontal=True, key="trip_request_kind")
    with st.form("trip_enquiry_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            name = st.text_input("Name *")
            email = st.text_input("Email *")
            mobile = st.text_input("Mobile *")
        with col2:
            adults = st.number_input("Adults", min_value=1, value=2, step=1)
            children = st.number_input("Children", min_value=0, value=0, step=1)
            travel_from = st.date_input("Preferred date", value=None)
        comments = st.text_area("Message")
        submit = st.form_submit_button("Book Now" if kind == "booking" else "Send Enquiry")
    if submit:
        payload = {
            "name": name,
            "email": email,
            "mobile": mobile,
            "no_of_adults": int(adults),
            "no_of_children": int(children),
            "travel_date_from": travel_from.isoformat() if travel_from else None,
            "comments": comments or None,
            "kind": kind,
        }
        try:
            client.post(f"/api/trips/{trip_id}/enquiries", json=payload)
            st.success("Thank you! Our travel expert will contact you shortly.")
        except Exception as err:  # noqa: BLE001
            st.error(f"Request failed: {err}")


def trip_details_tab() -> None:
    """Read-only view of a published trip."""
    st.subheader("Trip Details")
    client = get_backend_client()
    trip_id = st.text_input("Trip ID", value=st.session_state.get("last_trip_id", ""))
    if not trip_id:
        st.info("Enter the ID of a published trip.")
        return
    try:
        trip = client.get(f"/api/trips/{trip_id.strip()}")
    except Exception as err:  # noqa: BLE001
        st.error(f"Could not load trip: {err}")
        return

    basic = trip.get("basic_info", {})
    media = trip.get("media", {})
    pricing = trip.get("pricing", {})
    details = trip.get("details", {})
    policies = trip.get("policies", {})

    if media.get("hero_image"):
        st.image(media["hero_image"], use_container_width=True)
    st.header(basic.get("trip_title", "Untitled trip"))
    st.caption(
        f"{basic.get('destination')} | {basic.get('days')} days / {basic.get('nights')} nights"
        f" | {basic.get('hotel_category')} star stay"
    )
    st.write(basic.get("trip_overview"))

    if pricing.get("pricing_model") == "customized":
        st.metric(
            f"Price per {pricing.get('price_type', 'person')}",
            f"{pricing.get('final_price', 0):,.0f}",
            delta=f"-{pricing.get('discount', 0):,.0f}" if pricing.get("discount") else None,
        )
    else:
        st.markdown("**Packages**")
        render_table(pricing.get("packages", []), height=180)
        st.markdown("**Departure dates**")
        render_table(pricing.get("date_slots", []), height=180)

    st.markdown("### Itinerary")
    for entry in trip.get("itinerary", []):
        with st.expander(entry.get("title") or f"Day {entry.get('day')}"):
            st.write(entry.get("description"))
            if entry.get("activities"):
                st.caption("Activities: " + ", ".join(entry["activities"]))
            hotel = (entry.get("accommodation") or {}).get("hotel_name")
            if hotel:
                st.caption(f"Stay: {hotel}")

    col1, col2, col3 = st.columns(3)
    for column, title, key in (
        (col1, "Highlights", "highlights"),
        (col2, "Inclusions", "inclusions"),
        (col3, "Exclusions", "exclusions"),
    ):
        with column:
            st.markdown(f"**{title}**")
            for item in details.get(key, []):
                st.markdown(f"- {item}")
    for faq in details.get("faqs", []):
        with st.expander(faq.get("question") or "FAQ"):
            st.write(faq.get("answer"))

    for title, key in (
        ("Terms & Conditions", "terms_conditions"),
        ("Privacy Policy", "privacy_policy"),
        ("Payment Terms", "payment_terms"),
    ):
        with st.expander(title):
            st.text(policies.get(key, ""))

    st.markdown("### Book this trip")
    enquiry_form(client, trip["id"])


# --- Activity & settings ---


def activity_tab() -> None:
    """Display live activity log."""
    st.subheader("Activity Log")
    client = get_backend_client()
    source = st.selectbox("Source", ["all", "data-store", "wizard"])
    params = None if source == "all" else {"source": source}
    try:
        activity = client.get("/api/system/activity", params=params)
        render_table(list(reversed(activity)), height=300)
    except Exception as err:  # noqa: BLE001
        st.error(f"Could not load activity log: {err}")

    if st.button("Clear Activity Log"):
        try:
            client.delete("/api/system/activity")
            st.success("Activity log cleared.")
        except Exception as err:  # noqa: BLE001
            st.error(f"Failed to clear activity log: {err}")


def settings_tab() -> None:
    """Render settings controls."""
    st.subheader("Connection Settings")
    backend_url = st.text_input(
        "Backend URL",
        value=st.session_state.get("backend_url", DEFAULT_BACKEND_URL),
    )
    if backend_url != st.session_state.get("backend_url"):
        st.session_state["backend_url"] = backend_url
        st.success(f"Backend URL updated to {backend_url}")

    st.markdown(
        """
        **Usage Tips**
        - Start FastAPI backend: `uvicorn backend.app.main:app --reload`
        - Start Streamlit UI: `streamlit run frontend/app.py`
        - Provide data store credentials (`SUPABASE_URL`, `SUPABASE_KEY`) via `.env.local` or environment variables.
        - Set `USE_MOCK_DATA=true` to work against in-memory demo leads.
        """
    )


def main() -> None:
    """Application entry point."""
    st.set_page_config(page_title="Wandercraft Back Office", layout="wide")
    if "backend_url" not in st.session_state:
        st.session_state["backend_url"] = DEFAULT_BACKEND_URL

    tabs = st.tabs(
        [
            "Dashboard",
            "Leads",
            "Add Trip",
            "Trip Details",
            "Activity Log",
            "Settings",
        ]
    )
    with tabs[0]:
        dashboard_tab()
    with tabs[1]:
        leads_tab()
    with tabs[2]:
        add_trip_tab()
    with tabs[3]:
        trip_details_tab()
    with tabs[4]:
        activity_tab()
    with tabs[5]:
        settings_tab()


if __name__ == "__main__":
    main()
