from datetime import date

from backend.app.services.lead_filters import (
    filter_leads,
    group_by_status,
    matches_search,
    summarize_leads,
)

LEADS = [
    {
        "id": "a",
        "name": "Priya Sharma",
        "email": "priya@example.com",
        "mobile": "9820012345",
        "destination_type": "Family Packages",
        "status": "new",
        "priority": "high",
        "follow_up_date": "2025-11-01",
    },
    {
        "id": "b",
        "name": "Rahul Kumar",
        "email": "rahul@example.com",
        "mobile": "9811122233",
        "destination_type": "Honeymoon Packages",
        "status": "quoted",
        "priority": "medium",
        "follow_up_date": "2025-11-20",
    },
    {
        "id": "c",
        "name": "Amit Patel",
        "email": "amit@example.com",
        "mobile": None,
        "destination_type": None,
        "status": "booked",
        "priority": "low",
        "follow_up_date": "2025-10-01",
    },
]


def test_search_is_case_insensitive_on_text_fields():
    assert matches_search(LEADS[0], "PRIYA")
    assert matches_search(LEADS[1], "honeymoon")
    assert matches_search(LEADS[1], "98111")
    assert not matches_search(LEADS[2], "98")


def test_filter_by_search_and_status():
    assert [lead["id"] for lead in filter_leads(LEADS, "example.com")] == ["a", "b", "c"]
    assert [lead["id"] for lead in filter_leads(LEADS, "", "quoted")] == ["b"]
    assert [lead["id"] for lead in filter_leads(LEADS, "packages", "new")] == ["a"]
    assert filter_leads(LEADS, "nobody") == []


def test_group_by_status_keeps_pipeline_order():
    columns = group_by_status(LEADS)
    assert [column["status"] for column in columns] == [
        "new",
        "contacted",
        "quoted",
        "awaiting_payment",
        "booked",
        "failed",
    ]
    counts = {column["status"]: column["count"] for column in columns}
    assert counts["new"] == 1
    assert counts["contacted"] == 0
    assert counts["booked"] == 1


def test_summary_counts_and_follow_ups():
    summary = summarize_leads(LEADS, today=date(2025, 11, 10))
    assert summary["total"] == 3
    assert summary["by_status"]["quoted"] == 1
    assert summary["by_priority"] == {"low": 1, "medium": 1, "high": 1}
    assert summary["conversion_rate"] == round(1 / 3, 4)
    # booked leads never count as due
    assert summary["follow_ups_due"] == 1


def test_summary_of_no_leads():
    summary = summarize_leads([], today=date(2025, 11, 10))
    assert summary["total"] == 0
    assert summary["conversion_rate"] == 0.0
    assert summary["follow_ups_due"] == 0
