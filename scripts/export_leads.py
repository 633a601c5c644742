#!/usr/bin/env python3
"""Export leads and their comment threads into a local SQLite database.

The script reads the hosted data store's REST interface page by page and
stores the results in two tables:

* `leads`: one row per lead.
* `lead_comments`: one row per comment, linked to its lead.

Credentials are read from CLI flags or `SUPABASE_URL` / `SUPABASE_KEY`
environment variables (optionally loaded from a dotenv file).
"""

from __future__ import annotations

import argparse
import json
import os
import sqlite3
from typing import Any, Dict, Iterable, Iterator, List, Tuple

import httpx
from dotenv import load_dotenv


def parse_args() -> argparse.Namespace:
    """Configure CLI arguments."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--env-file",
        default=".env.local",
        help="Path to the dotenv file with data store credentials (default: %(default)s)",
    )
    parser.add_argument(
        "--url",
        help="Project base url (falls back to SUPABASE_URL env var)",
    )
    parser.add_argument(
        "--key",
        help="Project API key (falls back to SUPABASE_KEY env var)",
    )
    parser.add_argument(
        "--db-path",
        default="leads.db",
        help="Destination SQLite database path (default: %(default)s)",
    )
    parser.add_argument(
        "--page-size",
        type=int,
        default=500,
        help="Number of leads per request (default: %(default)s)",
    )
    parser.add_argument(
        "--status",
        default=None,
        help="Only export leads with this pipeline status",
    )
    parser.add_argument(
        "--skip-comments",
        action="store_true",
        help="Do not download comment threads",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="HTTP request timeout in seconds (default: %(default)s)",
    )
    return parser.parse_args()


def load_credentials(args: argparse.Namespace) -> Tuple[str, str]:
    """Resolve the project url and API key."""
    if args.env_file and os.path.exists(args.env_file):
        load_dotenv(args.env_file, override=False)

    url = args.url or os.getenv("SUPABASE_URL")
    key = args.key or os.getenv("SUPABASE_KEY")
    if not url or not key:
        raise SystemExit("Missing credentials. Provide --url/--key or set SUPABASE_URL/SUPABASE_KEY.")
    return url.rstrip("/"), key


def iter_leads(
    client: httpx.Client, page_size: int, status: str | None
) -> Iterator[Dict[str, Any]]:
    """Yield leads newest first, one page at a time."""
    offset = 0
    while True:
        params: Dict[str, Any] = {
            "select": "*",
            "order": "created_at.desc",
            "limit": page_size,
            "offset": offset,
        }
        if status:
            params["status"] = f"eq.{status}"
        response = client.get("/leads", params=params)
        response.raise_for_status()
        rows: List[Dict[str, Any]] = response.json()
        yield from rows
        if len(rows) < page_size:
            break
        offset += page_size


def fetch_comments(client: httpx.Client, lead_id: str) -> List[Dict[str, Any]]:
    response = client.get(
        "/lead_comments",
        params={"select": "*", "lead_id": f"eq.{lead_id}", "order": "created_at.desc"},
    )
    response.raise_for_status()
    return response.json()


def ensure_schema(connection: sqlite3.Connection) -> None:
    """Create the target tables if they do not exist."""
    connection.execute(
        """
        CREATE TABLE IF NOT EXISTS leads (
            id TEXT PRIMARY KEY,
            name TEXT,
            email TEXT,
            mobile TEXT,
            destination_type TEXT,
            status TEXT,
            priority TEXT,
            assigned_to TEXT,
            follow_up_date TEXT,
            created_at TEXT,
            raw_json TEXT NOT NULL
        )
        """
    )
    connection.execute(
        """
        CREATE TABLE IF NOT EXISTS lead_comments (
            id TEXT PRIMARY KEY,
            lead_id TEXT NOT NULL,
            user_name TEXT,
            comment TEXT,
            created_at TEXT,
            FOREIGN KEY (lead_id) REFERENCES leads (id) ON DELETE CASCADE
        )
        """
    )
    connection.commit()


def upsert_lead(connection: sqlite3.Connection, lead: Dict[str, Any]) -> None:
    """Insert or update one lead row."""
    connection.execute(
        """
        INSERT OR REPLACE INTO leads (
            id, name, email, mobile, destination_type, status, priority,
            assigned_to, follow_up_date, created_at, raw_json
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            lead.get("id"),
            lead.get("name"),
            lead.get("email"),
            lead.get("mobile"),
            lead.get("destination_type"),
            lead.get("status"),
            lead.get("priority"),
            lead.get("assigned_to"),
            lead.get("follow_up_date"),
            lead.get("created_at"),
            json.dumps(lead, ensure_ascii=False),
        ),
    )


def replace_comments(
    connection: sqlite3.Connection,
    lead_id: str,
    comments: Iterable[Dict[str, Any]],
) -> int:
    """Replace the stored thread of a lead and return the number of inserted rows."""
    connection.execute("DELETE FROM lead_comments WHERE lead_id = ?", (lead_id,))
    inserted = 0
    for comment in comments:
        connection.execute(
            """
            INSERT OR REPLACE INTO lead_comments (id, lead_id, user_name, comment, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                comment.get("id"),
                lead_id,
                comment.get("user_name"),
                comment.get("comment"),
                comment.get("created_at"),
            ),
        )
        inserted += 1
    return inserted


def main() -> None:
    args = parse_args()
    url, key = load_credentials(args)
    headers = {"apikey": key, "Authorization": f"Bearer {key}"}

    connection = sqlite3.connect(args.db_path)
    total_leads = 0
    total_comments = 0
    try:
        ensure_schema(connection)
        with httpx.Client(
            base_url=f"{url}/rest/v1", headers=headers, timeout=args.timeout
        ) as client:
            for lead in iter_leads(client, args.page_size, args.status):
                lead_id = lead.get("id")
                if lead_id is None:
                    continue
                upsert_lead(connection, lead)
                total_leads += 1
                if not args.skip_comments:
                    comments = fetch_comments(client, str(lead_id))
                    total_comments += replace_comments(connection, str(lead_id), comments)
            connection.commit()
    finally:
        connection.close()

    print(f"Stored {total_leads} leads and {total_comments} comments in {args.db_path}.")


if __name__ == "__main__":
    main()
