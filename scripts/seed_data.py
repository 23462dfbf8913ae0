#!/usr/bin/env python3
"""
Seed script: creates owners, bookers, items and booking requests via the API (no direct DB).
Some requests are approved and some rejected so every owner/booker state filter has data.
Run: API must be running.
  python scripts/seed_data.py
  python scripts/seed_data.py --owners 5 --bookers 10 --items-per-owner 4
"""

import argparse
import random
from datetime import datetime, timedelta, timezone

import httpx

API_BASE = "http://localhost:8000/api/v1"

NAMES = [
    "Cordless drill", "Camping tent", "Pressure washer", "Ladder 3m", "Projector",
    "Mountain bike", "Kayak", "Stand mixer", "Sewing machine", "Tile cutter",
    "Snowboard", "Folding table", "Party speaker", "Telescope", "Circular saw",
]

DESCRIPTIONS = [
    "Works well, comes with case and charger.",
    "Lightly used, please return clean.",
    "Great for weekend projects.",
    "Pick up in the evening only.",
    "Includes spare parts and manual.",
]


def register_and_login(client: httpx.Client, email: str, name: str, errors: list) -> dict | None:
    password = "password123"
    r = client.post("/users/register", json={"email": email, "password": password, "name": name})
    if r.status_code not in (200, 201, 409):
        errors.append(f"Register {email}: {r.status_code} {r.text[:80]}")
        return None
    r = client.post("/users/login", json={"email": email, "password": password})
    if r.status_code != 200:
        errors.append(f"Login {email}: {r.status_code}")
        return None
    body = r.json()
    return {"id": body["user_id"], "headers": {"Authorization": f"Bearer {body['access_token']}"}}


def main():
    ap = argparse.ArgumentParser(description="Seed users, items and bookings via API")
    ap.add_argument("--owners", type=int, default=5)
    ap.add_argument("--bookers", type=int, default=10)
    ap.add_argument("--items-per-owner", type=int, default=4)
    ap.add_argument("--bookings-per-booker", type=int, default=3)
    ap.add_argument("--base-url", default=API_BASE, help="API base URL")
    args = ap.parse_args()

    errors: list[str] = []
    items: list[dict] = []
    created_bookings = 0
    decided = 0

    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        owners = [
            u for i in range(args.owners)
            if (u := register_and_login(client, f"owner{i + 1}@example.com", f"Owner {i + 1}", errors))
        ]
        bookers = [
            u for i in range(args.bookers)
            if (u := register_and_login(client, f"booker{i + 1}@example.com", f"Booker {i + 1}", errors))
        ]
        print(f"Users: {len(owners)} owners, {len(bookers)} bookers")

        owner_by_id = {o["id"]: o for o in owners}
        for owner in owners:
            for _ in range(args.items_per_owner):
                r = client.post(
                    "/items",
                    headers=owner["headers"],
                    json={
                        "name": random.choice(NAMES),
                        "description": random.choice(DESCRIPTIONS),
                        "available": random.random() > 0.1,
                    },
                )
                if r.status_code == 201:
                    items.append(r.json())
                else:
                    errors.append(f"Item for owner {owner['id']}: {r.status_code}")
        print(f"Items: {len(items)}")

        available = [i for i in items if i["available"]]
        now = datetime.now(timezone.utc)
        for booker in bookers:
            for _ in range(args.bookings_per_booker):
                if not available:
                    break
                item = random.choice(available)
                start = now + timedelta(days=random.randint(1, 30), hours=random.randint(0, 23))
                end = start + timedelta(days=random.randint(1, 5))
                r = client.post(
                    "/bookings",
                    headers=booker["headers"],
                    json={"item_id": item["id"], "start": start.isoformat(), "end": end.isoformat()},
                )
                if r.status_code != 201:
                    errors.append(f"Booking item {item['id']}: {r.status_code} {r.text[:80]}")
                    continue
                created_bookings += 1
                booking = r.json()
                roll = random.random()
                if roll < 0.7:
                    owner = owner_by_id[item["owner_id"]]
                    approved = "true" if roll < 0.5 else "false"
                    r = client.patch(f"/bookings/{booking['id']}?approved={approved}", headers=owner["headers"])
                    if r.status_code == 200:
                        decided += 1
                    else:
                        errors.append(f"Decide booking {booking['id']}: {r.status_code}")

    print(f"\nDone. Bookings requested: {created_bookings}, decided by owners: {decided}")
    if errors:
        print(f"Errors ({len(errors)}):")
        for e in errors[:15]:
            print("  ", e)
        if len(errors) > 15:
            print("  ... and", len(errors) - 15, "more")


if __name__ == "__main__":
    main()
