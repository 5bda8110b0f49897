from __future__ import annotations

import argparse
import csv
import random
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path

from caregiving_time.csv_io import REQUIRED_COLUMNS
from caregiving_time.models import HOME_LOCATION_NAME
from caregiving_time.timeutils import iso_instant, parse_instant


@dataclass(frozen=True, slots=True)
class Place:
    name: str
    lat: float
    lon: float


def generate_events(
    *,
    users: list[str],
    days: int,
    seed: int,
    start: datetime,
    places: list[Place],
) -> list[dict[str, str]]:
    """Generate fake events: each user leaves home, visits a few places, returns."""

    rng = random.Random(seed)
    home = Place(HOME_LOCATION_NAME, 38.7223, -9.1393)
    out: list[dict[str, str]] = []

    def emit(user: str, place: Place, event_type: str, at: datetime) -> None:
        out.append(
            {
                "user_id": user,
                "location_name": place.name,
                "coordinates_latitude": f"{place.lat + rng.uniform(-0.0005, 0.0005):.6f}",
                "coordinates_longitude": f"{place.lon + rng.uniform(-0.0005, 0.0005):.6f}",
                "timestamp": iso_instant(at),
                "event_type": event_type,
            }
        )

    for user in users:
        for day in range(days):
            cur = start + timedelta(days=day, minutes=rng.uniform(0, 90))
            emit(user, home, "LEAVE", cur)
            for _ in range(rng.randint(1, 3)):
                # Travel usually takes minutes, sometimes long enough to fall outside the relevance window
                if rng.random() < 0.1:
                    cur += timedelta(minutes=rng.uniform(130, 240))
                else:
                    cur += timedelta(minutes=rng.uniform(5, 40))
                place = rng.choice(places)
                emit(user, place, "ENTER", cur)
                cur += timedelta(minutes=rng.uniform(30, 180))
                emit(user, place, "LEAVE", cur)
            cur += timedelta(minutes=rng.uniform(5, 40))
            emit(user, home, "ENTER", cur)

    # Ensure stable order by time
    out.sort(key=lambda r: r["timestamp"])
    return out


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake events CSV for demo/testing (privacy-safe).")
    p.add_argument("--out", type=str, default="sample_data/events.csv", help="Output CSV path")
    p.add_argument("--users", type=int, default=3, help="Number of users")
    p.add_argument("--days", type=int, default=7, help="Number of days per user")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument(
        "--start",
        type=str,
        default="2024-01-01T07:00:00Z",
        help="First day's start, e.g. '2024-01-01T07:00:00Z'",
    )
    args = p.parse_args()

    start = parse_instant(args.start, "UTC").astimezone(UTC)
    places = [
        Place("GRANDMA", 38.7369, -9.1427),
        Place("CLINIC", 38.7480, -9.1530),
        Place("PHARMACY", 38.7150, -9.1400),
        Place("SCHOOL", 38.7600, -9.1600),
    ]

    rows = generate_events(
        users=[f"u{i + 1}" for i in range(args.users)],
        days=args.days,
        seed=args.seed,
        start=start,
        places=places,
    )
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    with out_path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=list(REQUIRED_COLUMNS))
        w.writeheader()
        w.writerows(rows)

    print(f"Generated: {out_path} (rows={len(rows)}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
