#!/usr/bin/env python3
"""
Create the database tables and optionally load location reference data.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --locations data/locations.json

The locations file holds ``{"districts": [...], "upazilas": [...]}`` with
the same fields as the reference tables.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import delete  # noqa: E402

from app.core.redis_client import CacheManager, get_redis_client  # noqa: E402
from app.database import engine  # noqa: E402
from app.models import metadata  # noqa: E402
from app.models.locations import districts, upazilas  # noqa: E402
from app.services.location_service import LocationService  # noqa: E402


def _rows(entries: list[dict]) -> list[dict]:
    # executemany needs the same keys in every row
    return [{"bn_name": None, **entry} for entry in entries]


async def init_db(locations_file: Path | None = None) -> None:
    """Create all tables and replace the location lists if a file is given."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
        print("✓ Tables created")

        if locations_file:
            data = json.loads(locations_file.read_text(encoding="utf-8"))
            await conn.execute(delete(upazilas))
            await conn.execute(delete(districts))
            if data.get("districts"):
                await conn.execute(districts.insert(), _rows(data["districts"]))
            if data.get("upazilas"):
                await conn.execute(upazilas.insert(), _rows(data["upazilas"]))
            print(
                f"✓ Loaded {len(data.get('districts', []))} districts and "
                f"{len(data.get('upazilas', []))} upazilas"
            )

    if locations_file:
        if LocationService(CacheManager(get_redis_client())).invalidate():
            print("✓ Location cache cleared")
        else:
            print("✗ Location cache could not be cleared, it expires on its own")

    await engine.dispose()


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Initialize the database")
    parser.add_argument("--locations", type=Path, help="JSON file with districts and upazilas")
    args = parser.parse_args()

    asyncio.run(init_db(args.locations))


if __name__ == "__main__":
    main()
