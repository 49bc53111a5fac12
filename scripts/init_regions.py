"""
Seed the regions table from the static pricing configuration.

Safe to re-run: existing regions are updated in place.
"""

import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bingoo.database.session import get_db_context
from bingoo.services.region_service import RegionService


def main():
    print("=" * 50)
    print("Seeding regions")
    print("=" * 50)

    with get_db_context() as db:
        records = RegionService(db).seed_regions()

    for record in records:
        print(
            f"  {record.id:<16} {record.currency}  "
            f"{record.cost_per_point}/point, {record.points_per_play} points per play"
        )
    print(f"\n{len(records)} regions ready")


if __name__ == "__main__":
    main()
