#!/usr/bin/env python
"""Check and repair the stored category tree.

This script:
1. Loads every category from the configured database
2. Re-derives path and level from the parent links
3. Re-ranks every sibling group densely
4. Reports what differs and, with --fix, writes the repairs

Usage:
    # Report inconsistencies only
    python scripts/check_category_tree.py

    # Persist the repaired tree
    python scripts/check_category_tree.py --fix

    # Print dashboard statistics
    python scripts/check_category_tree.py --stats
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from category_admin.core.display_order import normalize_all_groups
from category_admin.core.outcome import CycleDetectedError
from category_admin.core.path_codec import rebuild_paths
from category_admin.core.stats import compute_stats
from category_admin.infra.database import close_db_engine, create_tables
from category_admin.infra.logging import get_logger, setup_logging
from category_admin.services.category_repository import SqlCategoryRepository, diff_snapshots

setup_logging()
logger = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Check and repair the stored category tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--fix",
        action="store_true",
        help="Write the repaired paths, levels and display orders",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print category statistics and exit",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=10,
        help="Number of top categories shown with --stats (default: 10)",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before checking",
    )

    return parser.parse_args()


async def run(args: argparse.Namespace) -> int:
    repository = SqlCategoryRepository()

    if args.create_tables:
        await create_tables()

    snapshot = await repository.load_snapshot()

    if args.stats:
        stats = compute_stats(snapshot, args.top)
        print(f"\nCategories: {stats.total} ({stats.active} active, {stats.inactive} inactive)")
        print(f"Products:   {stats.total_products} in {stats.categories_with_products} categories")
        print("\nBy level:")
        for level, count in stats.by_level.items():
            print(f"  {level}: {count}")
        print("\nTop categories:")
        for record in stats.top_categories:
            print(f"  {record.product_count:>6}  {record.name} ({record.id})")
        return 0

    try:
        repaired = normalize_all_groups(rebuild_paths(snapshot))
    except CycleDetectedError as e:
        logger.error("Parent cycle in stored categories", category_id=e.node_id, chain=e.visited)
        print(f"Error: parent cycle through {' -> '.join(e.visited)}")
        print("Fix the parent_id of one of these categories by hand, then rerun")
        return 1

    changes = diff_snapshots(snapshot, repaired)
    print(f"\nChecked {len(snapshot)} categories")
    if changes.is_empty:
        print("Tree is consistent")
        return 0

    print(f"{len(changes.updated)} categories need repair:")
    before = {record.id: record for record in snapshot}
    for record in changes.updated:
        old = before[record.id]
        print(
            f"  {record.id}: parent {old.parent_id} -> {record.parent_id}, "
            f"level {old.level} -> {record.level}, "
            f"order {old.display_order} -> {record.display_order}"
        )

    if not args.fix:
        print("\nRun again with --fix to write the repairs")
        return 1

    await repository.save_snapshot(snapshot, repaired)
    print("\nRepairs written")
    return 0


async def main() -> int:
    """Main entry point."""
    args = parse_args()
    try:
        return await run(args)
    finally:
        await close_db_engine()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
