#!/usr/bin/env python3
"""
validate_dataset.py - Check drill datasets before adding them to the catalog.

For each dataset this script:
  - Loads and validates every row the same way the app does
  - Reports rows that share a progress key (they would share mastery)
  - Reports items with no expected preposition / case
  - Optionally prints stored progress for the dataset

Usage:
  python scripts/validate_dataset.py data/verbs_sample.csv
  python scripts/validate_dataset.py --all
  python scripts/validate_dataset.py --all --progress
"""

import argparse
import logging
import sys
from pathlib import Path

# Project root for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from prepdrill.classroom import (
    DatasetLoadError,
    DatasetLoader,
    ProgressStore,
    SQLiteKeyValueStore,
    derive_keys,
    describe_key,
    find_key_collisions,
    load_catalog,
)
from prepdrill.utils import load_settings, setup_logging

logger = logging.getLogger(__name__)


def validate(loader: DatasetLoader, dataset_id: str, source: str, store: ProgressStore | None) -> bool:
    """
    Validate one dataset and log a report.

    Returns:
        True if the dataset loads without collisions
    """
    logger.info(f"[{dataset_id}] {source}")
    try:
        items = loader.load(source)
    except DatasetLoadError as e:
        logger.error(f"  FAILED ({e.kind.value}): {e.message}")
        return False

    collisions = find_key_collisions(items)
    for key, rows in collisions.items():
        logger.warning(f"  Rows {rows} share key: {describe_key(key)}")

    no_prep = sum(1 for item in items if not item.expected_preposition)
    no_case = sum(1 for item in items if not item.expected_case)
    logger.info(f"  Items: {len(items)}")
    logger.info(f"  Without preposition: {no_prep}")
    logger.info(f"  Without case: {no_case}")

    if store is not None:
        snapshot = store.load(dataset_id)
        keys = set(derive_keys(items))
        learned = len(keys & snapshot.learned_keys)
        orphaned = len(set(snapshot.attempts) - keys)
        logger.info(f"  Learned: {learned}/{len(keys)} (score {snapshot.score})")
        if orphaned:
            logger.info(f"  Stored records with no matching row: {orphaned}")

    return not collisions


def main():
    parser = argparse.ArgumentParser(description="Validate drill datasets")
    parser.add_argument("sources", nargs="*", help="CSV paths or URLs")
    parser.add_argument("--all", action="store_true", help="Validate every catalog dataset")
    parser.add_argument("--progress", action="store_true", help="Show stored progress per dataset")
    args = parser.parse_args()

    settings = load_settings()
    setup_logging(settings.log_level)

    targets = [(source, source) for source in args.sources]
    if args.all:
        try:
            catalog = load_catalog(settings.catalog_path)
        except FileNotFoundError as e:
            logger.error(str(e))
            sys.exit(1)
        targets.extend((entry.id, entry.source) for entry in catalog)

    if not targets:
        parser.error("give at least one source or --all")

    loader = DatasetLoader(settings.data_dir)
    store = ProgressStore(SQLiteKeyValueStore(settings.progress_db)) if args.progress else None

    results = [validate(loader, dataset_id, source, store) for dataset_id, source in targets]

    logger.info("")
    logger.info(f"{sum(results)}/{len(results)} datasets OK")
    sys.exit(0 if all(results) else 1)


if __name__ == "__main__":
    main()
