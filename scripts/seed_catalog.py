"""Load the workout and diet catalog from a YAML file.

Creates the tables if needed, then inserts (or merges, for entries carrying
an id) every workout and diet in the file.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from loguru import logger

from fitplan.catalog import CatalogError, read_catalog, seed_catalog
from fitplan.config.settings import settings
from fitplan.core.logger import setup_logger
from fitplan.db.models import Base
from fitplan.db.session import get_engine, get_session

DEFAULT_CATALOG = _project_root / "data" / "catalog.yaml"


def main(path: Path, replace: bool) -> int:
    try:
        catalog = read_catalog(path)
    except (OSError, CatalogError) as e:
        logger.error(f"Could not load catalog from {path}: {e}")
        return 1

    Base.metadata.create_all(bind=get_engine())
    with get_session() as session:
        workouts, diets = seed_catalog(session, catalog, replace=replace)

    print(f"✅ Seeded {workouts} workouts and {diets} diets into {settings.database_url}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the workout and diet catalog from YAML")
    parser.add_argument(
        "--file",
        type=Path,
        default=DEFAULT_CATALOG,
        help=f"Catalog YAML file (default: {DEFAULT_CATALOG})",
    )
    parser.add_argument(
        "--replace",
        action="store_true",
        help="Delete the existing catalog before loading",
    )
    args = parser.parse_args()

    setup_logger(level=settings.log_level, json_logs=settings.log_json)
    sys.exit(main(args.file, args.replace))
