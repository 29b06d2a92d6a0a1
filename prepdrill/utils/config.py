"""
Runtime configuration for PrepDrill.

Values come from the environment, after loading the project's .env file:
    PREPDRILL_DATA_DIR      directory holding CSV datasets (default: data)
    PREPDRILL_CATALOG       dataset catalog YAML (default: <data dir>/datasets.yaml)
    PREPDRILL_PROGRESS_DB   SQLite progress file (default: ~/.prepdrill/progress.db)
    PREPDRILL_LOG_LEVEL     logging level name (default: INFO)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from prepdrill.classroom.storage import DEFAULT_PROGRESS_DB


PROJECT_ROOT = Path(__file__).parent.parent.parent

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    catalog_path: Path
    progress_db: Path
    log_level: str


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Build settings from the environment.

    Args:
        env_file: .env file to load first (default: <project root>/.env).
            Variables already set in the environment take precedence.
    """
    load_dotenv(env_file or PROJECT_ROOT / ".env")

    data_dir = Path(os.environ.get("PREPDRILL_DATA_DIR", "data"))
    catalog = os.environ.get("PREPDRILL_CATALOG")
    progress_db = os.environ.get("PREPDRILL_PROGRESS_DB")

    return Settings(
        data_dir=data_dir,
        catalog_path=Path(catalog) if catalog else data_dir / "datasets.yaml",
        progress_db=Path(progress_db).expanduser() if progress_db else DEFAULT_PROGRESS_DB,
        log_level=os.environ.get("PREPDRILL_LOG_LEVEL", "INFO").upper(),
    )


def setup_logging(level: str = "INFO"):
    """Configure root logging for entry points (app, scripts)."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
    )
