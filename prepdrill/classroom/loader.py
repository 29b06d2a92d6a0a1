"""
DatasetLoader - Load drill items from CSV datasets.

Turns a CSV source (local path or http(s) URL) into validated Items:
- Column names are mapped onto Item fields once, here
- Rows without a primary text are dropped
- Missing, empty, and malformed sources raise DatasetLoadError

Also loads the dataset catalog (datasets.yaml).
"""

import http.client
import io
import json
import logging
import re
from pathlib import Path
from typing import Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

import pandas as pd
import yaml
from pydantic import ValidationError

from prepdrill.schemas import DatasetEntry, FALLBACK_LANGUAGE, Item

from .errors import DatasetLoadError, DatasetLoadErrorKind
from .keys import describe_key, find_key_collisions


logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path("data")
USER_AGENT = "PrepDrill/1.0 (German preposition trainer)"

PRIMARY_TEXT_COLUMNS = ("Verb", "Sentence", "Text")
PREPOSITION_COLUMN = "Preposition"
CASE_COLUMN = "Case"
WRONG_PREPOSITIONS_COLUMN = "WrongPrepositions"
EXAMPLE_COLUMNS = ("Exemple", "Example")

TRANSLATION_COLUMN = re.compile(r'^Translation(?:_([A-Za-z]{2}))?$')
EXAMPLE_TRANSLATION_COLUMN = re.compile(r'^ExampleTranslation(?:_([A-Za-z]{2}))?$')


def parse_wrong_prepositions(raw: str) -> list[str]:
    """
    Parse the wrong-candidate cell.

    Accepts a JSON list ('["auf", "in"]') or a comma-separated string ('auf, in').
    """
    raw = (raw or "").strip()
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return [p.strip() for p in raw.split(",") if p.strip()]
    if isinstance(parsed, list):
        return [str(p).strip() for p in parsed if str(p).strip()]
    return [str(parsed).strip()]


def _looks_like_html(text: str) -> bool:
    head = text.lstrip()[:100].lower()
    return head.startswith("<!doctype html") or head.startswith("<html")


def _first_present(columns: list[str], candidates: tuple[str, ...]) -> Optional[str]:
    for name in candidates:
        if name in columns:
            return name
    return None


def _language_columns(columns: list[str], pattern: re.Pattern) -> dict[str, str]:
    """Map language code -> column name. A bare column counts as English."""
    result = {}
    for column in columns:
        match = pattern.match(column)
        if match:
            lang = (match.group(1) or FALLBACK_LANGUAGE).lower()
            # Explicit language columns win over the bare one
            if lang not in result or match.group(1):
                result[lang] = column
    return result


class DatasetLoader:
    """
    Load datasets from CSV files or URLs.

    Relative paths are resolved against the data directory.
    """

    def __init__(self, data_dir: str | Path = DEFAULT_DATA_DIR, timeout: float = 10.0):
        """
        Initialize loader.

        Args:
            data_dir: Directory that relative sources are resolved against
            timeout: Seconds to wait for remote sources
        """
        self.data_dir = Path(data_dir)
        self.timeout = timeout

    def load(self, source: str) -> list[Item]:
        """
        Load and validate all items of a dataset.

        Raises:
            DatasetLoadError: source not found, empty, or malformed
        """
        logger.info(f"Loading dataset: {source}")
        text = self._read_source(source)

        if _looks_like_html(text):
            raise DatasetLoadError(
                DatasetLoadErrorKind.MALFORMED, source,
                "Expected CSV but the source returned an HTML page",
            )

        frame = self._parse(text, source)
        items = self._to_items(frame, source)

        collisions = find_key_collisions(items)
        for key, rows in collisions.items():
            logger.warning(f"Rows {rows} share one progress key ({describe_key(key)})")

        logger.info(f"Loaded {len(items)} items from {source}")
        return items

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    def _read_source(self, source: str) -> str:
        if source.startswith(("http://", "https://")):
            return self._fetch_url(source)

        path = Path(source)
        if not path.is_absolute():
            path = self.data_dir / path
        if not path.is_file():
            raise DatasetLoadError(DatasetLoadErrorKind.NOT_FOUND, source, "CSV file not found")
        try:
            return path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise DatasetLoadError(DatasetLoadErrorKind.MALFORMED, source, f"Could not read CSV file ({e})") from e

    def _fetch_url(self, url: str) -> str:
        request = Request(url, headers={"User-Agent": USER_AGENT})
        try:
            with urlopen(request, timeout=self.timeout) as response:
                return response.read().decode("utf-8-sig")
        except HTTPError as e:
            kind = DatasetLoadErrorKind.NOT_FOUND if e.code == 404 else DatasetLoadErrorKind.MALFORMED
            raise DatasetLoadError(kind, url, f"HTTP {e.code}") from e
        except URLError as e:
            raise DatasetLoadError(DatasetLoadErrorKind.NOT_FOUND, url, f"Source unreachable ({e.reason})") from e
        except (OSError, http.client.HTTPException) as e:
            # Timeouts and dropped connections while reading the body
            raise DatasetLoadError(DatasetLoadErrorKind.NOT_FOUND, url, f"Source unreachable ({e})") from e
        except UnicodeDecodeError as e:
            raise DatasetLoadError(DatasetLoadErrorKind.MALFORMED, url, "Source is not UTF-8 text") from e

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    def _parse(self, text: str, source: str) -> pd.DataFrame:
        if not text.strip():
            raise DatasetLoadError(DatasetLoadErrorKind.EMPTY, source, "CSV file is empty")
        try:
            frame = pd.read_csv(
                io.StringIO(text),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
            )
        except pd.errors.EmptyDataError as e:
            raise DatasetLoadError(DatasetLoadErrorKind.EMPTY, source, "CSV file is empty") from e
        except pd.errors.ParserError as e:
            raise DatasetLoadError(DatasetLoadErrorKind.MALFORMED, source, f"Failed to parse CSV file ({e})") from e

        frame.columns = [str(c).strip() for c in frame.columns]
        if frame.empty:
            raise DatasetLoadError(DatasetLoadErrorKind.EMPTY, source, "CSV file has no rows")
        return frame

    def _to_items(self, frame: pd.DataFrame, source: str) -> list[Item]:
        columns = list(frame.columns)
        primary_column = _first_present(columns, PRIMARY_TEXT_COLUMNS)
        if primary_column is None:
            raise DatasetLoadError(
                DatasetLoadErrorKind.MALFORMED, source,
                f"CSV needs one of the columns {', '.join(PRIMARY_TEXT_COLUMNS)}",
            )
        example_column = _first_present(columns, EXAMPLE_COLUMNS)
        translation_columns = _language_columns(columns, TRANSLATION_COLUMN)
        example_translation_columns = _language_columns(columns, EXAMPLE_TRANSLATION_COLUMN)

        items = []
        for position, row in enumerate(frame.to_dict(orient="records")):
            try:
                items.append(Item(
                    primary_text=row[primary_column],
                    expected_preposition=row.get(PREPOSITION_COLUMN),
                    expected_case=row.get(CASE_COLUMN),
                    wrong_prepositions=parse_wrong_prepositions(row.get(WRONG_PREPOSITIONS_COLUMN, "")),
                    translations={lang: row[col] for lang, col in translation_columns.items()},
                    example=row[example_column] if example_column else "",
                    example_translations={lang: row[col] for lang, col in example_translation_columns.items()},
                ))
            except ValidationError as e:
                # +2: header line and 1-based numbering
                logger.warning(f"Skipping line {position + 2} of {source}: {e.errors()[0]['msg']}")

        if not items:
            raise DatasetLoadError(DatasetLoadErrorKind.EMPTY, source, "CSV file has no usable rows")
        return items


# -----------------------------------------------------------------------------
# Catalog
# -----------------------------------------------------------------------------

def load_catalog(path: Path) -> list[DatasetEntry]:
    """
    Load the dataset catalog.

    Args:
        path: YAML file with a top-level `datasets` list of {id, label, source}

    Raises:
        FileNotFoundError: If the catalog file doesn't exist
        yaml.YAMLError: If YAML parsing fails
        ValueError: If an entry is invalid or ids repeat
    """
    if not path.exists():
        raise FileNotFoundError(f"Dataset catalog not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    entries = [DatasetEntry.model_validate(raw) for raw in data.get("datasets", [])]
    ids = [entry.id for entry in entries]
    if len(ids) != len(set(ids)):
        raise ValueError(f"Duplicate dataset ids in {path}")
    return entries
