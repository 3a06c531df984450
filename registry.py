"""registry.py — Chapter name → published URL mapping, persisted as JSON.

The registry is loaded once, mutated in memory and saved explicitly. There is
no locking: two runs writing the same file race and the later save wins.
"""

import json
import os
import re
import stat
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from models import ChapterRecord, LoadStatus, RegistryLoad

DEFAULT_MAPPINGS_FILE = Path("chapter-mappings.json")

_VARIANT_SUFFIX = re.compile(r"_standalone\.(html|htm)$", re.IGNORECASE)
_DOC_EXTENSION = re.compile(r"\.(html|htm)$", re.IGNORECASE)


def derive_chapter_key(file_name: str) -> str:
    """'06-app-vector-algebra_standalone.html' → '06-app-vector-algebra'."""
    name = Path(file_name).name
    name = _VARIANT_SUFFIX.sub("", name)
    return _DOC_EXTENSION.sub("", name)


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC with millisecond precision and a 'Z' suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_record(file_name: str, s3_key: str, url: str, now: datetime | None = None) -> ChapterRecord:
    return ChapterRecord(
        file_name=file_name,
        s3_key=s3_key,
        url=url,
        last_updated=utc_timestamp(now),
    )


def upsert(
    mappings: dict[str, ChapterRecord],
    chapter_key: str,
    record: ChapterRecord,
) -> ChapterRecord | None:
    """Replace the entry for chapter_key. Returns the record it replaced, if any."""
    previous = mappings.get(chapter_key)
    mappings[chapter_key] = record
    return previous


def load_registry(path: Path = DEFAULT_MAPPINGS_FILE) -> RegistryLoad:
    """
    Read the mapping document. Never raises: a missing file starts an empty
    registry silently, an unreadable or malformed one starts empty with a warning.
    """
    path = Path(path)
    if not path.exists():
        return RegistryLoad(status=LoadStatus.ABSENT)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"Warning: could not load {path.name} ({e}), starting with an empty registry")
        return RegistryLoad(status=LoadStatus.CORRUPT)

    if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
        print(f"Warning: {path.name} is not a chapter mapping document, starting with an empty registry")
        return RegistryLoad(status=LoadStatus.CORRUPT)

    mappings = {key: ChapterRecord.from_dict(value) for key, value in data.items()}
    return RegistryLoad(status=LoadStatus.LOADED, mappings=mappings)


def _target_mode(path: Path) -> int:
    """Mode of the existing document, or what a plain open() would create."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def save_registry(mappings: dict[str, ChapterRecord], path: Path = DEFAULT_MAPPINGS_FILE) -> bool:
    """
    Overwrite the mapping document with the full mapping.
    Writes to a temp file beside the target and swaps it in, so readers never
    see a half-written document. Returns False (and reports) on I/O failure.
    """
    path = Path(path)
    payload = json.dumps(
        {key: record.to_dict() for key, record in mappings.items()},
        indent=2,
        ensure_ascii=False,
    )

    tmp_path = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="utf-8", suffix=".tmp", delete=False, dir=path.parent
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(payload + "\n")
        # NamedTemporaryFile is always 0600; give the document its usual mode back.
        os.chmod(tmp_path, _target_mode(path))
        os.replace(tmp_path, path)
    except OSError as e:
        print(f"ERROR: could not save {path.name}: {e}")
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        return False

    print(f"  Updated {path.name}")
    return True


def lookup_url(path: Path, chapter_key: str) -> str | None:
    record = load_registry(path).mappings.get(chapter_key)
    return record.url if record else None
