"""uploader.py — Upload chapter artifacts to S3 and record them in the registry."""

import uuid
from pathlib import Path
from typing import Callable, Iterator

from tqdm import tqdm

from models import ChapterRecord, UploadResult
from registry import (
    DEFAULT_MAPPINGS_FILE,
    derive_chapter_key,
    load_registry,
    new_record,
    save_registry,
    upsert,
)
from storage import content_type_for, public_url

UPLOAD_EXTENSIONS = {".html", ".htm"}


def _random_token() -> str:
    return str(uuid.uuid4())


def join_key(prefix: str, name: str) -> str:
    """Join a storage prefix and a name with '/', never the OS separator."""
    prefix = (prefix or "").strip("/")
    return f"{prefix}/{name}" if prefix else name


def walk_uploadable(
    root: Path,
    prefix: str = "",
    _seen: set[Path] | None = None,
) -> Iterator[tuple[Path, str]]:
    """
    Yield (file_path, key_prefix) for every uploadable file under root.
    Entries are visited in directory-listing order; subdirectories extend the prefix.
    A directory reached twice (symlink loop or alias) is walked only the first time.
    """
    root = Path(root)
    seen = set() if _seen is None else _seen
    seen.add(root.resolve())

    for entry in root.iterdir():
        if entry.is_dir():
            if entry.resolve() in seen:
                print(f"  Warning: skipping {entry} (directory already visited)")
                continue
            yield from walk_uploadable(entry, join_key(prefix, entry.name), seen)
        elif entry.suffix.lower() in UPLOAD_EXTENSIONS:
            yield entry, prefix


class Uploader:
    def __init__(
        self,
        storage,
        mappings_path: Path = DEFAULT_MAPPINGS_FILE,
        randomize: bool = True,
        token_factory: Callable[[], str] = _random_token,
    ):
        self.storage = storage
        self.mappings_path = Path(mappings_path)
        self.randomize = randomize
        self.token_factory = token_factory

    def final_name(self, file_name: str) -> str:
        """'intro.html' → 'intro-<token>.html' when randomizing, else unchanged."""
        if not self.randomize:
            return file_name
        path = Path(file_name)
        return f"{path.stem}-{self.token_factory()}{path.suffix}"

    def upload_one(
        self,
        file_path: Path,
        bucket: str,
        key: str,
        content_type: str | None = None,
    ) -> UploadResult:
        """Upload a single file. Errors are captured in the result, never raised."""
        file_path = Path(file_path)
        try:
            body = file_path.read_bytes()
            self.storage.put(bucket, key, body, content_type or content_type_for(file_path.name))
        except Exception as e:
            print(f"  ERROR: upload failed for {file_path}: {e}")
            return UploadResult(success=False, original_name=file_path.name, error=str(e))

        url = public_url(bucket, key)
        print(f"  Uploaded: {key}")
        print(f"     URL: {url}")
        return UploadResult(success=True, key=key, url=url, original_name=file_path.name)

    def _upload_under(self, file_path: Path, bucket: str, prefix: str) -> UploadResult:
        key = join_key(prefix, self.final_name(file_path.name))
        return self.upload_one(file_path, bucket, key)

    @staticmethod
    def _record(
        result: UploadResult,
        mappings: dict[str, ChapterRecord],
        sources: dict[str, str],
    ) -> bool:
        """Upsert the registry entry for a successful upload. Returns True if mapped."""
        chapter_key = derive_chapter_key(result.original_name)
        if not chapter_key:
            return False

        # Two sources deriving the same key: the later one wins, but say so.
        earlier = sources.get(chapter_key)
        if earlier is not None and earlier != result.key:
            print(
                f"  Warning: '{result.original_name}' replaces '{earlier}' "
                f"as chapter '{chapter_key}'"
            )
        sources[chapter_key] = result.key

        stored_name = result.key.rsplit("/", 1)[-1]
        upsert(mappings, chapter_key, new_record(stored_name, result.key, result.url))
        print(f"  Mapped chapter: {chapter_key}")
        return True

    def upload_tree(self, root: Path, bucket: str, prefix: str = "") -> list[UploadResult]:
        """
        Upload every HTML file under root, one at a time.
        The registry is loaded once before the batch and saved once after it.
        """
        files = list(walk_uploadable(root, (prefix or "").strip("/")))
        if not files:
            print(f"Warning: no HTML files found in {root}")
            return []

        mappings = load_registry(self.mappings_path).mappings
        sources: dict[str, str] = {}
        results = []

        with tqdm(total=len(files), desc="  Uploading", unit="file") as pbar:
            for file_path, key_prefix in files:
                result = self._upload_under(file_path, bucket, key_prefix)
                if result.success:
                    self._record(result, mappings, sources)
                results.append(result)
                pbar.update(1)

        if mappings:
            save_registry(mappings, self.mappings_path)
        return results

    def upload_file(self, file_path: Path, bucket: str, prefix: str = "") -> list[UploadResult]:
        """Upload one file; the registry is saved right after a successful upload."""
        result = self._upload_under(Path(file_path), bucket, prefix)
        if result.success:
            mappings = load_registry(self.mappings_path).mappings
            if self._record(result, mappings, {}):
                save_registry(mappings, self.mappings_path)
        return [result]

    def upload_path(self, source: Path, bucket: str, prefix: str = "") -> list[UploadResult]:
        source = Path(source)
        if source.is_dir():
            return self.upload_tree(source, bucket, prefix)
        return self.upload_file(source, bucket, prefix)
