"""models.py — Shared data types for chapterdeck."""

from dataclasses import dataclass, field
from enum import Enum


@dataclass
class ChapterRecord:
    file_name: str      # Stored object's base name, e.g. "06-app-vector-algebra_standalone-<uuid>.html"
    s3_key: str         # prefix + file_name
    url: str            # Public URL of the stored object
    last_updated: str   # ISO-8601 UTC timestamp of the upload

    def to_dict(self) -> dict:
        return {
            "fileName": self.file_name,
            "s3Key": self.s3_key,
            "url": self.url,
            "lastUpdated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ChapterRecord":
        return cls(
            file_name=str(data.get("fileName") or ""),
            s3_key=str(data.get("s3Key") or ""),
            url=str(data.get("url") or ""),
            last_updated=str(data.get("lastUpdated") or ""),
        )


@dataclass
class UploadResult:
    success: bool
    key: str = ""
    url: str = ""
    original_name: str = ""
    error: str = ""


class LoadStatus(Enum):
    LOADED = "loaded"
    ABSENT = "absent"      # no registry file yet, started empty
    CORRUPT = "corrupt"    # unreadable or unparsable, started empty


@dataclass
class RegistryLoad:
    status: LoadStatus
    mappings: dict[str, ChapterRecord] = field(default_factory=dict)


@dataclass
class SlideFragment:
    position: int       # 1-based position in the assembled deck
    file_name: str
    content: str        # Inner markup of the fragment's content container
    topic_class: str = ""
