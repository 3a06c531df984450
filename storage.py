"""storage.py — S3 configuration, client construction and content types."""

import os
from dataclasses import dataclass
from pathlib import Path

from registry import DEFAULT_MAPPINGS_FILE

DEFAULT_REGION = "ap-south-1"
DEFAULT_PREFIX = "html/STATE_BOARD_CHAPTERS"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES = {
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".pdf": "application/pdf",
}


@dataclass
class StorageConfig:
    region: str = DEFAULT_REGION
    access_key_id: str = ""
    secret_access_key: str = ""
    bucket: str = ""
    prefix: str = DEFAULT_PREFIX
    mappings_path: Path = DEFAULT_MAPPINGS_FILE

    def missing_credentials(self) -> list[str]:
        missing = []
        if not self.access_key_id:
            missing.append("AWS_ACCESS_KEY_ID")
        if not self.secret_access_key:
            missing.append("AWS_SECRET_ACCESS_KEY")
        return missing


def load_storage_config(environ: dict | None = None) -> StorageConfig:
    """
    Build a StorageConfig from the environment (call load_dotenv() first).
    This is the only place environment variables are read.
    """
    env = os.environ if environ is None else environ

    def _get(name: str, default: str = "") -> str:
        return (env.get(name) or "").strip() or default

    return StorageConfig(
        region=_get("AWS_REGION", DEFAULT_REGION),
        access_key_id=_get("AWS_ACCESS_KEY_ID"),
        secret_access_key=_get("AWS_SECRET_ACCESS_KEY"),
        bucket=_get("S3_BUCKET_NAME"),
        prefix=_get("S3_PATH_PREFIX", DEFAULT_PREFIX),
        mappings_path=Path(_get("CHAPTER_MAPPINGS_FILE", str(DEFAULT_MAPPINGS_FILE))),
    )


class S3Storage:
    """Thin wrapper so the uploader only depends on put()."""

    def __init__(self, client):
        self._client = client

    def put(self, bucket: str, key: str, body: bytes, content_type: str) -> None:
        self._client.put_object(
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentType=content_type or DEFAULT_CONTENT_TYPE,
        )


def create_storage(config: StorageConfig) -> S3Storage:
    import boto3

    client = boto3.client(
        "s3",
        region_name=config.region,
        aws_access_key_id=config.access_key_id or None,
        aws_secret_access_key=config.secret_access_key or None,
    )
    return S3Storage(client)


def content_type_for(file_name: str) -> str:
    return CONTENT_TYPES.get(Path(file_name).suffix.lower(), DEFAULT_CONTENT_TYPE)


def public_url(bucket: str, key: str) -> str:
    """Virtual-hosted-style address of an object."""
    return f"https://{bucket}.s3.amazonaws.com/{key}"
