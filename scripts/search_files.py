#!/usr/bin/env python3
"""Upload a file, find it with a search listing, then delete it.

Usage:
  .venv/bin/python scripts/search_files.py --bucket test-bucket ./icon.png
  .venv/bin/python scripts/search_files.py ./icon.png --keep

Credentials come from API_KEY and REFERENCE_ID (or STORAGE_URL), read from
the environment or a local .env file.
"""

from __future__ import annotations

import argparse
import json
import logging
import uuid
from pathlib import Path

from supastorage.common.logging import setup_logging
from supastorage.storage import StorageError, get_storage_client


def search_files(source: Path, *, bucket_id: str | None, keep: bool) -> list[dict]:
    logger = logging.getLogger("supastorage.startup")
    object_name = f"file{uuid.uuid4().hex}{source.suffix}"

    with get_storage_client(bucket_id) as client:
        logger.info("uploading %s to bucket %s", object_name, client.bucket_id)
        client.upload(object_name, source, {"upsert": False})

        listing = client.list(
            "",
            {
                "limit": 100,
                "offset": 0,
                "sortBy": {"column": "name", "order": "asc"},
                "search": object_name,
            },
        )
        entries = listing.data or []

        if not keep:
            client.remove([object_name])
            logger.info("removed %s", object_name)
    return entries


def main() -> None:
    parser = argparse.ArgumentParser(description="Search uploaded storage objects")
    parser.add_argument("source", type=Path, help="Local file to upload")
    parser.add_argument(
        "--bucket",
        default=None,
        help="Bucket to use (default: STORAGE_BUCKET)",
    )
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Leave the uploaded object in place",
    )
    args = parser.parse_args()
    setup_logging()
    try:
        entries = search_files(args.source, bucket_id=args.bucket, keep=args.keep)
    except StorageError as exc:
        raise SystemExit(f"storage request failed: {exc}") from exc
    print(json.dumps(entries, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
