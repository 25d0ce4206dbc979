# -*- coding: utf-8 -*-
"""
src/tint/core/persistence.py

Durable storage for the color history.

`SlotStorage` is a tiny named-slot key/value store: every key maps to one file
in the application data directory holding an opaque byte blob.
`HistoryPersistence` serializes the ordered swatch history to JSON and keeps
it in a single slot. The schema version is part of the slot key, so a format
change means a new key.
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import MalformedRecordError
from .swatch import Swatch

logger = logging.getLogger(__name__)

HISTORY_KEY = "com.tint.history.v1"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class SlotStorage:
    """
    Stores byte blobs under string keys, one file per key.

    Attributes:
        directory (Path): Where the slot files live.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        """Returns the file backing `key`."""
        return self.directory / f"{_UNSAFE_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> Optional[bytes]:
        """
        Reads a slot.

        Returns:
            Optional[bytes]: The stored blob, or None if the slot was never written.

        Raises:
            OSError: If the slot file exists but cannot be read.
        """
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def set(self, key: str, data: bytes) -> None:
        """
        Overwrites a slot.

        The blob goes to a temporary file first and is then moved over the
        slot file, so readers never see a half-written slot.
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise


class HistoryPersistence:
    """Saves and loads the ordered swatch history in one storage slot."""

    def __init__(self, storage: SlotStorage, key: str = HISTORY_KEY):
        self.storage = storage
        self.key = key

    def save(self, history: Sequence[Swatch]) -> bool:
        """
        Writes the full history to the slot, replacing what was there.

        Args:
            history (Sequence[Swatch]): Newest-first swatches.

        Returns:
            bool: True if the history was written, False otherwise.
        """
        try:
            payload = json.dumps([swatch.to_dict() for swatch in history], indent=2)
            self.storage.set(self.key, payload.encode("utf-8"))
        except (TypeError, ValueError, OSError) as e:
            logger.error(f"Failed to persist color history to '{self.key}': {e}")
            return False
        logger.debug(f"Persisted {len(history)} swatches to '{self.key}'.")
        return True

    def load(self) -> List[Swatch]:
        """
        Reads the history back from the slot.

        A missing slot, unreadable file, invalid JSON or any malformed record
        all yield an empty history. Nothing is salvaged from a partially
        valid payload.

        Returns:
            List[Swatch]: The stored swatches in their saved order.
        """
        try:
            data = self.storage.get(self.key)
        except OSError as e:
            logger.error(f"Failed to read color history from '{self.key}': {e}")
            return []
        if data is None:
            logger.info(f"No saved color history under '{self.key}'.")
            return []

        try:
            records = json.loads(data.decode("utf-8"))
            if not isinstance(records, list):
                raise MalformedRecordError(f"Expected a list, got {type(records).__name__}")
            history = [Swatch.from_dict(record) for record in records]
        except (UnicodeDecodeError, ValueError, RecursionError, MalformedRecordError) as e:
            logger.error(f"Failed to load color history, starting empty: {e}")
            return []

        logger.info(f"Loaded {len(history)} swatches from '{self.key}'.")
        return history
