"""Snapshot files: hand the store's contents to and from disk as JSON."""

import json
import os
import tempfile
from pathlib import Path

import structlog

from lifecycle.exceptions import ValidationError
from lifecycle.store import SnapshotStore

logger = structlog.get_logger(__name__)


def write_snapshot(store: SnapshotStore, path: str | Path) -> Path:
    """Write the store's export to ``path``, replacing any previous file atomically."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    snapshot = store.export_snapshot()

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(snapshot, fh, indent=2, sort_keys=False)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info("Snapshot written", path=str(path), orders=len(snapshot["orders"]))
    return path


def read_snapshot(path: str | Path) -> dict:
    """Load a snapshot written by ``write_snapshot``."""
    path = Path(path)
    with path.open(encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ValidationError({"snapshot": [f"{path} is not valid JSON: {exc.msg}"]}) from exc

    if not isinstance(data, dict):
        raise ValidationError({"snapshot": [f"{path} must contain a JSON object"]})
    return data
