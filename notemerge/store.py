"""Read and write the collection and history documents."""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

import orjson
from pydantic import BaseModel, ValidationError

from .collection import Collection
from .errors import DocumentDecodeError, PersistenceError
from .history import History
from .models import CollectionDocument, HistoryDocument

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
DUMP_OPTIONS = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS


def _read_document(path: Path) -> Optional[Any]:
    if not path.exists():
        return None
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise DocumentDecodeError(path, str(exc)) from exc
    if not raw.strip():
        return None
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise DocumentDecodeError(path, f"unable to parse json: {exc}") from exc


def load_collection(path: PathLike) -> Collection:
    path = Path(path)
    data = _read_document(path)
    if data is None:
        logger.info("No collection at %s, starting a new one", path)
        return Collection()
    try:
        document = CollectionDocument.model_validate(data)
    except ValidationError as exc:
        raise DocumentDecodeError(path, str(exc)) from exc
    collection = Collection.from_document(document)
    logger.debug("Loaded %d terms and %d titles from %s", len(collection), len(collection.titles), path)
    return collection


def load_history(path: PathLike) -> History:
    path = Path(path)
    data = _read_document(path)
    if data is None:
        logger.info("No history at %s, starting a new one", path)
        return History()
    try:
        document = HistoryDocument.model_validate(data)
    except ValidationError as exc:
        raise DocumentDecodeError(path, str(exc)) from exc
    return History.from_document(document)


def backup_file(path: Path, backup_root: Path) -> Path:
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    target = backup_root / timestamp / path.name
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(path, target)
    return target


def _write_document(path: Path, document: BaseModel, backup_dir: Optional[PathLike]) -> None:
    payload = orjson.dumps(document.model_dump(mode="json"), option=DUMP_OPTIONS)
    temp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if backup_dir is not None and path.exists():
            backup = backup_file(path, Path(backup_dir))
            logger.info("Backed up %s to %s", path, backup)
        with tempfile.NamedTemporaryFile("wb", dir=path.parent, prefix=f".{path.name}.", delete=False) as handle:
            temp_name = handle.name
            handle.write(payload)
            handle.write(b"\n")
        os.replace(temp_name, path)
    except OSError as exc:
        if temp_name is not None:
            with contextlib.suppress(OSError):
                os.unlink(temp_name)
        raise PersistenceError(path, str(exc)) from exc


def save_collection(collection: Collection, path: PathLike, backup_dir: Optional[PathLike] = None) -> None:
    _write_document(Path(path), collection.to_document(), backup_dir)


def save_history(history: History, path: PathLike, backup_dir: Optional[PathLike] = None) -> None:
    _write_document(Path(path), history.to_document(), backup_dir)
