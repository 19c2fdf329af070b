from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from .collection import Collection
from .config import Settings
from .errors import PersistenceError
from .history import History
from .merge import AddNew, AutoInserted, AutoSkipped, Decision, MergeEngine, NeedsDecision, Reject, Replace, Update
from .source import Source, load_source
from .store import load_collection, load_history, save_collection, save_history

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class IntegrationReport:
    sources: int = 0
    entries: int = 0
    inserted: int = 0
    skipped: int = 0
    added: int = 0
    replaced: int = 0
    updated: int = 0
    rejected: int = 0

    def count_decision(self, decision: Decision) -> None:
        if isinstance(decision, AddNew):
            self.added += 1
        elif isinstance(decision, Replace):
            self.replaced += 1
        elif isinstance(decision, Update):
            self.updated += 1
        elif isinstance(decision, Reject):
            self.rejected += 1


def resolve_conflict(conflict: NeedsDecision, prompter) -> Decision:
    """Ask ``prompter`` until one of its decisions applies cleanly."""
    while True:
        decision = prompter.ask(conflict)
        try:
            conflict.engine.resolve(conflict.token, decision)
        except (IndexError, ValueError) as exc:
            prompter.warn(str(exc))
            continue
        return decision


def merge_source(engine: MergeEngine, source: Source, prompter, report: IntegrationReport) -> None:
    for entry in source.entries:
        report.entries += 1
        outcome = engine.submit(entry.term, entry.meaning, source.title)
        if isinstance(outcome, AutoInserted):
            report.inserted += 1
        elif isinstance(outcome, AutoSkipped):
            report.skipped += 1
        else:
            report.count_decision(resolve_conflict(outcome, prompter))


def save_state(
    collection: Collection,
    collection_path: PathLike,
    history: History,
    history_path: PathLike,
    backup_dir: Optional[PathLike] = None,
) -> None:
    save_collection(collection, collection_path, backup_dir)
    save_history(history, history_path, backup_dir)


def run(
    collection_path: PathLike,
    history_path: PathLike,
    source_paths: Iterable[PathLike],
    prompter,
    settings: Optional[Settings] = None,
) -> IntegrationReport:
    """Merge every source into the collection, asking ``prompter`` on conflicts.

    ``prompter`` needs ``ask(conflict) -> Decision`` and ``warn(message)``.
    Whatever was decided is saved even when a source or the prompt fails;
    the failure is re-raised afterwards.
    """
    settings = settings or Settings()
    collection = load_collection(collection_path)
    history = load_history(history_path)
    engine = MergeEngine(collection, history)
    report = IntegrationReport()

    try:
        for path in source_paths:
            source = load_source(path, warn_unknown_directives=settings.warn_unknown_directives)
            merge_source(engine, source, prompter, report)
            report.sources += 1
            logger.info("Merged %d entries from %s as %r", len(source.entries), path, source.title)
    except Exception:
        logger.warning("Stopping early, saving the decisions made so far")
        try:
            save_state(collection, collection_path, history, history_path, settings.backup_dir)
        except PersistenceError as save_exc:
            logger.error("Could not save state: %s", save_exc)
        raise

    save_state(collection, collection_path, history, history_path, settings.backup_dir)
    return report
