"""Mirror orchestration.

Runs the phases of a mirror strictly in sequence:

    LISTING -> DIFFING -> UPLOADING -> DELETING -> DONE
                                 (any) -> FAILED

The engine never exits the process; it returns a SyncReport and the CLI
decides the exit code.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from uploadmissing.core.errors import SyncError
from uploadmissing.sync.delete import BatchDeleter
from uploadmissing.sync.differ import diff
from uploadmissing.sync.ignore import IgnorePatterns
from uploadmissing.sync.lister import list_remote
from uploadmissing.sync.scanner import scan_local
from uploadmissing.sync.types import SyncPhase, SyncReport
from uploadmissing.sync.upload import TransferPipeline

if TYPE_CHECKING:
    from uploadmissing.core.config import SyncConfig
    from uploadmissing.storage import ObjectStorage

logger = logging.getLogger(__name__)

# Valid phase transitions
VALID_TRANSITIONS: dict[SyncPhase, set[SyncPhase]] = {
    SyncPhase.LISTING: {SyncPhase.DIFFING, SyncPhase.FAILED},
    SyncPhase.DIFFING: {SyncPhase.UPLOADING, SyncPhase.DONE, SyncPhase.FAILED},
    SyncPhase.UPLOADING: {SyncPhase.DELETING, SyncPhase.FAILED},
    SyncPhase.DELETING: {SyncPhase.DONE, SyncPhase.FAILED},
    SyncPhase.DONE: set(),  # Terminal
    SyncPhase.FAILED: set(),  # Terminal
}


class InvalidTransitionError(Exception):
    """Raised when attempting an invalid phase transition."""


class SyncEngine:
    """Mirrors a local directory into a bucket prefix.

    Usage:
        engine = SyncEngine(config, storage)
        report = engine.run()
        if not report.success:
            ...
    """

    def __init__(self, config: SyncConfig, storage: ObjectStorage) -> None:
        self._config = config
        self._storage = storage
        self._report = SyncReport()

    @property
    def phase(self) -> SyncPhase:
        """Get the current phase."""
        return self._report.phase

    def _transition(self, new_phase: SyncPhase) -> None:
        current = self._report.phase
        if new_phase not in VALID_TRANSITIONS[current]:
            raise InvalidTransitionError(
                f"Cannot transition from {current.name} to {new_phase.name}"
            )
        logger.debug(f"Phase {current.value} -> {new_phase.value}")
        self._report.phase = new_phase

    def run(self) -> SyncReport:
        """Run every phase and return the report.

        Transport, retry and local filesystem failures end the run in
        FAILED with the error recorded; they are not raised.
        """
        if self._report.phase != SyncPhase.LISTING:
            raise RuntimeError("SyncEngine instances are single-use")

        config = self._config
        prefix = config.prefix
        report = self._report

        try:
            # Listing
            logger.info(f"Mirroring {config.local_root} to {self._storage.location}/{prefix}")
            local = scan_local(config.local_root, IgnorePatterns(config.exclude))
            remote = list_remote(self._storage, prefix)

            # Diffing
            self._transition(SyncPhase.DIFFING)
            result = diff(local, remote, want_deletions=config.delete)
            report.missing = list(result.missing)
            report.deleted = list(result.deleted)
            report.found = result.found
            logger.info(f"Missing files: {len(result.missing)}")
            logger.info(f"Found files: {result.found}")
            if config.delete:
                logger.info(f"Deleted files: {len(result.deleted)}")

            if config.dry_run:
                for name in result.missing:
                    logger.info(f"Would upload {name}")
                for name in result.deleted:
                    logger.info(f"Would delete {name}")
                self._transition(SyncPhase.DONE)
                return report

            # Uploading
            self._transition(SyncPhase.UPLOADING)
            pipeline = TransferPipeline(
                self._storage,
                config.local_root,
                prefix,
                acl=config.acl,
                chmod_if_needed=config.chmod_if_needed,
                retry=config.retry,
                concurrency=config.concurrency,
            )
            for outcome in pipeline.upload(result.missing):
                if outcome.uploaded:
                    report.uploaded.append(outcome.relative_name)
                elif outcome.skipped:
                    report.skipped.append(outcome.relative_name)

            # Deleting
            self._transition(SyncPhase.DELETING)
            if config.delete:
                deleter = BatchDeleter(
                    self._storage,
                    prefix,
                    retry=config.retry,
                    batch_size=config.delete_batch_size,
                )
                report.removed = deleter.delete_all(result.deleted)

            self._transition(SyncPhase.DONE)
            logger.info(
                f"Done: {len(report.uploaded)} uploaded, {len(report.skipped)} skipped, "
                f"{len(report.removed)} deleted"
            )
        except (SyncError, OSError) as e:
            report.failed_phase = report.phase
            report.error = e
            self._transition(SyncPhase.FAILED)
            logger.error(f"Mirror failed while {report.failed_phase.value}: {e}")

        return report
