"""Guarded bulk deletion against the content store.

Handles ordered, per-item-authorized deletion of content store files with
dry-run support and itemized partial-failure accounting. Candidates are
drained from a FIFO queue by a single worker, one storage call at a time,
so destructive operations happen (and are logged) in submission order.
"""

import logging
from collections import deque
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from storectl.store.models import (
    AllowedRoot,
    AuthorizedPath,
    BulkDeletionReport,
    DeletionOutcome,
    ErrorKind,
    Rejection,
)
from storectl.store.storage import ContentStore, LocalContentStore, PathEscapeError
from storectl.store.validator import validate

logger = logging.getLogger(__name__)

OutcomeCallback = Callable[[int, DeletionOutcome], None]


@dataclass(frozen=True, slots=True)
class DeletionTask:
    """One queued deletion request.

    Attributes:
        position: Zero-based submission index within the batch.
        candidate: The path as submitted.
    """

    position: int
    candidate: str


class DeletionOrchestrator:
    """Executes deletion batches against the content store.

    Every candidate is re-validated at execution time; nothing is trusted
    from an earlier enumeration. Failures never abort the batch and never
    escape as exceptions: each one is recorded as a classified outcome.
    There is no rollback, and no lock spans the check and the delete call.

    Attributes:
        _roots: The configured allowed roots.
        _store: Storage layer providing the single-file delete primitive.
        _dry_run: If True, authorize and probe without deleting.
    """

    def __init__(
        self,
        roots: Sequence[AllowedRoot],
        store: ContentStore | None = None,
        *,
        dry_run: bool = False,
        on_outcome: OutcomeCallback | None = None,
    ) -> None:
        """Initialize the DeletionOrchestrator.

        Args:
            roots: The configured allowed roots.
            store: Storage layer to delete through. Defaults to the local filesystem.
            dry_run: If True, report what would be deleted without deleting.
            on_outcome: Called after each item with its position and outcome.
        """
        self._roots = tuple(roots)
        self._store = store if store is not None else LocalContentStore()
        self._dry_run = dry_run
        self._on_outcome = on_outcome

    @property
    def dry_run(self) -> bool:
        """Check if orchestrator is in dry-run mode."""
        return self._dry_run

    def delete_many(self, candidates: Iterable[str]) -> BulkDeletionReport:
        """Delete a batch of files and return an itemized report.

        Args:
            candidates: Logical paths, processed in the order given.

        Returns:
            BulkDeletionReport with one outcome per candidate, in order.
        """
        queue: deque[DeletionTask] = deque(
            DeletionTask(position=i, candidate=c) for i, c in enumerate(candidates)
        )
        outcomes: list[DeletionOutcome] = []

        while queue:
            task = queue.popleft()
            outcome = self._run(task)
            outcomes.append(outcome)
            if self._on_outcome is not None:
                self._on_outcome(task.position, outcome)

        report = BulkDeletionReport(outcomes=tuple(outcomes))
        logger.info(
            "Deletion batch finished: %d succeeded, %d failed",
            report.succeeded,
            report.failed,
        )
        return report

    def delete_one(self, candidate: str) -> DeletionOutcome:
        """Delete a single file.

        This is a one-item batch and shares all validation and
        classification rules with delete_many().

        Args:
            candidate: Logical path of the file.

        Returns:
            DeletionOutcome for the candidate.
        """
        return self.delete_many([candidate]).outcomes[0]

    def _run(self, task: DeletionTask) -> DeletionOutcome:
        """Authorize and execute a single queued task."""
        result = validate(task.candidate, self._roots)
        if isinstance(result, Rejection):
            logger.warning(
                "Rejected deletion #%d %r: %s", task.position, task.candidate, result.reason
            )
            return DeletionOutcome.fail(task.candidate, result.kind, result.reason)

        try:
            return self._execute(task, result)
        except Exception as e:
            # Store implementations may raise anything; the batch must go on
            logger.exception("Unexpected failure deleting %s", result.logical_path)
            return DeletionOutcome.fail(
                task.candidate, ErrorKind.IO_ERROR, str(e), result.logical_path
            )

    def _execute(self, task: DeletionTask, target: AuthorizedPath) -> DeletionOutcome:
        """Run the directory gate and the storage delete for an authorized path."""
        candidate = task.candidate
        logical = target.logical_path
        try:
            self._store.ensure_contained(target)
            if self._store.is_directory(target):
                msg = f"Directories cannot be deleted: {candidate}"
                logger.warning("Rejected deletion #%d: %s", task.position, msg)
                return DeletionOutcome.fail(candidate, ErrorKind.DIRECTORY_TARGET, msg, logical)

            if self._dry_run:
                logger.info("Dry-run: would delete #%d %s", task.position, logical)
                return DeletionOutcome.ok(candidate, logical, dry_run=True)

            self._store.delete_file(target)
        except FileNotFoundError:
            msg = f"Path does not exist: {candidate}"
            return DeletionOutcome.fail(candidate, ErrorKind.NOT_FOUND, msg, logical)
        except IsADirectoryError:
            msg = f"Directories cannot be deleted: {candidate}"
            return DeletionOutcome.fail(candidate, ErrorKind.DIRECTORY_TARGET, msg, logical)
        except PathEscapeError as e:
            logger.warning("Rejected deletion #%d: %s", task.position, e)
            return DeletionOutcome.fail(candidate, ErrorKind.OUTSIDE_ROOTS, str(e), logical)
        except OSError as e:
            logger.error("Failed to delete %s: %s", logical, e)
            reason = e.strerror or str(e)
            return DeletionOutcome.fail(candidate, ErrorKind.IO_ERROR, reason, logical)

        logger.info("Deleted #%d %s", task.position, logical)
        return DeletionOutcome.ok(candidate, logical)
