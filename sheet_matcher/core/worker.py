"""Single-worker task runner for merge, grouping and comparison jobs."""

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional, Sequence
import logging
import threading

from sheet_matcher.config.models import (
    DuplicateSelection,
    GroupingSettings,
    MatchMode,
    MergeSettings,
    PrimarySelection
)
from sheet_matcher.core.dataset import Dataset
from sheet_matcher.core.grouper import DuplicateGrouper
from sheet_matcher.core.merger import RecordMerger, Secondary
from sheet_matcher.core.reconciler import SheetReconciler

logger = logging.getLogger(__name__)

Callback = Callable[[Future], None]


class MatchingWorker:
    """
    Runs engine calls one at a time on a background thread.

    Callers get a ``Future`` back immediately, so a UI can show its
    processing state while the synchronous computation runs. Jobs submitted
    while another is running wait in submission order.
    """

    def __init__(self):
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix='sheet-matcher'
        )
        self._cancel_event = threading.Event()

    def __enter__(self) -> 'MatchingWorker':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def _submit(self, func: Callable, callback: Optional[Callback], *args) -> Future:
        future = self._executor.submit(func, *args)
        if callback is not None:
            future.add_done_callback(callback)
        return future

    def cancel(self) -> None:
        """Stop the job that is running and any queued behind it."""
        logger.info("Cancellation requested")
        self._cancel_event.set()

    def reset(self) -> None:
        """Accept new jobs again after a cancellation."""
        self._cancel_event.clear()

    def submit_merge(
        self,
        primary: Dataset,
        primary_selection: PrimarySelection,
        secondaries: Sequence[Secondary],
        settings: Optional[MergeSettings] = None,
        callback: Optional[Callback] = None
    ) -> Future:
        """Queue a merge; the future resolves to a ``MergeResult``."""
        merger = RecordMerger(settings)
        return self._submit(
            merger.merge,
            callback,
            primary,
            primary_selection,
            list(secondaries),
            self._cancel_event
        )

    def submit_grouping(
        self,
        dataset: Dataset,
        selection: DuplicateSelection,
        settings: Optional[GroupingSettings] = None,
        callback: Optional[Callback] = None
    ) -> Future:
        """Queue a duplicate search; the future resolves to a ``GroupingResult``."""
        grouper = DuplicateGrouper(settings)
        return self._submit(grouper.group, callback, dataset, selection, self._cancel_event)

    def submit_reconcile(
        self,
        base: Dataset,
        base_selection: PrimarySelection,
        other: Dataset,
        other_selection: PrimarySelection,
        compare_columns: Sequence[str],
        mode: MatchMode = MatchMode.EXACT,
        callback: Optional[Callback] = None
    ) -> Future:
        """Queue a sheet comparison; the future resolves to a ``ReconcileResult``."""
        reconciler = SheetReconciler(mode)
        return self._submit(
            reconciler.reconcile,
            callback,
            base,
            base_selection,
            other,
            other_selection,
            list(compare_columns)
        )

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
