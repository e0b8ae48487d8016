"""Follow the caller's current item selection without publishing stale trails."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from supplytrail.domain.model import InvalidItemCodeError, ProvenanceRecord

if TYPE_CHECKING:
    from supplytrail.domain.model import ItemIdentity
    from supplytrail.domain.reconstruction import ProvenanceReconstructor

log = getLogger(__name__)

RecordListener = Callable[[ProvenanceRecord], None]


class ProvenanceTracker:
    """Re-run reconstruction only when the selected identity changes.

    Every reconstruction task is keyed by the identity it was started for. A task
    finishing after the selection moved on is discarded, so a slow lookup for an
    old item can never overwrite the trail of the current one. Must be used from
    within a running event loop.
    """

    def __init__(
        self,
        reconstructor: ProvenanceReconstructor,
        *,
        on_update: RecordListener | None = None,
    ) -> None:
        self._reconstructor = reconstructor
        self._on_update = on_update
        self._item_code: str | None = None
        self._target: ItemIdentity | None = None
        self._task: asyncio.Task[ProvenanceRecord] | None = None
        self._current = ProvenanceRecord.not_attempted()

    @property
    def current(self) -> ProvenanceRecord:
        return self._current

    @property
    def target(self) -> ItemIdentity | None:
        return self._target

    @property
    def pending(self) -> asyncio.Task[ProvenanceRecord] | None:
        if self._task is None or self._task.done():
            return None
        return self._task

    def select(self, item_code: str) -> asyncio.Task[ProvenanceRecord] | None:
        """Point the tracker at ``item_code``.

        Returns the task producing the trail, or ``None`` when the code is blank.
        Selecting the same identity again reuses the existing task. A malformed
        code clears the selection before the decode error propagates.
        """

        try:
            identity = self._reconstructor.decode(item_code)
        except InvalidItemCodeError:
            self._clear(item_code)
            raise
        if identity is not None and identity == self._target and self._reusable(self._task):
            return self._task
        return self._start(item_code, identity)

    def refresh(self) -> asyncio.Task[ProvenanceRecord] | None:
        """Rebuild the trail for the current selection, e.g. after a new ledger write."""
        if self._item_code is None:
            return None
        return self._start(self._item_code, self._target)

    @staticmethod
    def _reusable(task: asyncio.Task[ProvenanceRecord] | None) -> bool:
        if task is None:
            return False
        if not task.done():
            return True
        return not task.cancelled() and task.exception() is None

    async def aclose(self) -> None:
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    def _cancel_pending(self) -> None:
        if self._task is not None and not self._task.done():
            log.debug("Cancelling in-flight reconstruction for identity %s", self._target)
            self._task.cancel()

    def _clear(self, item_code: str | None = None) -> None:
        self._cancel_pending()
        self._target = None
        self._item_code = None
        self._task = None
        self._publish(ProvenanceRecord.not_attempted(item_code))

    def _start(
        self, item_code: str, identity: ItemIdentity | None
    ) -> asyncio.Task[ProvenanceRecord] | None:
        if identity is None:
            self._clear()
            return None

        self._cancel_pending()
        self._target = identity
        self._item_code = item_code
        task = asyncio.create_task(self._reconstructor.reconstruct(item_code))
        task.add_done_callback(partial(self._on_done, identity))
        self._task = task
        return task

    def _on_done(self, identity: ItemIdentity, task: asyncio.Task[ProvenanceRecord]) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if task is not self._task or identity != self._target:
            log.debug("Discarding stale trail for identity %s", identity)
            return
        if error is not None:
            # the error stays on the task for whoever awaits it
            log.warning("Reconstruction failed for identity %s: %s", identity, error)
            self._publish(ProvenanceRecord.not_attempted(self._item_code))
            return
        self._publish(task.result())

    def _publish(self, record: ProvenanceRecord) -> None:
        self._current = record
        if self._on_update is not None:
            self._on_update(record)
