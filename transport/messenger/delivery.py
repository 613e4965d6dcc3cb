"""
Messenger Delivery Sequencer

Paces multi-segment replies through one ordered queue per sender.
Each sender's queue is drained by its own worker: segments of a reply
go out in order, spaced by a fixed interval, while other senders'
replies proceed independently. No retries. A failed segment is logged
and the next one is still sent.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

SendFn = Callable[[str, str], Awaitable[Any]]

DEFAULT_INTERVAL_S = 1.0


@dataclass(frozen=True)
class DeliveryBatch:
    """All segments of one reply, addressed to one sender."""

    sender_id: str
    segments: List[str]
    send: SendFn


@dataclass
class _Lane:
    """Queue and worker serving a single sender."""

    queue: asyncio.Queue = field(default_factory=asyncio.Queue)
    task: Optional[asyncio.Task] = None


class DeliverySequencer:
    """
    Ordered, paced delivery of reply segments.

    Single-segment replies are sent immediately by the caller.
    Multi-segment replies are queued and returned from at once
    (fire-and-forget). Batches for the same sender are sent in FIFO
    order; a lane is created on demand and removed once drained.
    """

    def __init__(self, interval_s: float = DEFAULT_INTERVAL_S):
        if interval_s < 0:
            raise ValueError(f"interval_s must be >= 0, got {interval_s}")
        self.interval_s = interval_s
        self._lanes: Dict[str, _Lane] = {}
        self._running = False

    @property
    def pending(self) -> int:
        """Number of batches waiting for a worker."""
        return sum(lane.queue.qsize() for lane in self._lanes.values())

    @property
    def running(self) -> bool:
        return self._running

    @property
    def active_senders(self) -> int:
        """Senders with a lane still draining."""
        return len(self._lanes)

    async def start(self) -> None:
        """Accept multi-segment batches on the running event loop."""
        if self._running:
            return
        self._running = True
        logger.info(f"Delivery sequencer started (interval={self.interval_s}s)")

    async def stop(self) -> None:
        """Cancel every lane worker. Batches still queued are dropped."""
        if not self._running and not self._lanes:
            return
        dropped = self.pending
        lanes = list(self._lanes.values())
        self._lanes.clear()
        self._running = False

        for lane in lanes:
            lane.task.cancel()
        for lane in lanes:
            try:
                await lane.task
            except asyncio.CancelledError:
                pass

        if dropped:
            logger.warning(f"Delivery sequencer stopped with {dropped} batch(es) undelivered")
        else:
            logger.info("Delivery sequencer stopped")

    async def join(self) -> None:
        """Wait until every queued batch has been sent."""
        while self._lanes:
            await asyncio.gather(
                *(lane.task for lane in list(self._lanes.values())),
                return_exceptions=True,
            )

    async def deliver(
        self,
        segments: Sequence[str],
        sender_id: str,
        send: SendFn,
    ) -> None:
        """
        Deliver reply segments to one sender.

        Args:
            segments: Ordered segments (output of chunk_text)
            sender_id: Recipient's sender identity
            send: Coroutine function (sender_id, text) doing the actual send
        """
        if not segments:
            return

        if len(segments) == 1:
            await self._send_one(send, sender_id, segments[0], 0)
            return

        await self.start()
        lane = self._lanes.get(sender_id)
        if lane is None:
            lane = _Lane()
            self._lanes[sender_id] = lane
            lane.task = asyncio.create_task(
                self._run(sender_id, lane), name=f"messenger-delivery-{sender_id}"
            )
        lane.queue.put_nowait(
            DeliveryBatch(sender_id=sender_id, segments=list(segments), send=send)
        )
        logger.debug(
            f"Queued {len(segments)} segments for {sender_id}",
            extra={"sender_id": sender_id, "segments": len(segments)},
        )

    async def _run(self, sender_id: str, lane: _Lane) -> None:
        try:
            # Lane is removed in the same step that sees it empty,
            # so deliver() never queues onto a finished worker.
            while not lane.queue.empty():
                batch = lane.queue.get_nowait()
                for index, segment in enumerate(batch.segments):
                    if index > 0 and self.interval_s:
                        await asyncio.sleep(self.interval_s)
                    await self._send_one(batch.send, batch.sender_id, segment, index)
        finally:
            if self._lanes.get(sender_id) is lane:
                del self._lanes[sender_id]

    async def _send_one(self, send: SendFn, sender_id: str, segment: str, index: int) -> None:
        try:
            await send(sender_id, segment)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(
                f"Failed to deliver segment {index} to {sender_id}: {e}",
                exc_info=True,
                extra={"sender_id": sender_id, "segment_index": index},
            )
