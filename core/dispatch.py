"""
Bounded-concurrency detector dispatch with in-order result delivery.

Frames are pulled lazily from the sampler, at most ``concurrency`` detector
calls run at once on a thread pool, and results are handed back strictly in
frame order so the tracking/aggregation fold never sees frames out of order.
"""
from __future__ import annotations
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Deque, Iterable, Iterator, List
import logging
import threading

from core.models import FrameDetection

logger = logging.getLogger(__name__)

Detector = Callable[[bytes], List[dict]]


def _detect_one(detect: Detector, index: int, image: bytes) -> FrameDetection:
    try:
        faces = detect(image)
    except Exception as e:
        # A failed frame counts as "no face found"; the caller sees the error
        logger.exception(f"[dispatch] detector failed on frame {index}")
        return FrameDetection(index=index, faces=[], error=type(e).__name__, message=str(e))
    return FrameDetection(index=index, faces=list(faces or []))


def dispatch_frames(
    frames: Iterable[bytes],
    detect: Detector,
    concurrency: int = 6,
) -> Iterator[FrameDetection]:
    """
    Run ``detect`` over ``frames`` with at most ``concurrency`` calls in flight.

    Args:
        frames: Ordered, finite iterable of encoded images. Consumed lazily.
        detect: Callable returning the raw faces for one image.
        concurrency: Maximum simultaneous detector calls.

    Yields:
        FrameDetection for indices 0, 1, 2, ... in ascending order, whatever
        order the calls complete in. Failures are reported on the record, not
        raised.

    Closing the generator early cancels frames that have not started and
    waits for in-flight calls to finish.
    """
    concurrency = max(1, int(concurrency))
    slots = threading.BoundedSemaphore(concurrency)
    pending: Deque[Future] = deque()
    pool = ThreadPoolExecutor(max_workers=concurrency, thread_name_prefix="detector")
    logger.debug(f"[dispatch] start concurrency={concurrency}")

    submitted = 0
    try:
        for index, image in enumerate(frames):
            slots.acquire()
            fut = pool.submit(_detect_one, detect, index, image)
            fut.add_done_callback(lambda _f: slots.release())
            pending.append(fut)
            submitted += 1
            # hand back whatever is already complete at the head of the queue
            while pending and pending[0].done():
                yield pending.popleft().result()

        while pending:
            yield pending.popleft().result()
        logger.debug(f"[dispatch] finished frames={submitted}")
    finally:
        if pending:
            logger.debug(f"[dispatch] stopping early with {len(pending)} frames outstanding")
        pool.shutdown(wait=True, cancel_futures=True)
