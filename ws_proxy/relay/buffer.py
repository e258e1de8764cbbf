"""
Pre-open buffer for client frames.

Frames that arrive from the client before the upstream socket is open are held
here in arrival order and drained, oldest first, as soon as it opens.
"""

from collections import deque
from typing import Deque, Iterator

from ws_proxy.models.frames import Frame


class PreOpenBuffer:
    """FIFO queue of client frames awaiting the upstream connection."""

    def __init__(self):
        self._frames: Deque[Frame] = deque()
        self.total_buffered = 0

    def __len__(self) -> int:
        return len(self._frames)

    def __bool__(self) -> bool:
        return bool(self._frames)

    def append(self, frame: Frame) -> None:
        self._frames.append(frame)
        self.total_buffered += 1

    def drain(self) -> Iterator[Frame]:
        """
        Yield buffered frames oldest first, removing each as it is yielded.

        A frame is removed before it is handed out, so stopping the iteration
        early leaves only the frames that were never yielded.
        """
        while self._frames:
            yield self._frames.popleft()

    def clear(self) -> int:
        """Discard any remaining frames and return how many were dropped."""
        dropped = len(self._frames)
        self._frames.clear()
        return dropped
