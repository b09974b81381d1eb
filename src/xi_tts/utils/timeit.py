"""
Wall-clock timing for HTTP round trips.

    with timeit("speech_request", meta={"voice": "rachel"}) as t:
        response = await http.post(url, content=body)
    info(log, "speech_ok", seconds=round(t.timing.seconds, 3))
"""
from __future__ import annotations

from dataclasses import dataclass
from time import perf_counter
from typing import Any, Dict, Optional


@dataclass
class Timing:
    """A finished measurement."""
    name: str
    seconds: float
    meta: Optional[Dict[str, Any]] = None


class timeit:
    """
    Context manager measuring the time spent inside the block.

    `timing` is set on exit, including when the block raises, so a failed
    request can still log how long it waited.
    """

    def __init__(self, name: str, meta: Optional[Dict[str, Any]] = None):
        self.name = name
        self.meta = meta
        self._t0: float | None = None
        self.timing: Timing | None = None

    def __enter__(self) -> "timeit":
        self._t0 = perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        assert self._t0 is not None
        self.timing = Timing(name=self.name, seconds=perf_counter() - self._t0, meta=self.meta)

    @property
    def seconds(self) -> float:
        """Elapsed seconds, or -1.0 if the block has not finished."""
        return self.timing.seconds if self.timing else -1.0
