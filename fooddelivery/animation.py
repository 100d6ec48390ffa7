"""
Eased value animator for dashboard counters.

A `CountUp` moves its displayed number from the last shown value to a new
target along an ease-out-cubic curve, one frame at a time. Frames come from a
`FrameScheduler` so the same logic runs under asyncio, inside a Streamlit
script, or under a test clock.
"""
import asyncio
import itertools
import logging
import math
from typing import Any, Callable, Dict, Hashable, Iterable, Iterator, Optional, Protocol

log = logging.getLogger(__name__)

MIN_DURATION_MS = 200
DEFAULT_DURATION_MS = 800
FRAME_INTERVAL_MS = 1000 / 60

FrameCallback = Callable[[float], None]


def ease_out_cubic(t: float) -> float:
    t = min(1.0, max(0.0, t))
    return 1 - (1 - t) ** 3


def coerce_target(value: Any) -> float:
    """Numbers and numeric strings pass through; anything else (incl. NaN/inf) becomes 0."""
    if isinstance(value, bool):
        return 0
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(v):
        return 0
    return int(v) if v.is_integer() else v


def effective_duration(duration_ms: Any) -> float:
    """Clamp to MIN_DURATION_MS; a missing/garbage duration means the default."""
    try:
        d = float(duration_ms)
    except (TypeError, ValueError):
        return DEFAULT_DURATION_MS
    if not math.isfinite(d):
        return DEFAULT_DURATION_MS
    return max(MIN_DURATION_MS, d)


def interpolate(start: float, target: float, t: float) -> int:
    """Display value at fraction `t` of the transition, rounded half-up."""
    return math.floor(start + (target - start) * ease_out_cubic(t) + 0.5)


def transition_values(
    start: float, target: float, duration_ms: Any, timestamps: Iterable[float]
) -> Iterator[int]:
    """
    Lazily yield display values for frame timestamps (ms since the transition began).
    Stops after the first frame at or past the end of the transition.
    """
    d = effective_duration(duration_ms)
    target = coerce_target(target)
    for ts in timestamps:
        t = min(1.0, max(0.0, ts / d))
        yield interpolate(start, target, t)
        if t >= 1:
            return


def format_grouped(n) -> str:
    return f"{n:,}"


# --------------------------------------------------------------------
# Frame schedulers
# --------------------------------------------------------------------
class FrameScheduler(Protocol):
    def now(self) -> float:
        """Current time in milliseconds."""
        ...

    def request_frame(self, callback: FrameCallback) -> Hashable:
        """Run `callback(now_ms)` on the next frame; return a handle for cancel_frame."""
        ...

    def cancel_frame(self, handle: Hashable) -> None:
        ...


class ManualFrameScheduler(FrameScheduler):
    """
    Frames run only when `tick()` is called. Callbacks requested during a
    tick wait for the next one, like a browser's animation frames.
    """

    def __init__(self, start_ms: float = 0.0):
        self._now = start_ms
        self._ids = itertools.count(1)
        self._pending: Dict[int, FrameCallback] = {}

    def now(self) -> float:
        return self._now

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: Hashable) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def advance(self, ms: float) -> None:
        self._now += ms

    def tick(self) -> int:
        """Run the callbacks queued before this tick; return how many ran."""
        due, self._pending = self._pending, {}
        for cb in due.values():
            cb(self._now)
        return len(due)

    def run_until_idle(
        self,
        frame_ms: float = FRAME_INTERVAL_MS,
        max_frames: int = 10_000,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> int:
        """Advance-and-tick until nothing is queued. `sleep(seconds)` paces real-time use."""
        frames = 0
        while self._pending and frames < max_frames:
            self.advance(frame_ms)
            if sleep is not None:
                sleep(frame_ms / 1000)
            self.tick()
            frames += 1
        return frames


class AsyncioFrameScheduler(FrameScheduler):
    """Frames are event-loop timers `frame_ms` apart."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None, frame_ms: float = FRAME_INTERVAL_MS):
        self.loop = loop or asyncio.get_running_loop()
        self.frame_ms = frame_ms

    def now(self) -> float:
        return self.loop.time() * 1000

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        return self.loop.call_later(self.frame_ms / 1000, lambda: callback(self.now()))

    def cancel_frame(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()


# --------------------------------------------------------------------
# Animated counter
# --------------------------------------------------------------------
class CountUp:
    """
    One animated number.

    `set_value(target)` cancels any running transition and starts a new one
    from whatever is on screen now. `dispose()` (or leaving the `with` block)
    cancels the pending frame; nothing is rendered afterwards.
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        duration_ms: float = DEFAULT_DURATION_MS,
        formatter: Callable[[Any], str] = format_grouped,
        on_render: Optional[Callable[[int, str], None]] = None,
        initial: float = 0,
    ):
        self.scheduler = scheduler
        self.duration_ms = duration_ms
        self.formatter = formatter
        self.on_render = on_render
        self.previous = coerce_target(initial)   # last committed value
        self.display = interpolate(self.previous, self.previous, 1)
        self.target = self.previous
        self._handle: Optional[Hashable] = None
        self._generation = 0
        self._disposed = False

    @property
    def active(self) -> bool:
        return self._handle is not None

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def text(self) -> str:
        return self.formatter(self.display)

    def set_value(self, value: Any, duration_ms: Optional[float] = None) -> None:
        if self._disposed:
            raise RuntimeError("CountUp used after dispose()")
        self._cancel_pending()

        start = self.display
        target = coerce_target(value)
        d = effective_duration(self.duration_ms if duration_ms is None else duration_ms)
        self.previous = start
        self.target = target
        self._generation += 1
        gen = self._generation
        started_at = self.scheduler.now()

        def step(now: float) -> None:
            if self._disposed or gen != self._generation:
                return
            self._handle = None
            t = min(1.0, max(0.0, (now - started_at) / d))
            self._render(interpolate(start, target, t))
            if t < 1:
                self._handle = self.scheduler.request_frame(step)
            else:
                self.previous = target

        self._handle = self.scheduler.request_frame(step)

    def dispose(self) -> None:
        self._cancel_pending()
        self._disposed = True

    def __enter__(self) -> "CountUp":
        return self

    def __exit__(self, *exc) -> None:
        self.dispose()

    def _cancel_pending(self) -> None:
        if self._handle is not None:
            self.scheduler.cancel_frame(self._handle)
            self._handle = None

    def _render(self, value: int) -> None:
        self.display = value
        if self.on_render is not None:
            self.on_render(value, self.formatter(value))
