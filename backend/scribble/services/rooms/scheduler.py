from typing import Callable


class TimerHandle:
    """Cancellation token for one scheduled callback."""

    def __init__(self, delay: float):
        self.delay = delay
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class SocketIOScheduler:
    """Run callbacks after a delay on Socket.IO background tasks.

    The worker sleeps in ``tick``-sized steps with ``socketio.sleep`` so it
    cooperates with whichever async mode the server picked (threading,
    eventlet or gevent) and exits within one tick of being cancelled.
    """

    def __init__(self, socketio, logger=None, tick: float = 0.25):
        if tick <= 0:
            raise ValueError(f"tick must be positive, got {tick}")
        self.socketio = socketio
        self.logger = logger
        self.tick = tick

    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(delay)

        def _worker(h: TimerHandle):
            remaining = h.delay
            while remaining > 0:
                if h.cancelled:
                    return
                step = min(self.tick, remaining)
                self.socketio.sleep(step)
                remaining -= step
            if h.cancelled:
                return
            try:
                callback()
            except Exception:
                if self.logger is not None:
                    self.logger.exception(f"[timer-error] delay={h.delay}s")
                else:
                    raise

        self.socketio.start_background_task(_worker, handle)
        return handle
