"""Cancelable one-shot timers for duel deadlines and grace periods."""


class TimerHandle:
    """Owned by one duel. Cancelling it guarantees its transition never runs."""

    __slots__ = ('duel_id', 'kind', 'delay', 'cancelled', 'fired')

    def __init__(self, duel_id: str, kind: str, delay: float):
        self.duel_id = duel_id
        self.kind = kind
        self.delay = delay
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self):
        state = 'pending' if self.pending else ('cancelled' if self.cancelled else 'fired')
        return f"<TimerHandle duel={self.duel_id} kind={self.kind} delay={self.delay} {state}>"


class SocketIOTimers:
    """Runs callbacks after a delay on Socket.IO background tasks.

    Uses ``socketio.sleep`` so the same code works under threading,
    eventlet and gevent async modes.
    """

    def __init__(self, socketio):
        self.socketio = socketio

    def call_later(self, delay: float, callback) -> None:
        def _runner():
            self.socketio.sleep(delay)
            callback()

        self.socketio.start_background_task(_runner)
