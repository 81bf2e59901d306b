import json
from unittest import mock

import requests


def make_response(status: int = 200, payload=None, reason: str = "OK") -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.reason = reason
    resp._content = json.dumps(payload).encode("utf-8") if payload is not None else b""
    return resp


def make_session() -> mock.MagicMock:
    return mock.create_autospec(requests.Session, instance=True)


def pin_row(pin_id: str, cid: str, name: str = "a.png", size: int = 10, meta_name=None) -> dict:
    return {
        "id": pin_id,
        "ipfs_pin_hash": cid,
        "size": size,
        "user_id": "u1",
        "name": name,
        "date_pinned": "2024-05-01T12:00:00.000Z",
        "metadata": {"name": meta_name, "keyvalues": None},
    }


class FakeTimer:
    def __init__(self, interval, fn):
        self.interval = interval
        self.fn = fn
        self.started = False
        self.cancelled = False
        self.fired = False
        self.daemon = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    @property
    def pending(self):
        return self.started and not self.cancelled and not self.fired

    def fire(self):
        self.fired = True
        self.fn()


class FakeClock:
    """Timer factory whose timers only run when fired explicitly."""

    def __init__(self):
        self.timers = []

    def __call__(self, interval, fn):
        timer = FakeTimer(interval, fn)
        self.timers.append(timer)
        return timer

    def pending(self, interval=None):
        return [t for t in self.timers if t.pending and (interval is None or t.interval == interval)]

    def fire(self, interval=None):
        for timer in self.pending(interval):
            timer.fire()
