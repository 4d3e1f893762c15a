"""Push transport mocks.

``FakeTransport`` stands in for a platform push primitive: it records
every connection it creates, and each ``FakeConnection`` lets a test
fire open/message/error events by hand.
"""

from livefeed.transports.base import MessageEvent


class FakeConnection:
    """A push connection driven entirely by the test."""

    def __init__(self, url: str) -> None:
        self.url = url
        self.on_open = None
        self.on_message = None
        self.on_error = None
        self.closed = False
        self.close_calls = 0

    def close(self) -> None:
        self.closed = True
        self.close_calls += 1

    @property
    def detached(self) -> bool:
        return self.on_open is None and self.on_message is None and self.on_error is None

    def fire_open(self) -> None:
        if self.on_open is not None:
            self.on_open()

    def fire_message(self, data: str, event: str = "message") -> None:
        if self.on_message is not None:
            self.on_message(MessageEvent(data=data, event=event))

    def fire_error(self, exc: BaseException | None = None) -> None:
        if self.on_error is not None:
            self.on_error(exc)


class FakeTransport:
    """Connection factory that records every instance it builds."""

    def __init__(self) -> None:
        self.instances: list[FakeConnection] = []

    def __call__(self, url: str) -> FakeConnection:
        connection = FakeConnection(url)
        self.instances.append(connection)
        return connection

    @property
    def live(self) -> list[FakeConnection]:
        return [c for c in self.instances if not c.closed]

    @property
    def latest(self) -> FakeConnection:
        return self.instances[-1]


class FailingTransport(FakeTransport):
    """Factory that raises for the first ``failures`` attempts."""

    def __init__(self, failures: int) -> None:
        super().__init__()
        self.failures = failures
        self.calls = 0

    def __call__(self, url: str) -> FakeConnection:
        self.calls += 1
        if self.calls <= self.failures:
            raise OSError("connection refused")
        return super().__call__(url)
