"""Test helpers shared across modules."""

import asyncio

from agrinav.nav_core.parsers.nmea_parser import compute_checksum
from agrinav.nav_core.transports.base_transport import BaseTransport
from agrinav.nav_core.transports.envelope import RelayMessage


def nmea(body: str) -> str:
    """Wrap a sentence body as ``$body*HH`` with a correct checksum."""
    return f"${body}*{compute_checksum(body)}"


def gga(lat="4807.038", ns="N", lon="01131.000", ew="E", quality="1", sats="08",
        hdop="0.9", alt="545.4") -> str:
    return nmea(f"GPGGA,123519,{lat},{ns},{lon},{ew},{quality},{sats},{hdop},{alt},M,46.9,M,,")


def rmc(speed_knots="022.4", course="084.4") -> str:
    return nmea(f"GPRMC,123519,A,4807.038,N,01131.000,E,{speed_knots},{course},230394,003.1,W")


class FakeClock:
    """Manually advanced clock for monotonic-time dependent code."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


async def wait_until(predicate, timeout: float = 1.0, interval: float = 0.01) -> bool:
    """Poll ``predicate`` on the running loop until it holds or ``timeout`` passes."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() >= deadline:
            return False
        await asyncio.sleep(interval)
    return True


class FakeTransport(BaseTransport):
    """Queue-backed transport.

    Put a RelayMessage to deliver it, None to close the channel, or an
    exception instance to make ``read_message`` raise it.
    ``connect_delay`` keeps each connect attempt in flight for that long.
    """

    def __init__(self, connect_results=None, error: str = "Connection refused",
                 connect_delay: float = 0.0):
        super().__init__()
        self.connect_delay = connect_delay
        self.queue: asyncio.Queue = asyncio.Queue()
        self.connect_results = list(connect_results or [])
        self.error = error
        self.connect_calls = 0
        self.disconnect_calls = 0

    @property
    def endpoint(self) -> str:
        return "fake://relay"

    async def connect(self) -> bool:
        self.connect_calls += 1
        if self.connect_delay:
            await asyncio.sleep(self.connect_delay)
        ok = self.connect_results.pop(0) if self.connect_results else True
        self._connected = ok
        self._last_error = None if ok else self.error
        return ok

    async def disconnect(self) -> None:
        self.disconnect_calls += 1
        self._connected = False

    async def read_message(self):
        item = await self.queue.get()
        if isinstance(item, Exception):
            raise item
        if item is None:
            self._connected = False
            self._last_error = "Closed by peer"
        return item

    def send_nmea(self, data: str) -> None:
        self.queue.put_nowait(RelayMessage.nmea(data))

    def close_from_peer(self) -> None:
        self.queue.put_nowait(None)


def run_async(coro):
    """Run an async coroutine synchronously for testing."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()
