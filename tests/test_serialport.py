import pytest

from sr2700.serialport import SerialError, SerialLink


class FakePort:
    def __init__(self, incoming=b"", chunk=None, echo=False, write_limit=None):
        self.incoming = bytearray(incoming)
        self.chunk = chunk
        self.echo = echo
        self.write_limit = write_limit
        self.written = bytearray()
        self.is_open = True
        self.resets = 0

    def read(self, size):
        size = min(size, self.chunk) if self.chunk else size
        data = bytes(self.incoming[:size])
        del self.incoming[:size]
        return data

    def write(self, data):
        data = bytes(data)
        if self.write_limit is not None:
            data = data[: self.write_limit]
        self.written += data
        if self.echo:
            self.incoming += data
        return len(data)

    def flush(self):
        pass

    def reset_input_buffer(self):
        self.resets += 1
        self.incoming.clear()

    def close(self):
        self.is_open = False


def test_read_collects_chunks():
    port = FakePort(incoming=b"abcdef", chunk=2)
    link = SerialLink(port, timeout_ms=50)
    assert link.read(5) == b"abcde"
    assert bytes(port.incoming) == b"f"


def test_read_times_out_when_data_missing():
    link = SerialLink(FakePort(incoming=b"ab"), timeout_ms=20)
    with pytest.raises(SerialError):
        link.read(4)


def test_write_loops_over_partial_writes():
    port = FakePort(write_limit=1)
    link = SerialLink(port, timeout_ms=50)
    link.write(b"hello")
    assert bytes(port.written) == b"hello"


def test_write_that_never_progresses_fails():
    port = FakePort(write_limit=0)
    link = SerialLink(port, timeout_ms=20)
    with pytest.raises(SerialError):
        link.write(b"xy")


def test_half_duplex_write_consumes_echo():
    port = FakePort(echo=True)
    link = SerialLink(port, timeout_ms=50, half_duplex=True)
    link.write(b"xyz")
    assert bytes(port.written) == b"xyz"
    assert bytes(port.incoming) == b""


def test_half_duplex_without_echo_fails():
    link = SerialLink(FakePort(), timeout_ms=20, half_duplex=True)
    with pytest.raises(SerialError):
        link.write(b"xyz")


def test_discard_input_clears_pending_bytes():
    port = FakePort(incoming=b"junk")
    link = SerialLink(port)
    link.discard_input()
    assert port.resets == 1
    assert bytes(port.incoming) == b""


def test_operations_without_port_raise():
    link = SerialLink()
    assert link.is_open is False
    with pytest.raises(SerialError):
        link.read(1)
    with pytest.raises(SerialError):
        link.write(b"a")


def test_close_releases_port():
    port = FakePort()
    with SerialLink(port) as link:
        assert link.is_open is True
    assert port.is_open is False
    assert link.is_open is False


def test_open_loopback_round_trip():
    link = SerialLink(timeout_ms=200)
    link.open("loop://", 9600, False)
    try:
        link.write(b"abc")
        assert link.read(3) == b"abc"
    finally:
        link.close()


def test_open_loopback_half_duplex_swallows_echo():
    link = SerialLink(timeout_ms=100)
    link.open("loop://", 9600, True)
    try:
        link.write(b"xy")
        with pytest.raises(SerialError):
            link.read(1)
    finally:
        link.close()


def test_open_missing_device_raises():
    link = SerialLink()
    with pytest.raises(SerialError):
        link.open("/nonexistent/tty-device", 9600, False)