"""Timed, optionally half-duplex access to a serial line."""

from __future__ import annotations

import time

import serial

BUFFER_MAX_LEN = 512
DEFAULT_TIMEOUT_MS = 100
DEFAULT_BAUDRATE = 115200

# How long a single read waits for data before the overall deadline is checked.
_POLL_S = 0.01


class SerialError(IOError):
    """A serial transfer failed or did not complete in time."""


class SerialLink:
    """A serial port with whole-buffer reads and writes bounded by a timeout.

    On a half-duplex line every byte written is echoed back by the bus;
    :meth:`write` consumes that echo before returning.
    """

    def __init__(self, port=None, timeout_ms=DEFAULT_TIMEOUT_MS, half_duplex=False):
        self._port = port
        self.timeout_ms = timeout_ms
        self.half_duplex = half_duplex

    @property
    def is_open(self) -> bool:
        """True when an underlying port is attached and open."""
        return self._port is not None and bool(getattr(self._port, "is_open", True))

    def open(self, port_name, baudrate=DEFAULT_BAUDRATE, half_duplex=False):
        """Open ``port_name`` (a device name or pyserial URL) at ``baudrate``."""
        try:
            port = serial.serial_for_url(
                port_name,
                baudrate=baudrate,
                timeout=_POLL_S,
                write_timeout=self.timeout_ms / 1000,
            )
        except (OSError, ValueError) as exc:
            raise SerialError(f"cannot open {port_name}: {exc}") from exc
        self._port = port
        self.half_duplex = half_duplex

    def _require_port(self):
        if self._port is None:
            raise SerialError("serial port is not open")
        return self._port

    def _collect(self, size: int) -> bytes:
        port = self._require_port()
        buffer = bytearray()
        deadline = time.monotonic() + self.timeout_ms / 1000
        try:
            while len(buffer) < size:
                chunk = port.read(size - len(buffer))
                if chunk:
                    buffer += chunk
                if time.monotonic() > deadline:
                    break
        except OSError as exc:
            raise SerialError(f"read failed: {exc}") from exc
        if len(buffer) < size:
            raise SerialError(f"read timed out after {len(buffer)} of {size} bytes")
        return bytes(buffer)

    def read(self, size):
        """Read exactly ``size`` bytes or raise :class:`SerialError`."""
        return self._collect(size)

    def write(self, data):
        """Write all of ``data``; on a half-duplex line also swallow its echo."""
        port = self._require_port()
        data = bytes(data)
        sent = 0
        deadline = time.monotonic() + self.timeout_ms / 1000
        try:
            while sent < len(data):
                count = port.write(data[sent:])
                sent += len(data) - sent if count is None else count
                if sent < len(data) and time.monotonic() > deadline:
                    break
            port.flush()
        except OSError as exc:
            raise SerialError(f"write failed: {exc}") from exc
        if sent < len(data):
            raise SerialError(f"write timed out after {sent} of {len(data)} bytes")
        if self.half_duplex:
            self._collect(len(data))

    def discard_input(self):
        """Drop any bytes waiting in the input buffer."""
        try:
            self._require_port().reset_input_buffer()
        except OSError as exc:
            raise SerialError(f"cannot clear input: {exc}") from exc

    def close(self):
        """Close the underlying port, if any."""
        if self._port is not None:
            self._port.close()
            self._port = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()