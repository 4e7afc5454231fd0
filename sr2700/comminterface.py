"""Queue of bus transactions serviced by a background worker."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum, IntEnum

from .serialport import BUFFER_MAX_LEN, SerialError

FIFO_BUF_DIM = 128
IO_BUF_DIM = BUFFER_MAX_LEN
SEND_INTERVAL_S = 0.001


class Protocol(Enum):
    """Framing of the replies read back from the line."""

    TWS = 0
    EVER = 1


class SlotState(IntEnum):
    """Life cycle of a queued transaction."""

    ERROR = -1
    EMPTY = 0
    RTS = 1
    DONE = 2


class QueueFullError(RuntimeError):
    """Every slot of the transaction queue is in use."""


@dataclass
class _Slot:
    state: SlotState = SlotState.EMPTY
    data: bytes = b""
    expected: int = 0


class CommInterface:
    """Serialises requests onto a link and stores each reply in its slot."""

    def __init__(self, link, protocol=Protocol.TWS):
        self._link = link
        self.protocol = protocol
        self._slots = [_Slot() for _ in range(FIFO_BUF_DIM)]
        self._next_free = 0
        self._next_tx = 0
        self._lock = threading.Lock()
        self._halt = threading.Event()
        self._thread: threading.Thread | None = None

    def _find(self, start: int, state: SlotState) -> int | None:
        for offset in range(FIFO_BUF_DIM):
            index = (start + offset) % FIFO_BUF_DIM
            if self._slots[index].state == state:
                return index
        return None

    def _transact(self, slot: _Slot) -> tuple[SlotState, bytes]:
        link = self._link
        try:
            link.discard_input()
            link.write(slot.data)
            if slot.data[0] == 0:
                # Broadcast frames get no reply: the request itself is kept.
                return SlotState.DONE, slot.data
            if self.protocol == Protocol.TWS:
                header = link.read(4)
                length = int.from_bytes(header[2:4], "big", signed=True)
                if not 0 <= length <= IO_BUF_DIM - 6:
                    return SlotState.ERROR, header
                return SlotState.DONE, header + link.read(length + 2)
            return SlotState.DONE, link.read(slot.expected)
        except SerialError:
            return SlotState.ERROR, b""

    def process_pending(self):
        """Carry out the next queued transaction; return False if none waits."""
        with self._lock:
            index = self._find(self._next_tx, SlotState.RTS)
            if index is None:
                return False
            self._next_tx = index
            slot = self._slots[index]
            slot.state, slot.data = self._transact(slot)
            return True

    def run(self):
        """Service the queue until :meth:`stop` is called."""
        while not self._halt.is_set():
            self.process_pending()
            if self._halt.is_set():
                return
            self._halt.wait(SEND_INTERVAL_S)

    def start(self):
        """Run the worker in a background thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._halt.clear()
        self._thread = threading.Thread(target=self.run, name="comm-interface", daemon=True)
        self._thread.start()

    def stop(self):
        """Ask the worker to finish and wait for it."""
        self._halt.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._thread = None

    def send(self, data, expected_bytes=0):
        """Queue ``data`` for transmission and return its slot number."""
        data = bytes(data)
        if not data:
            raise ValueError("cannot send an empty frame")
        if len(data) > IO_BUF_DIM:
            raise ValueError(f"frame of {len(data)} bytes exceeds {IO_BUF_DIM}")
        with self._lock:
            index = self._find(self._next_free, SlotState.EMPTY)
            if index is None:
                raise QueueFullError("no free transaction slot")
            slot = self._slots[index]
            slot.data = data
            slot.expected = expected_bytes
            slot.state = SlotState.RTS
            self._next_free = (index + 1) % FIFO_BUF_DIM
            return index

    def receive(self, slot):
        """Return ``(state, reply)`` for ``slot``; a finished slot is freed."""
        with self._lock:
            entry = self._slots[slot]
            state = entry.state
            if state in (SlotState.DONE, SlotState.ERROR):
                data = entry.data
                self._slots[slot] = _Slot()
                return state, data
            return state, b""

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()