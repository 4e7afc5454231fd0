"""Framing, checksum and retry logic of the drive bus protocol."""

from __future__ import annotations

import time

from .comminterface import QueueFullError, SlotState

RETRY_TIMES = 3
OUT_BUF_DIM = 128
IN_BUF_DIM = 128
MAX_PAYLOAD = OUT_BUF_DIM - 6
POLL_INTERVAL_S = 0.001


class BusError(IOError):
    """A request could not be delivered or got no valid reply."""


def _crc_table() -> tuple[int, ...]:
    table = []
    for index in range(256):
        crc = index
        for _ in range(8):
            crc = (crc >> 1) ^ 0xA001 if crc & 1 else crc >> 1
        table.append(crc)
    return tuple(table)


_CRC_TABLE = _crc_table()


def crc_modbus(data):
    """Modbus CRC-16 of ``data``, ordered as sent on the wire (first byte high)."""
    crc = 0xFFFF
    for byte in data:
        crc = (crc >> 8) ^ _CRC_TABLE[(crc ^ byte) & 0xFF]
    return ((crc & 0xFF) << 8) | (crc >> 8)


def build_frame(address, command, payload=b""):
    """Build a request: address, command, 16-bit length, payload, CRC."""
    payload = bytes(payload)
    if len(payload) > MAX_PAYLOAD:
        raise BusError(f"payload of {len(payload)} bytes exceeds {MAX_PAYLOAD}")
    body = bytes((address & 0xFF, command & 0xFF)) + len(payload).to_bytes(2, "big") + payload
    return body + crc_modbus(body).to_bytes(2, "big")


def _valid_reply(reply: bytes, address: int, command: int) -> bool:
    if len(reply) < 6:
        return False
    if reply[0] != address & 0xFF or reply[1] != command & 0xFF:
        return False
    return crc_modbus(reply[:-2]) == int.from_bytes(reply[-2:], "big")


def _await(comm, slot: int) -> tuple[SlotState, bytes]:
    while True:
        time.sleep(POLL_INTERVAL_S)
        state, reply = comm.receive(slot)
        if state != SlotState.RTS:
            return state, reply


def send(comm, address, command, payload=b""):
    """Send a request through ``comm`` and return the data of the reply.

    The request is repeated up to three times when the reply is missing or
    corrupt; after that :class:`BusError` is raised.
    """
    frame = build_frame(address, command, payload)
    for _ in range(RETRY_TIMES):
        try:
            slot = comm.send(frame, 0)
        except QueueFullError as exc:
            raise BusError("communication queue is full") from exc
        state, reply = _await(comm, slot)
        if state == SlotState.DONE and _valid_reply(reply, address, command):
            return bytes(reply[4:-2])
    raise BusError(f"no valid reply from drive {address} to command {command}")


def send_command(comm, address, command, value=None, activated=True):
    """Send a command, optionally with a 16-bit argument, and return reply data.

    When ``activated`` is false nothing is sent and empty data is returned.
    """
    if not activated:
        return b""
    payload = b"" if value is None else (value & 0xFFFF).to_bytes(2, "big")
    return send(comm, address, command, payload)