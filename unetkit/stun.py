"""Minimal STUN binding requests for discovering an external port."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator

from unetkit.random import randombytes

STUN_MAGIC = 0x2112A442

_HEADER = struct.Struct(">HHI12s")
_TLV = struct.Struct(">HH")


class MessageType(IntEnum):
    BINDING_REQUEST = 0x0001
    BINDING_RESPONSE = 0x0101
    BINDING_ERROR = 0x0111
    BINDING_INDICATION = 0x0011
    SHARED_SECRET_REQUEST = 0x0002
    SHARED_SECRET_RESPONSE = 0x0102
    SHARED_SECRET_ERROR = 0x0112


class TlvType(IntEnum):
    MAPPED_ADDRESS = 0x01
    RESPONSE_ADDRESS = 0x02
    CHANGE_REQUEST = 0x03
    SOURCE_ADDRESS = 0x04
    CHANGED_ADDRESS = 0x05
    XOR_MAPPED_ADDRESS = 0x20
    RESPONSE_PORT = 0x27


_RESPONSE_POLICY = {
    TlvType.MAPPED_ADDRESS: 8,
    TlvType.XOR_MAPPED_ADDRESS: 8,
}


def stun_msg_is_valid(data: bytes) -> bool:
    """Return True if ``data`` is longer than a STUN header and carries the magic."""
    if len(data) <= _HEADER.size:
        return False
    (magic,) = struct.unpack_from(">I", data, 4)
    return magic == STUN_MAGIC


def _iter_tlvs(data: bytes) -> Iterator[tuple[int, bytes]]:
    offset = _HEADER.size
    end = len(data)
    while offset + _TLV.size <= end:
        tlv_type, tlv_len = _TLV.unpack_from(data, offset)
        start = offset + _TLV.size
        if start + tlv_len > end:
            break
        yield tlv_type, data[start:start + tlv_len]
        offset = start + ((tlv_len + 3) & ~3)


def _parse(data: bytes, policy: dict[int, int]) -> dict[int, bytes]:
    found: dict[int, bytes] = {}
    for tlv_type, value in _iter_tlvs(data):
        min_len = policy.get(tlv_type)
        if min_len is None or len(value) < min_len:
            continue
        found[tlv_type] = value
    return found


@dataclass
class StunRequest:
    """State of one outstanding STUN binding request."""

    transaction: bytes = field(default=bytes(12))
    port: int = 0
    pending: bool = False

    def prepare(self, response_port: int = 0) -> bytes:
        """Build a binding request and mark this request as pending."""
        body = b""
        if response_port:
            value = struct.pack(">H", response_port)
            body = _TLV.pack(TlvType.RESPONSE_PORT, len(value)) + value
            body += b"\x00" * (-len(value) % 4)

        self.transaction = randombytes(12)
        self.pending = True
        self.port = 0
        header = _HEADER.pack(MessageType.BINDING_REQUEST, len(body), STUN_MAGIC, self.transaction)
        return header + body

    def complete(self, data: bytes) -> bool:
        """Accept a binding response; on success store the mapped port and return True."""
        if not self.pending:
            return False
        if not stun_msg_is_valid(data):
            return False

        msg_type, _, _, transaction = _HEADER.unpack_from(data, 0)
        if msg_type != MessageType.BINDING_RESPONSE:
            return False
        if transaction != self.transaction:
            return False

        attrs = _parse(data, _RESPONSE_POLICY)
        if TlvType.XOR_MAPPED_ADDRESS in attrs:
            (port,) = struct.unpack_from(">H", attrs[TlvType.XOR_MAPPED_ADDRESS], 2)
            port ^= STUN_MAGIC >> 16
        elif TlvType.MAPPED_ADDRESS in attrs:
            (port,) = struct.unpack_from(">H", attrs[TlvType.MAPPED_ADDRESS], 2)
        else:
            return False

        self.port = port
        return True