"""Varint length-prefixed framing for turning a byte stream into packets."""

from __future__ import annotations

__all__ = ["MAX_ENCODED_SIZE", "encode_size", "decode_size", "Decoder"]

#: Largest number of bytes a 64-bit length can take in varint form (ceil(64 / 7)).
MAX_ENCODED_SIZE = 10


def _encode_varint(value: int) -> bytes:
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def encode_size(message: bytes) -> bytes:
    """Return the frame header that must be sent before ``message``."""
    return _encode_varint(len(message))


def decode_size(data: bytes) -> tuple[int, int] | None:
    """Decode a frame header at the start of ``data``.

    Returns ``(message_size, header_bytes)``, or ``None`` if ``data`` does not
    hold a complete header.
    """
    value = 0
    shift = 0
    for used, byte in enumerate(data[:MAX_ENCODED_SIZE], start=1):
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, used
        shift += 7
    return None


class Decoder:
    """Reassembles framed messages from partial or multiple data chunks."""

    def __init__(self) -> None:
        self._stored = bytearray()

    def _try_decode(self, data: memoryview, decoded: list[bytes]) -> None:
        while True:
            size_info = decode_size(data)
            if size_info is not None:
                expected_size, used_bytes = size_info
                remaining = data[used_bytes:]
                if len(remaining) >= expected_size:
                    decoded.append(bytes(remaining[:expected_size]))
                    data = remaining[expected_size:]
                    if len(data):
                        continue
                    return
            self._stored.extend(data)
            return

    def _store_and_decode(self, data: memoryview) -> tuple[bytes, memoryview] | None:
        size_info = decode_size(self._stored)
        if size_info is None:
            max_remaining = max(0, min(MAX_ENCODED_SIZE - len(self._stored), len(data)))
            self._stored.extend(data[:max_remaining])
            size_info = decode_size(self._stored)
            if size_info is None:
                return None
            data = data[max_remaining:]

        expected_size, used_bytes = size_info
        remaining = expected_size - (len(self._stored) - used_bytes)
        if len(data) < remaining:
            self._stored.extend(data)
            return None
        self._stored.extend(data[:remaining])
        return bytes(self._stored[used_bytes:]), data[remaining:]

    def decode(self, data: bytes) -> list[bytes]:
        """Feed ``data`` and return every message it completes, in order.

        Bytes that do not yet form a whole message are kept until later calls.
        """
        view = memoryview(bytes(data))
        decoded: list[bytes] = []
        if not self._stored:
            self._try_decode(view, decoded)
        else:
            result = self._store_and_decode(view)
            if result is not None:
                message, remaining = result
                decoded.append(message)
                self._stored.clear()
                self._try_decode(remaining, decoded)
        return decoded

    def stored_size(self) -> int:
        """Number of bytes held while waiting for the rest of a message."""
        return len(self._stored)