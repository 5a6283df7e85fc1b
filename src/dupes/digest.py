from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import BinaryIO, Dict

from .errors import ConfigError


DEFAULT_ALGORITHM = "md5"
DEFAULT_CHUNK_SIZE = 4096


@dataclass(frozen=True)
class DigestStrategy:
    name: str
    digest_size: int

    @property
    def label(self) -> str:
        return self.name.upper()

    @property
    def hex_length(self) -> int:
        return self.digest_size * 2

    def compute(self, handle: BinaryIO, buffer: bytearray, chunk_size: int) -> bytes:
        """
        Digest the whole stream behind handle, reading chunk_size bytes at a time
        into buffer (which must hold at least chunk_size bytes).

        OSError from the stream propagates; nothing partial is returned.
        """
        if chunk_size <= 0 or chunk_size > len(buffer):
            raise ValueError(f"chunk size {chunk_size} does not fit a buffer of {len(buffer)} bytes")
        hasher = hashlib.new(self.name)
        with memoryview(buffer) as view:
            window = view[:chunk_size]
            try:
                while True:
                    count = handle.readinto(window)
                    if not count:
                        break
                    hasher.update(window[:count])
            finally:
                window.release()
        return hasher.digest()


STRATEGIES: Dict[str, DigestStrategy] = {
    "md5": DigestStrategy("md5", 16),
    "sha1": DigestStrategy("sha1", 20),
}


def get_strategy(name: str) -> DigestStrategy:
    try:
        return STRATEGIES[name.lower()]
    except KeyError:
        raise ConfigError(
            f"Unsupported digest algorithm: {name} (expected one of {', '.join(STRATEGIES)})"
        ) from None


def to_hex(digest: bytes) -> str:
    return digest.hex()


def from_hex(text: str) -> bytes:
    return bytes.fromhex(text)
