"""Domain-separated deterministic draw streams using xxhash.

Formula: Digest_r = Hash(TickHash, Caller, Principal, Target, System,
Domain, Nonce, Salt, r)

Bytes of digest round 0 are consumed in order as independent draws; when
they run out, round 1 is derived by re-hashing the same payload with the
round counter incremented, and so on. A stream therefore never runs dry and
its full byte sequence is a pure function of the context.

The inputs are public. A party that can choose when its own operation runs
can predict (and shop for) outcomes. Wrap the engine with
``SystemRandomSource`` where that matters.
"""

from __future__ import annotations

import secrets
import struct
from dataclasses import dataclass
from typing import Protocol

import xxhash

from gridworld.core.enums import Domain


@dataclass(frozen=True, slots=True)
class EntropyContext:
    """Everything a draw stream is derived from."""

    tick_hash: int
    caller: str
    principal: str
    target: int
    system_id: str
    domain: Domain
    nonce: int = 0
    salt: bytes = b""

    def payload(self) -> bytes:
        parts = [
            struct.pack("<QiqQ", self.tick_hash, int(self.domain), self.target, self.nonce),
        ]
        # length-prefixed so ("ab", "c") and ("a", "bc") differ
        for chunk in (self.caller.encode(), self.principal.encode(),
                      self.system_id.encode(), self.salt):
            parts.append(struct.pack("<I", len(chunk)))
            parts.append(chunk)
        return b"".join(parts)


class DrawStream:
    """Sequential byte draws over an extendable digest chain."""

    __slots__ = ("_payload", "_round", "_buffer", "_offset", "_consumed")

    DIGEST_SIZE = 16

    def __init__(self, payload: bytes) -> None:
        self._payload = payload
        self._round = 0
        self._buffer = b""
        self._offset = 0
        self._consumed = 0
        self._extend()

    def _extend(self) -> None:
        self._buffer = xxhash.xxh3_128(self._payload + struct.pack("<I", self._round)).digest()
        self._round += 1
        self._offset = 0

    @property
    def rounds(self) -> int:
        """Number of digest rounds derived so far."""
        return self._round

    @property
    def consumed(self) -> int:
        return self._consumed

    def next_byte(self) -> int:
        if self._offset >= len(self._buffer):
            self._extend()
        value = self._buffer[self._offset]
        self._offset += 1
        self._consumed += 1
        return value

    def below(self, n: int) -> int:
        """Return a draw in ``[0, n)``, using as many bytes as *n* needs."""
        if n <= 0:
            raise ValueError(f"upper bound must be positive, got {n}")
        nbytes = max(1, ((n - 1).bit_length() + 7) // 8)
        value = 0
        for _ in range(nbytes):
            value = (value << 8) | self.next_byte()
        return value % n


class RandomSource(Protocol):
    """Anything that can hand out draw streams for an entropy context."""

    def tick_hash(self, tick: int) -> int: ...

    def stream(self, context: EntropyContext) -> DrawStream: ...


class DigestRandomSource:
    """Stateless, reproducible source: the stream is a pure function of
    (world seed, context). Fully thread-safe.
    """

    __slots__ = ("_seed",)

    def __init__(self, seed: int) -> None:
        self._seed = seed

    def tick_hash(self, tick: int) -> int:
        """Hash of the previous tick: recent, but settled before *tick* runs."""
        return xxhash.xxh64(struct.pack("<qq", self._seed, tick - 1)).intdigest()

    def stream(self, context: EntropyContext) -> DrawStream:
        return DrawStream(context.payload())


class SystemRandomSource:
    """Unpredictable source backed by the OS CSPRNG. Not reproducible."""

    __slots__ = ()

    def tick_hash(self, tick: int) -> int:
        return secrets.randbits(64)

    def stream(self, context: EntropyContext) -> DrawStream:
        return DrawStream(context.payload() + secrets.token_bytes(32))
