"""
Owned buffers for secret material.

Python gives no hard guarantee about copies made by the interpreter, so
wiping is best effort: the bytearray we own is zeroed in place and the
buffer refuses further reads.  Use it as a context manager so every exit
path (return, exception) clears it.
"""

from __future__ import annotations


class SecretBuffer:
    """A wipeable bytearray holding a seed or a private scalar."""

    __slots__ = ("_buf", "_wiped")

    def __init__(self, data: bytes | bytearray):
        self._buf = bytearray(data)
        self._wiped = False

    @classmethod
    def from_int(cls, value: int, length: int = 32) -> SecretBuffer:
        return cls(value.to_bytes(length, "big"))

    def get_value(self) -> bytes:
        """Return a copy of the secret."""
        if self._wiped:
            raise ValueError("secret buffer has been wiped")
        return bytes(self._buf)

    def to_int(self) -> int:
        return int.from_bytes(self.get_value(), "big")

    @property
    def wiped(self) -> bool:
        return self._wiped

    def wipe(self) -> None:
        """Overwrite the buffer with zeros.  Idempotent."""
        for i in range(len(self._buf)):
            self._buf[i] = 0
        self._wiped = True

    def __len__(self) -> int:
        return len(self._buf)

    def __enter__(self) -> SecretBuffer:
        return self

    def __exit__(self, *exc) -> None:
        self.wipe()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretBuffer):
            return NotImplemented
        return self.get_value() == other.get_value()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        state = "wiped" if self._wiped else f"{len(self._buf)} bytes"
        return f"SecretBuffer(<{state}>)"
