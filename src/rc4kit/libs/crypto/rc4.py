from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from types import TracebackType
from typing import Self

from .errors import CipherStateError, InvalidKeyLength

logger = logging.getLogger(__name__)

key_size = range(1, 256 + 1)

#: Keystream bytes discarded after key setup (RC4-drop[3072]).
#: Both peers must use the same value; ``0`` gives textbook RC4.
DEFAULT_DROP = 3072

BytesLike = bytes | bytearray | memoryview


def _check_key(key: BytesLike) -> bytes:
    if isinstance(key, (str, int)):
        raise TypeError(f"RC4 key must be bytes-like, not {type(key).__name__}")
    key = bytes(key)
    if len(key) not in key_size:
        raise InvalidKeyLength(len(key))
    return key


def _as_bytes_view(buf: BytesLike) -> memoryview:
    """Return a flat unsigned-byte view over ``buf``."""
    view = memoryview(buf)
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view


def _check_drop(drop: int) -> int:
    if isinstance(drop, bool) or not isinstance(drop, int):
        raise ValueError(f"drop must be an int, got {type(drop).__name__}")
    if drop < 0:
        raise ValueError(f"drop must be non-negative, got {drop}")
    return drop


class RC4:
    """Stateful RC4 (ARCFOUR) keystream generator.

    One instance holds one keystream session: the 256-byte permutation ``S``
    and the indices ``i`` and ``j``. Every call to :meth:`crypt` continues
    the same keystream, so a message may be processed in several pieces.

    Encryption and decryption are the same operation. To decrypt, build a
    fresh instance with the same key and ``drop`` and call :meth:`crypt` on
    the ciphertext.

    Instances are not thread-safe; use one instance per writer.
    """

    def __init__(self, key: BytesLike, drop: int = DEFAULT_DROP) -> None:
        """
        Args:
            key: RC4 key, 1 to 256 bytes. It is folded into the permutation
                and not kept on the instance.
            drop: Number of initial keystream bytes to discard.

        Raises:
            InvalidKeyLength: If the key is empty or longer than 256 bytes.
            TypeError: If ``key`` is not bytes-like.
            ValueError: If ``drop`` is negative or not an int.
        """
        key = _check_key(key)
        self._drop = _check_drop(drop)
        self._S = bytearray(256)
        self._i = 0
        self._j = 0
        self._closed = False
        self._schedule(key)
        logger.debug("RC4 state ready (key_len=%d, drop=%d)", len(key), self._drop)

    @property
    def drop(self) -> int:
        """Number of keystream bytes discarded after key setup."""
        return self._drop

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def state(self) -> tuple[bytes, int, int]:
        """Snapshot of ``(S, i, j)``. The returned table is a copy."""
        self._ensure_open()
        return bytes(self._S), self._i, self._j

    def next_byte(self) -> int:
        """Advance the generator by one step and return the keystream byte.

        This is the RC4 Pseudo-Random Generation Algorithm (PRGA).
        """
        self._ensure_open()
        S = self._S
        i = (self._i + 1) & 0xFF
        j = (self._j + S[i]) & 0xFF
        S[i], S[j] = S[j], S[i]
        self._i, self._j = i, j
        return S[(S[i] + S[j]) & 0xFF]

    def keystream(self, n: int) -> bytes:
        """Return the next ``n`` keystream bytes.

        Raises:
            ValueError: If ``n`` is negative.
        """
        self._ensure_open()
        if n < 0:
            raise ValueError(f"keystream length must be non-negative, got {n}")
        return self.crypt(bytes(n))

    def crypt(self, data: BytesLike) -> bytes:
        """Encrypts/Decrypts data

        Args:
            data: Input bytes, either plaintext or ciphertext.

        Returns:
            Output bytes after XOR with the RC4 keystream, same length as
            the input.
        """
        self._ensure_open()
        src = _as_bytes_view(data)
        if not src:
            return b""

        out = bytearray(len(src))
        self._xor_into(src, out)
        return bytes(out)

    def crypt_into(self, data: BytesLike, out: bytearray | memoryview) -> int:
        """Encrypt/decrypt ``data`` into a caller-owned buffer.

        Only the first ``len(data)`` bytes of ``out`` are written. ``data`` and
        ``out`` may be views of the same buffer, including overlapping
        slices; the input is copied first in that case.

        Args:
            data: Input bytes.
            out: Writable buffer at least as long as ``data``.

        Returns:
            Number of bytes written.

        Raises:
            TypeError: If ``out`` is not writable.
            ValueError: If ``out`` is shorter than ``data``.
        """
        self._ensure_open()
        src = _as_bytes_view(data)
        view = _as_bytes_view(out)
        if view.readonly:
            raise TypeError("output buffer must be writable")
        if len(view) < len(src):
            raise ValueError(
                f"output buffer too small: need {len(src)}, got {len(view)}"
            )
        if src.obj is view.obj:
            src = memoryview(bytes(src))
        self._xor_into(src, view)
        return len(src)

    def crypt_iter(self, chunks: Iterable[BytesLike]) -> Iterator[bytes]:
        """Apply the keystream to a sequence of chunks, yielding each result.

        The output is identical to running :meth:`crypt` on the concatenated
        input.
        """
        for chunk in chunks:
            yield self.crypt(chunk)

    def reset(self, key: BytesLike, drop: int | None = None) -> None:
        """Re-key this instance, starting a new keystream.

        Args:
            key: New RC4 key, 1 to 256 bytes.
            drop: New discard count. ``None`` keeps the current one.

        Raises:
            InvalidKeyLength: If the key length is invalid. The current
                keystream is left untouched.
            CipherStateError: If the instance has been destroyed.
        """
        self._ensure_open()
        key = _check_key(key)
        if drop is not None:
            self._drop = _check_drop(drop)
        self._schedule(key)
        logger.debug("RC4 state reset (key_len=%d, drop=%d)", len(key), self._drop)

    def destroy(self) -> None:
        """Zero the permutation and indices. Safe to call more than once."""
        if self._closed:
            return
        self._S[:] = bytes(256)
        self._i = self._j = 0
        self._closed = True
        logger.debug("RC4 state destroyed")

    def __enter__(self) -> Self:
        self._ensure_open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.destroy()

    def __repr__(self) -> str:
        status = "closed" if self._closed else "ready"
        return f"<RC4 drop={self._drop} {status}>"

    def _schedule(self, key: bytes) -> None:
        """Perform the RC4 Key-Scheduling Algorithm (KSA), then discard."""
        S = self._S
        for x in range(256):
            S[x] = x
        j = 0
        klen = len(key)
        for i in range(256):
            j = (j + S[i] + key[i % klen]) & 0xFF
            S[i], S[j] = S[j], S[i]
        self._i = 0
        self._j = 0
        self._discard(self._drop)

    def _discard(self, n: int) -> None:
        S = self._S
        i, j = self._i, self._j
        for _ in range(n):
            i = (i + 1) & 0xFF
            j = (j + S[i]) & 0xFF
            S[i], S[j] = S[j], S[i]
        self._i, self._j = i, j

    def _xor_into(self, data: memoryview, out: bytearray | memoryview) -> None:
        S = self._S
        i, j = self._i, self._j
        for idx, ch in enumerate(data):
            i = (i + 1) & 0xFF
            j = (j + S[i]) & 0xFF
            S[i], S[j] = S[j], S[i]
            out[idx] = ch ^ S[(S[i] + S[j]) & 0xFF]
        self._i, self._j = i, j

    def _ensure_open(self) -> None:
        if self._closed:
            raise CipherStateError("RC4 state has been destroyed")


def new(key: BytesLike, drop: int = DEFAULT_DROP) -> RC4:
    """Create an RC4 cipher object.

    Args:
        key: RC4 key of length 1 to 256 bytes.
        drop: Number of initial keystream bytes to discard. Defaults to
            :data:`DEFAULT_DROP`; pass ``0`` for textbook RC4.

    Returns:
        A ready :class:`RC4` instance.

    Raises:
        InvalidKeyLength: If the key length is invalid.
        ValueError: If ``drop`` is invalid.
    """
    return RC4(key, drop=drop)
