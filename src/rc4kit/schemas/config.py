"""
Defines structured configuration models using dataclasses.
"""

from dataclasses import dataclass

from rc4kit.libs.crypto.rc4 import DEFAULT_DROP
from rc4kit.libs.textutils import parse_hex

KEY_ENCODINGS = ("utf-8", "latin-1", "hex")


@dataclass
class CipherConfig:
    """Parameters two peers must agree on, plus local processing options.

    Attributes:
        drop: Number of keystream bytes discarded after key setup.
        key_encoding: How textual keys are turned into bytes
            ("utf-8", "latin-1" or "hex").
        chunk_size: Maximum number of bytes processed per call when
            streaming input.
    """

    drop: int = DEFAULT_DROP
    key_encoding: str = "utf-8"
    chunk_size: int = 65536

    def decode_key(self, text: str) -> bytes:
        """Convert a key given as text into key bytes.

        Args:
            text: Key string in the configured encoding.

        Returns:
            The raw key bytes.

        Raises:
            ValueError: If the text cannot be decoded.
        """
        if self.key_encoding == "hex":
            return parse_hex(text)
        return text.encode(self.key_encoding)
