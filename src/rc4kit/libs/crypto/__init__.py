"""
RC4 stream cipher primitives.
"""

__all__ = [
    "DEFAULT_DROP",
    "RC4",
    "new",
    "CipherStateError",
    "InvalidKeyLength",
]

from .errors import CipherStateError, InvalidKeyLength
from .rc4 import DEFAULT_DROP, RC4, new
