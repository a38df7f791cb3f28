"""
Data contracts and type definitions.
"""

__all__ = [
    "CipherConfig",
    "KEY_ENCODINGS",
]

from .config import KEY_ENCODINGS, CipherConfig
