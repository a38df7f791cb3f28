class InvalidKeyLength(ValueError):
    """Raised when an RC4 key is empty or longer than 256 bytes."""

    def __init__(self, length: int) -> None:
        self.length = length
        super().__init__(f"RC4 key must be 1 to 256 bytes long, got {length}")


class CipherStateError(RuntimeError):
    """Raised when a destroyed cipher state is used again."""
