"""Random bytes, SHA-512, SipHash, STUN messages and the sntrup761 KEM."""

__version__ = "0.1.0"
__all__ = [
    "random",
    "sha512",
    "siphash",
    "stun",
    "sntrup_encoding",
    "sntrup_arith",
    "sntrup_fastmult",
    "sntrup761",
]