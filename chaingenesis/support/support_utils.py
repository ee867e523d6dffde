"""This module contains utility functions for the chaingenesis support package."""

from eth_hash.auto import keccak
import logging

log = logging.getLogger(__name__)

# Error(string) selector, offset word and the first 28 bytes of the length word
REVERT_HEADER_SIZE = 64


def sha3(value):
    if type(value) == str:
        if value[:2] == "0x":
            new_hash = keccak(bytes.fromhex(value[2:]))
        else:
            new_hash = keccak(value.encode())
    else:
        new_hash = keccak(value)
    return new_hash


def decode_revert_reason(output: bytes) -> str:
    """
    Best-effort recovery of a revert message from engine return data.

    The header is skipped blindly and every printable ASCII byte after it is kept,
    so contracts not following the Error(string) convention produce noise.
    :param output: return data of a failed execution
    :return: the printable text, empty when there is nothing past the header
    """
    return "".join(chr(c) for c in output[REVERT_HEADER_SIZE:] if 32 <= c <= 127)
