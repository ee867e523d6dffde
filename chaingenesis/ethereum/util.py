"""This module contains various utility functions regarding hex encoding,
addresses and big-integer quantities."""
import logging
from typing import Iterable, Union

from eth_typing import Address
from eth_utils import encode_hex, is_hex_address, to_canonical_address

from chaingenesis.exceptions import ConfigError

log = logging.getLogger(__name__)

UINT256_MAX = 2**256 - 1

EXTRA_VANITY_SIZE = 32
EXTRA_SEAL_SIZE = 65
ADDRESS_SIZE = 20


def safe_decode(hex_encoded_string):
    """

    :param hex_encoded_string:
    :return:
    """
    if hex_encoded_string.startswith("0x"):
        return bytes.fromhex(hex_encoded_string[2:])
    else:
        return bytes.fromhex(hex_encoded_string)


def to_address(value: Union[str, bytes]) -> Address:
    """
    Converts a 0x-prefixed hex string into a canonical 20 byte address
    :param value: hex string, any case
    :return: canonical address
    """
    if isinstance(value, bytes) and len(value) == ADDRESS_SIZE:
        return Address(value)
    if not isinstance(value, str) or not value.startswith("0x"):
        raise ConfigError("Invalid address: {!r}".format(value))
    # checksums are not enforced, network tables mix casing freely
    if not is_hex_address(value.lower()):
        raise ConfigError("Invalid address: {!r}".format(value))
    return Address(to_canonical_address(value.lower()))


def parse_hex_quantity(value: str) -> int:
    """
    Parses a 0x-prefixed big-integer string such as "0x3635c9adc5dea00000"
    :param value:
    :return:
    """
    if not isinstance(value, str) or value[:2] not in ("0x", "0X") or len(value) < 3:
        raise ConfigError("Invalid hex quantity: {!r}".format(value))
    try:
        quantity = int(value[2:], 16)
    except ValueError as e:
        raise ConfigError("Invalid hex quantity: {!r}".format(value)) from e
    if quantity > UINT256_MAX:
        raise ConfigError("Quantity exceeds 256 bits: {}".format(value))
    return quantity


def parse_quantity(value: Union[str, int]) -> int:
    """
    Parses a big integer given either as a JSON number, a decimal string or a
    0x-prefixed hex string
    :param value:
    :return:
    """
    if isinstance(value, bool):
        raise ConfigError("Invalid quantity: {!r}".format(value))
    if isinstance(value, int):
        quantity = value
    elif isinstance(value, str) and value[:2] in ("0x", "0X"):
        return parse_hex_quantity(value)
    elif isinstance(value, str):
        try:
            quantity = int(value, 10)
        except ValueError as e:
            raise ConfigError("Invalid quantity: {!r}".format(value)) from e
    else:
        raise ConfigError("Invalid quantity: {!r}".format(value))
    if not 0 <= quantity <= UINT256_MAX:
        raise ConfigError("Quantity out of range: {}".format(value))
    return quantity


def to_quantity_hex(value: int) -> str:
    """
    Minimal hex rendering used by genesis documents, 0 becomes "0x0"
    :param value:
    :return:
    """
    return hex(value)


def to_word_hex(value: Union[int, bytes]) -> str:
    """
    Renders a storage key or value as a 32 byte 0x-prefixed hex string
    :param value:
    :return:
    """
    if isinstance(value, int):
        value = value.to_bytes(32, "big")
    return encode_hex(value.rjust(32, b"\x00"))


def create_extra_data(validators: Iterable[bytes]) -> bytes:
    """
    Builds the consensus extra-data field: a zero vanity prefix, the packed
    validator addresses and a zero seal
    :param validators: canonical validator addresses
    :return: 32 + 20 * N + 65 bytes
    """
    packed = b"".join(bytes(validator) for validator in validators)
    if len(packed) % ADDRESS_SIZE != 0:
        raise ConfigError("Validator addresses must be {} bytes".format(ADDRESS_SIZE))
    return bytes(EXTRA_VANITY_SIZE) + packed + bytes(EXTRA_SEAL_SIZE)
