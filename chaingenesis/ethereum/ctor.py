"""This module builds the payload appended to a system contract's creation code.

System contracts expose a single real constructor, ``constructor(bytes ctorCalldata)``,
which dispatches the payload to the logical initializer ``ctor(...)``. The payload is
therefore ``selector || abi(args)`` wrapped once more as an ABI ``bytes`` value.
"""
import logging
from typing import Any, List, Optional, Sequence

from eth_abi import decode, encode, is_encodable_type
from eth_abi.exceptions import EncodingError as AbiEncodingError, ParseError
from eth_typing import Address
from eth_utils import encode_hex, to_checksum_address

from chaingenesis.exceptions import EncodingError
from chaingenesis.support.support_utils import sha3

log = logging.getLogger(__name__)

CTOR_FUNCTION_NAME = "ctor"


class ConstructorSpec:
    """Everything needed to deploy one system contract."""

    def __init__(
        self,
        contract_address: Address,
        argument_types: Sequence[str] = (),
        argument_values: Sequence[Any] = (),
        funding_balance: Optional[int] = None,
    ) -> None:
        """

        :param contract_address: The fixed address the contract is created at
        :param argument_types: ABI type names of the logical constructor, in order
        :param argument_values: Values matching argument_types
        :param funding_balance: Balance placed on the address before creation, if any
        """
        self.contract_address = contract_address
        self.argument_types = tuple(argument_types)
        self.argument_values = tuple(argument_values)
        self.funding_balance = funding_balance

    @property
    def signature(self) -> str:
        return ctor_signature(self.argument_types)

    def encode(self) -> bytes:
        return encode_constructor_payload(self.argument_types, self.argument_values)

    def __repr__(self) -> str:
        return "<ConstructorSpec {} {}>".format(
            to_checksum_address(self.contract_address), self.signature
        )


def ctor_signature(argument_types: Sequence[str]) -> str:
    return "{}({})".format(CTOR_FUNCTION_NAME, ",".join(argument_types))


def ctor_selector(argument_types: Sequence[str]) -> bytes:
    """
    The first four bytes of keccak256("ctor(type1,type2,...)")
    :param argument_types:
    :return:
    """
    return sha3(ctor_signature(argument_types))[:4]


def _validate_types(argument_types: Sequence[str]) -> None:
    for type_name in argument_types:
        try:
            known = is_encodable_type(type_name)
        except ParseError as e:
            raise EncodingError("Unrecognized ABI type: {!r}".format(type_name)) from e
        if not known:
            raise EncodingError("Unrecognized ABI type: {!r}".format(type_name))


def encode_arguments(argument_types: Sequence[str], argument_values: Sequence[Any]) -> bytes:
    """
    Standard ABI encoding of the logical constructor arguments
    :param argument_types:
    :param argument_values:
    :return: empty when there are no arguments
    """
    if len(argument_types) != len(argument_values):
        raise EncodingError(
            "{} declares {} arguments but {} values were given".format(
                ctor_signature(argument_types),
                len(argument_types),
                len(argument_values),
            )
        )
    _validate_types(argument_types)
    try:
        return encode(list(argument_types), list(argument_values))
    except (AbiEncodingError, TypeError, ValueError) as e:
        raise EncodingError(
            "Cannot encode arguments for {}: {}".format(
                ctor_signature(argument_types), e
            )
        ) from e


def encode_constructor_payload(
    argument_types: Sequence[str], argument_values: Sequence[Any]
) -> bytes:
    """
    Builds the bytes appended to the creation code
    :param argument_types:
    :param argument_values:
    :return: abi.encode(bytes, selector || abi(args))
    """
    inner = ctor_selector(argument_types) + encode_arguments(
        argument_types, argument_values
    )
    payload = encode(["bytes"], [inner])
    log.debug(
        "Encoded %s: sig=%s ctor=%s",
        ctor_signature(argument_types),
        encode_hex(inner[:4]),
        encode_hex(payload),
    )
    return payload


def decode_constructor_payload(payload: bytes) -> List[bytes]:
    """
    Splits a payload back into [selector, encoded arguments]
    :param payload:
    :return:
    """
    (inner,) = decode(["bytes"], payload)
    return [inner[:4], inner[4:]]
