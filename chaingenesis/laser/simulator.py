"""This module simulates the deployment of a single system contract.

Each simulation gets its own IsolatedWorldState, so nothing one contract's
constructor does can be observed by another. The result is the account record a
genesis allocation needs: runtime code, storage write-set and balance.
"""
import logging
from typing import Dict, Optional

from eth.exceptions import VMError
from eth_typing import Address
from eth_utils import encode_hex, to_checksum_address

from chaingenesis.ethereum.artifact import ContractArtifact
from chaingenesis.ethereum.ctor import ConstructorSpec
from chaingenesis.exceptions import DeploymentError, InitializationError
from chaingenesis.laser.world_state import (
    DEFAULT_GAS_LIMIT,
    BlockEnvironment,
    IsolatedWorldState,
)
from chaingenesis.support.support_utils import decode_revert_reason

log = logging.getLogger(__name__)

# init()
INIT_SELECTOR = bytes.fromhex("e1c7392a")


class SimulatedAccountState:
    """The account a simulated deployment leaves behind, shaped like a genesis alloc entry."""

    def __init__(
        self,
        address: Address,
        code: bytes = b"",
        storage: Optional[Dict[int, int]] = None,
        balance: int = 0,
        nonce: int = 0,
    ) -> None:
        self.address = address
        self.code = code
        self.storage = dict(storage or {})
        self.balance = balance
        self.nonce = nonce

    def __eq__(self, other) -> bool:
        if not isinstance(other, SimulatedAccountState):
            return NotImplemented
        return (
            self.address == other.address
            and self.code == other.code
            and self.storage == other.storage
            and self.balance == other.balance
            and self.nonce == other.nonce
        )

    def __repr__(self) -> str:
        return "<SimulatedAccountState {} code={}B slots={} balance={}>".format(
            to_checksum_address(self.address),
            len(self.code),
            len(self.storage),
            self.balance,
        )


class DeploymentSimulator:
    """Runs creation code plus the post-deploy initializer for one contract at a time."""

    def __init__(
        self, environment: BlockEnvironment, gas_limit: int = DEFAULT_GAS_LIMIT
    ) -> None:
        """

        :param environment: The genesis block context every simulation runs in
        :param gas_limit: Gas available to the creation and to the initializer call
        """
        self.environment = environment
        self.gas_limit = gas_limit

    def simulate(
        self,
        artifact: ContractArtifact,
        spec: ConstructorSpec,
        initializer: Optional[bytes] = INIT_SELECTOR,
    ) -> SimulatedAccountState:
        """
        Deploys `artifact` at spec.contract_address in a fresh world state
        :param artifact: creation code source
        :param spec: address, constructor arguments and funding
        :param initializer: calldata of the post-deploy call, None to skip it
        :return: the resulting account
        """
        return self.simulate_payload(
            spec.contract_address,
            artifact.creation_bytecode + spec.encode(),
            spec.funding_balance,
            initializer,
        )

    def simulate_payload(
        self,
        address: Address,
        creation_code: bytes,
        funding_balance: Optional[int] = None,
        initializer: Optional[bytes] = INIT_SELECTOR,
    ) -> SimulatedAccountState:
        world_state = IsolatedWorldState(self.environment)
        if funding_balance is not None:
            world_state.set_balance(address, funding_balance)

        try:
            computation = world_state.create_at(
                address, creation_code, gas=self.gas_limit
            )
        except VMError as e:
            raise DeploymentError(
                "Contract creation at {} was rejected: {!r}".format(
                    to_checksum_address(address), e
                ),
                address=to_checksum_address(address),
            ) from e
        if computation.is_error:
            output = computation.output
            reason = decode_revert_reason(output)
            log.error(
                "Deployment of %s failed: %s %s",
                to_checksum_address(address),
                computation.error,
                reason,
            )
            raise DeploymentError(
                "Contract creation at {} failed: {!r}".format(
                    to_checksum_address(address), computation.error
                ),
                address=to_checksum_address(address),
                reason=reason,
                output=output,
            )
        code = computation.output
        storage = world_state.storage_write_set(address)
        log.debug(
            "Created %s: %d bytes of code, %d storage slots",
            to_checksum_address(address),
            len(code),
            len(storage),
        )

        if initializer is not None:
            computation = world_state.call(address, initializer, gas=self.gas_limit)
            if computation.is_error:
                output = computation.output
                reason = decode_revert_reason(output)
                log.error(
                    "Initializer %s of %s failed: %s %s",
                    encode_hex(initializer),
                    to_checksum_address(address),
                    computation.error,
                    reason,
                )
                raise InitializationError(
                    "Initializer call {} on {} failed: {!r}".format(
                        encode_hex(initializer),
                        to_checksum_address(address),
                        computation.error,
                    ),
                    address=to_checksum_address(address),
                    reason=reason,
                    output=output,
                )
            storage = world_state.storage_write_set(address)

        # the engine balance is not re-read: funding is reported verbatim
        return SimulatedAccountState(
            address=address,
            code=code,
            storage=storage,
            balance=funding_balance or 0,
            nonce=0,
        )
