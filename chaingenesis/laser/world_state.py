"""This module contains the isolated world state the deployment simulator drives.

It wraps a py-evm state on a private in-memory database and exposes the two
primitives genesis construction needs on top of the engine: creation at a
caller-chosen address, and the per-account storage write-set of the scope, which
is queried before anything is ever committed.
"""
import logging
from typing import Dict, Set, Type

from eth.abc import ComputationAPI, StateAPI, VirtualMachineAPI
from eth.constants import (
    BLANK_ROOT_HASH,
    CREATE_CONTRACT_ADDRESS,
    ZERO_ADDRESS,
    ZERO_HASH32,
)
from eth.db.atomic import AtomicDB
from eth.vm.execution_context import ExecutionContext
from eth.vm.forks.shanghai import ShanghaiVM
from eth.vm.message import Message
from eth_typing import Address

log = logging.getLogger(__name__)

DEFAULT_GAS_LIMIT = 10_000_000
INITIAL_BASE_FEE = 1_000_000_000


class BlockEnvironment:
    """The block a simulation pretends to run in, i.e. the genesis block itself."""

    def __init__(
        self,
        chain_id: int,
        timestamp: int = 0x65CF9B5C,
        block_gas_limit: int = 0x2625A00,
        difficulty: int = 1,
        coinbase: Address = ZERO_ADDRESS,
        base_fee_per_gas: int = INITIAL_BASE_FEE,
        vm_class: Type[VirtualMachineAPI] = ShanghaiVM,
    ) -> None:
        self.chain_id = chain_id
        self.timestamp = timestamp
        self.block_gas_limit = block_gas_limit
        self.difficulty = difficulty
        self.coinbase = coinbase
        self.base_fee_per_gas = base_fee_per_gas
        self.vm_class = vm_class

    def execution_context(self) -> ExecutionContext:
        return ExecutionContext(
            coinbase=self.coinbase,
            timestamp=self.timestamp,
            block_number=0,
            difficulty=self.difficulty,
            mix_hash=ZERO_HASH32,
            gas_limit=self.block_gas_limit,
            prev_hashes=(),
            chain_id=self.chain_id,
            base_fee_per_gas=self.base_fee_per_gas,
        )


class StorageWriteSetMixin:
    """Records every slot written through the state, per account.

    A write that leaves the slot unchanged is not recorded. Reverted writes keep
    their slot in the set; its current value is whatever the journal rolled back to.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._written_slots = {}  # type: Dict[Address, Set[int]]

    def set_storage(self, address: Address, slot: int, value: int) -> None:
        if self.get_storage(address, slot) == value:
            return
        super().set_storage(address, slot, value)
        self._written_slots.setdefault(address, set()).add(slot)

    def written_slots(self, address: Address) -> Set[int]:
        return set(self._written_slots.get(address, ()))


_tracking_state_classes = {}  # type: Dict[Type[StateAPI], Type[StateAPI]]


def tracking_state_class(vm_class: Type[VirtualMachineAPI]) -> Type[StateAPI]:
    """
    Derives the write-set recording variant of a fork's state class
    :param vm_class: e.g. ShanghaiVM
    :return:
    """
    base = vm_class.get_state_class()
    if base not in _tracking_state_classes:
        _tracking_state_classes[base] = type(
            "WriteSetTracking" + base.__name__, (StorageWriteSetMixin, base), {}
        )
    return _tracking_state_classes[base]


class IsolatedWorldState:
    """A fresh, disposable world state. One instance serves exactly one contract."""

    def __init__(self, environment: BlockEnvironment) -> None:
        self.environment = environment
        state_class = tracking_state_class(environment.vm_class)
        self._state = state_class(
            AtomicDB(), environment.execution_context(), BLANK_ROOT_HASH
        )  # type: StateAPI
        self._transaction_context = self._state.get_transaction_context_class()(
            gas_price=0, origin=ZERO_ADDRESS
        )

    def set_balance(self, address: Address, balance: int) -> None:
        self._state.set_balance(address, balance)

    def get_balance(self, address: Address) -> int:
        return self._state.get_balance(address)

    def get_code(self, address: Address) -> bytes:
        return self._state.get_code(address)

    def create_at(
        self,
        address: Address,
        creation_code: bytes,
        gas: int = DEFAULT_GAS_LIMIT,
        sender: Address = ZERO_ADDRESS,
    ) -> ComputationAPI:
        """
        Runs creation code and installs the returned code at exactly `address`,
        bypassing nonce-derived addressing
        :param address: target address
        :param creation_code: init code including any appended constructor payload
        :param gas:
        :param sender:
        :return: the finished computation, check is_error
        """
        message = Message(
            gas=gas,
            to=CREATE_CONTRACT_ADDRESS,
            sender=sender,
            value=0,
            data=b"",
            code=creation_code,
            create_address=address,
        )
        log.debug(
            "Creating %d bytes of init code at 0x%s", len(creation_code), address.hex()
        )
        return self._state.computation_class.apply_create_message(
            self._state, message, self._transaction_context
        )

    def call(
        self,
        address: Address,
        data: bytes,
        gas: int = DEFAULT_GAS_LIMIT,
        sender: Address = ZERO_ADDRESS,
    ) -> ComputationAPI:
        """
        Zero-value message call into `address`
        :param address:
        :param data: calldata
        :param gas:
        :param sender:
        :return:
        """
        message = Message(
            gas=gas,
            to=address,
            sender=sender,
            value=0,
            data=data,
            code=self._state.get_code(address),
            code_address=address,
        )
        log.debug("Calling 0x%s with 0x%s", address.hex(), data.hex())
        return self._state.computation_class.apply_message(
            self._state, message, self._transaction_context
        )

    def storage_write_set(self, address: Address) -> Dict[int, int]:
        """
        The pending (never committed) storage writes of `address` in this scope
        :param address:
        :return: slot -> current value, zero values included
        """
        return {
            slot: self._state.get_storage(address, slot)
            for slot in sorted(self._state.written_slots(address))
        }

