"""This module assembles a genesis document from a network profile.

Every system contract is simulated once, in a fixed order, each in its own
isolated world state. The results are merged with the reserved intermediary
account and the faucet entries into a single allocation.
"""
import logging
from typing import List, Sequence, Tuple

from eth_typing import Address
from eth_utils import encode_hex, to_checksum_address

from chaingenesis.ethereum.artifact import ArtifactStore, ContractArtifact
from chaingenesis.ethereum.ctor import ctor_selector
from chaingenesis.ethereum.util import create_extra_data, parse_hex_quantity
from chaingenesis.exceptions import ConfigError
from chaingenesis.genesis.contracts import (
    INTERMEDIARY_SYSTEM_ADDRESS,
    STAKING_ADDRESS,
    SYSTEM_CONTRACTS,
    SystemContract,
)
from chaingenesis.genesis.document import (
    GENESIS_DIFFICULTY,
    GENESIS_GAS_LIMIT,
    GENESIS_TIMESTAMP,
    GenesisAllocation,
    GenesisDocument,
    chain_config,
)
from chaingenesis.genesis.profile import NetworkProfile
from chaingenesis.laser.simulator import DeploymentSimulator, SimulatedAccountState
from chaingenesis.laser.world_state import DEFAULT_GAS_LIMIT, BlockEnvironment

log = logging.getLogger(__name__)


def initial_stake_schedule(profile: NetworkProfile) -> Tuple[List[int], int]:
    """
    Decodes every validator's initial stake
    :param profile:
    :return: stakes aligned with profile.validators, and their sum
    """
    stakes = dict(profile.initial_stakes)
    schedule = []
    for validator in profile.validators:
        raw_stake = stakes.get(validator)
        if raw_stake is None:
            raise ConfigError(
                "initial stake is not found for validator: {}".format(
                    to_checksum_address(validator)
                )
            )
        try:
            schedule.append(parse_hex_quantity(raw_stake))
        except ConfigError as e:
            raise ConfigError(
                "Invalid initial stake for validator {}: {}".format(
                    to_checksum_address(validator), e
                )
            ) from e
    return schedule, sum(schedule)


def faucet_balances(profile: NetworkProfile) -> List[Tuple[Address, int]]:
    balances = []
    for address, raw_balance in profile.faucet:
        try:
            balances.append((address, parse_hex_quantity(raw_balance)))
        except ConfigError as e:
            raise ConfigError(
                "failed to parse faucet balance of {}: {}".format(
                    to_checksum_address(address), e
                )
            ) from e
    return balances


class GenesisAssembler:
    """Builds genesis documents from profiles and a directory of contract artifacts."""

    def __init__(
        self,
        artifacts: ArtifactStore,
        gas_limit: int = DEFAULT_GAS_LIMIT,
        system_contracts: Sequence[SystemContract] = SYSTEM_CONTRACTS,
    ) -> None:
        """

        :param artifacts: Source of the creation bytecode, by contract name
        :param gas_limit: Gas per creation and per initializer call
        :param system_contracts: Contracts to simulate, in order
        """
        self.artifacts = artifacts
        self.gas_limit = gas_limit
        self.system_contracts = tuple(system_contracts)

    def environment(self, profile: NetworkProfile) -> BlockEnvironment:
        return BlockEnvironment(
            chain_id=profile.chain_id,
            timestamp=GENESIS_TIMESTAMP,
            block_gas_limit=GENESIS_GAS_LIMIT,
            difficulty=GENESIS_DIFFICULTY,
        )

    def assemble(self, profile: NetworkProfile) -> GenesisDocument:
        """
        Simulates all system contracts and merges the allocation
        :param profile:
        :return:
        """
        # everything that can be rejected up front is checked before any simulation
        initial_stakes, initial_stake_total = initial_stake_schedule(profile)
        faucet = faucet_balances(profile)
        artifacts = [
            self.artifacts.get(contract.name) for contract in self.system_contracts
        ]  # type: List[ContractArtifact]

        simulator = DeploymentSimulator(self.environment(profile), self.gas_limit)
        alloc = GenesisAllocation()
        for contract, artifact in zip(self.system_contracts, artifacts):
            funding = initial_stake_total if contract.address == STAKING_ADDRESS else None
            spec = contract.constructor_spec(profile, initial_stakes, funding)
            payload = spec.encode()
            log.info(
                " + calling constructor: address=%s sig=%s ctor=%s",
                to_checksum_address(contract.address),
                encode_hex(ctor_selector(spec.argument_types)),
                encode_hex(payload),
            )
            alloc[contract.address] = simulator.simulate(artifact, spec)

        alloc[INTERMEDIARY_SYSTEM_ADDRESS] = SimulatedAccountState(
            INTERMEDIARY_SYSTEM_ADDRESS, balance=0
        )

        if STAKING_ADDRESS in alloc:
            staking = alloc[STAKING_ADDRESS]
            alloc[STAKING_ADDRESS] = SimulatedAccountState(
                staking.address,
                code=staking.code,
                storage=staking.storage,
                balance=initial_stake_total,
                nonce=staking.nonce,
            )

        # faucet entries win over everything, system contracts included
        for address, balance in faucet:
            alloc[address] = SimulatedAccountState(address, balance=balance)

        return GenesisDocument(
            config=chain_config(profile),
            alloc=alloc,
            extra_data=create_extra_data(profile.validators),
        )
