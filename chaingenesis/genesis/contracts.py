"""This module describes the system contracts placed in every genesis.

The table fixes, per contract, its protocol-reserved address, the artifact name
and the signature of its logical constructor, plus how the constructor arguments
are derived from a network profile.
"""
from collections import namedtuple
from typing import Any, Callable, List, Optional, Sequence

from chaingenesis.ethereum.ctor import ConstructorSpec
from chaingenesis.ethereum.util import to_address
from chaingenesis.genesis.profile import NetworkProfile

STAKING_ADDRESS = to_address("0x0000000000000000000000000000000000001000")
SLASHING_INDICATOR_ADDRESS = to_address("0x0000000000000000000000000000000000001001")
SYSTEM_REWARD_ADDRESS = to_address("0x0000000000000000000000000000000000001002")
STAKING_POOL_ADDRESS = to_address("0x0000000000000000000000000000000000007001")
GOVERNANCE_ADDRESS = to_address("0x0000000000000000000000000000000000007002")
CHAIN_CONFIG_ADDRESS = to_address("0x0000000000000000000000000000000000007003")
RUNTIME_UPGRADE_ADDRESS = to_address("0x0000000000000000000000000000000000007004")
DEPLOYER_PROXY_ADDRESS = to_address("0x0000000000000000000000000000000000007005")

# reserved for the node, never simulated
INTERMEDIARY_SYSTEM_ADDRESS = to_address("0xfffffffffffffffffffffffffffffffffffffffe")
# EVM hook the node calls into for runtime upgrades
EVM_HOOK_RUNTIME_UPGRADE_ADDRESS = to_address(
    "0x0000000000000000000000000000000000007f01"
)

ArgumentBuilder = Callable[[NetworkProfile, Sequence[int]], List[Any]]


class SystemContract(
    namedtuple(
        "_SystemContract", ["name", "address", "argument_types", "build_arguments"]
    )
):
    """A system contract and the shape of its logical constructor."""

    __slots__ = ()

    def constructor_spec(
        self,
        profile: NetworkProfile,
        initial_stakes: Sequence[int],
        funding_balance: Optional[int] = None,
    ) -> ConstructorSpec:
        """
        :param profile:
        :param initial_stakes: decoded stakes, aligned with profile.validators
        :param funding_balance:
        :return:
        """
        return ConstructorSpec(
            contract_address=self.address,
            argument_types=self.argument_types,
            argument_values=self.build_arguments(profile, initial_stakes),
            funding_balance=funding_balance,
        )


def _staking_arguments(profile, initial_stakes):
    return [list(profile.validators), list(initial_stakes), profile.commission_rate]


def _chain_config_arguments(profile, initial_stakes):
    params = profile.consensus_params
    return [
        params.active_validators_length,
        params.epoch_block_interval,
        params.misdemeanor_threshold,
        params.felony_threshold,
        params.validator_jail_epoch_length,
        params.undelegate_period,
        params.min_validator_stake_amount,
        params.min_staking_amount,
    ]


def _no_arguments(profile, initial_stakes):
    return []


def _system_reward_arguments(profile, initial_stakes):
    return [
        [address for address, _ in profile.system_treasury],
        [share for _, share in profile.system_treasury],
    ]


def _governance_arguments(profile, initial_stakes):
    return [profile.voting_period]


def _runtime_upgrade_arguments(profile, initial_stakes):
    return [EVM_HOOK_RUNTIME_UPGRADE_ADDRESS]


def _deployer_proxy_arguments(profile, initial_stakes):
    return [list(profile.deployers)]


STAKING = SystemContract(
    "Staking",
    STAKING_ADDRESS,
    ("address[]", "uint256[]", "uint16"),
    _staking_arguments,
)

# simulation order, diagnostics depend on it but results do not
SYSTEM_CONTRACTS = (
    STAKING,
    SystemContract(
        "ChainConfig",
        CHAIN_CONFIG_ADDRESS,
        ("uint32", "uint32", "uint32", "uint32", "uint32", "uint32", "uint256", "uint256"),
        _chain_config_arguments,
    ),
    SystemContract("SlashingIndicator", SLASHING_INDICATOR_ADDRESS, (), _no_arguments),
    SystemContract("StakingPool", STAKING_POOL_ADDRESS, (), _no_arguments),
    SystemContract(
        "SystemReward",
        SYSTEM_REWARD_ADDRESS,
        ("address[]", "uint16[]"),
        _system_reward_arguments,
    ),
    SystemContract(
        "Governance", GOVERNANCE_ADDRESS, ("uint256",), _governance_arguments
    ),
    SystemContract(
        "RuntimeUpgrade",
        RUNTIME_UPGRADE_ADDRESS,
        ("address",),
        _runtime_upgrade_arguments,
    ),
    SystemContract(
        "DeployerProxy",
        DEPLOYER_PROXY_ADDRESS,
        ("address[]",),
        _deployer_proxy_arguments,
    ),
)
