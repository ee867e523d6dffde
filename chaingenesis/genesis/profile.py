"""This module contains the network profile: the static parameters of one chain.

Profiles are immutable values. They are built once at startup, either from the
built-in tables or from a JSON file, and handed to the assembler by parameter.
"""
import json
import logging
import os
from collections import namedtuple
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from eth_typing import Address

from chaingenesis.ethereum.util import parse_quantity, to_address
from chaingenesis.exceptions import ConfigError

log = logging.getLogger(__name__)

ConsensusParams = namedtuple(
    "ConsensusParams",
    [
        "active_validators_length",
        "epoch_block_interval",
        "misdemeanor_threshold",
        "felony_threshold",
        "validator_jail_epoch_length",
        "undelegate_period",
        "min_validator_stake_amount",
        "min_staking_amount",
    ],
)

Forks = namedtuple(
    "Forks",
    ["runtime_upgrade_block", "deploy_origin_block", "deployment_hook_fix_block"],
    defaults=(None, None, None),
)

_CONSENSUS_KEYS = (
    ("activeValidatorsLength", "active_validators_length"),
    ("epochBlockInterval", "epoch_block_interval"),
    ("misdemeanorThreshold", "misdemeanor_threshold"),
    ("felonyThreshold", "felony_threshold"),
    ("validatorJailEpochLength", "validator_jail_epoch_length"),
    ("undelegatePeriod", "undelegate_period"),
)

_FORK_KEYS = (
    ("runtimeUpgradeBlock", "runtime_upgrade_block"),
    ("deployOriginBlock", "deploy_origin_block"),
    ("deploymentHookFixBlock", "deployment_hook_fix_block"),
)

AddressPairs = Union[Mapping[str, Any], Iterable[Tuple[Union[str, bytes], Any]]]


def _address_pairs(pairs: AddressPairs, title: str) -> Tuple[Tuple[Address, Any], ...]:
    """
    Normalizes an address keyed table, keeping first-seen order; a repeated
    address keeps its first position and its last value
    """
    items = pairs.items() if isinstance(pairs, Mapping) else pairs
    result = {}  # type: Dict[Address, Any]
    try:
        for key, value in items:
            result[to_address(key)] = value
    except ConfigError as e:
        raise ConfigError("{}: {}".format(title, e)) from e
    return tuple(result.items())


def _int_field(data: Mapping, key: str, default: Optional[int] = 0) -> int:
    value = data.get(key, default)
    if value is None:
        raise ConfigError("Missing profile field: {}".format(key))
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError("Profile field {} must be an integer, got {!r}".format(key, value))
    return value


class NetworkProfile(
    namedtuple(
        "_NetworkProfile",
        [
            "name",
            "chain_id",
            "deployers",
            "validators",
            "system_treasury",
            "consensus_params",
            "voting_period",
            "faucet",
            "commission_rate",
            "initial_stakes",
            "forks",
        ],
    )
):
    """Static parameter set of one network.

    Address keyed tables (system_treasury, faucet, initial_stakes) are stored as
    tuples of (address, value) pairs in declaration order. Stake and faucet values
    stay hex strings until the assembler validates them.
    """

    __slots__ = ()

    @classmethod
    def create(
        cls,
        name: str,
        chain_id: int,
        consensus_params: ConsensusParams,
        deployers: Iterable[Union[str, bytes]] = (),
        validators: Iterable[Union[str, bytes]] = (),
        system_treasury: AddressPairs = (),
        voting_period: int = 0,
        faucet: AddressPairs = (),
        commission_rate: int = 0,
        initial_stakes: AddressPairs = (),
        forks: Forks = Forks(),
    ) -> "NetworkProfile":
        return cls(
            name=name,
            chain_id=chain_id,
            deployers=tuple(to_address(d) for d in deployers),
            validators=tuple(to_address(v) for v in validators),
            system_treasury=_address_pairs(system_treasury, "systemTreasury"),
            consensus_params=consensus_params,
            voting_period=voting_period,
            faucet=_address_pairs(faucet, "faucet"),
            commission_rate=commission_rate,
            initial_stakes=_address_pairs(initial_stakes, "initialStakes"),
            forks=forks,
        )

    @classmethod
    def from_dict(cls, data: Mapping, name: str = "custom") -> "NetworkProfile":
        """
        Builds a profile from its JSON form
        :param data: decoded JSON object
        :param name: label used in logs
        :return:
        """
        if not isinstance(data, Mapping):
            raise ConfigError("A profile must be a JSON object")
        if "chainId" not in data:
            raise ConfigError("Missing profile field: chainId")

        raw_params = data.get("consensusParams") or {}
        if not isinstance(raw_params, Mapping):
            raise ConfigError("consensusParams must be a JSON object")
        params = {attr: _int_field(raw_params, key) for key, attr in _CONSENSUS_KEYS}
        for key, attr in (
            ("minValidatorStakeAmount", "min_validator_stake_amount"),
            ("minStakingAmount", "min_staking_amount"),
        ):
            if raw_params.get(key) is None:
                raise ConfigError("Missing profile field: consensusParams.{}".format(key))
            params[attr] = parse_quantity(raw_params[key])

        raw_forks = data.get("forks") or {}
        if not isinstance(raw_forks, Mapping):
            raise ConfigError("forks must be a JSON object")
        forks = Forks(
            **{
                attr: None if raw_forks.get(key) is None else parse_quantity(raw_forks[key])
                for key, attr in _FORK_KEYS
            }
        )

        for key in ("systemTreasury", "faucet", "initialStakes"):
            if not isinstance(data.get(key) or {}, Mapping):
                raise ConfigError("{} must be a JSON object".format(key))
        for key in ("deployers", "validators"):
            if not isinstance(data.get(key) or [], list):
                raise ConfigError("{} must be a JSON array".format(key))
        for address, share in (data.get("systemTreasury") or {}).items():
            if isinstance(share, bool) or not isinstance(share, int):
                raise ConfigError(
                    "systemTreasury share of {} must be an integer".format(address)
                )
        for key in ("faucet", "initialStakes"):
            for address, value in (data.get(key) or {}).items():
                if not isinstance(value, str):
                    raise ConfigError(
                        "{} value of {} must be a hex string".format(key, address)
                    )

        return cls.create(
            name=name,
            chain_id=_int_field(data, "chainId", None),
            consensus_params=ConsensusParams(**params),
            deployers=data.get("deployers") or [],
            validators=data.get("validators") or [],
            system_treasury=data.get("systemTreasury") or {},
            voting_period=_int_field(data, "votingPeriod"),
            faucet=data.get("faucet") or {},
            commission_rate=_int_field(data, "commissionRate"),
            initial_stakes=data.get("initialStakes") or {},
            forks=forks,
        )

    @classmethod
    def load(cls, path: str) -> "NetworkProfile":
        """
        Reads a JSON profile file
        :param path:
        :return:
        """
        try:
            with open(path) as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigError("Unable to read profile {}: {}".format(path, e)) from e
        except json.JSONDecodeError as e:
            raise ConfigError("Profile {} is not valid JSON: {}".format(path, e)) from e
        name = os.path.splitext(os.path.basename(path))[0]
        log.debug("Loaded profile %s from %s", name, path)
        return cls.from_dict(data, name=name)

    def stake_of(self, validator: Address) -> Optional[str]:
        return dict(self.initial_stakes).get(validator)
