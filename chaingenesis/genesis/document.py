"""This module contains the genesis document and its JSON rendering.

The layout follows the go-ethereum genesis format so the output can be fed to the
node's init command unchanged.
"""
import json
import logging
import sys
from typing import Dict, Iterator, Optional

from eth_typing import Address
from eth_utils import encode_hex

from chaingenesis.ethereum.util import to_quantity_hex, to_word_hex
from chaingenesis.exceptions import SerializationError
from chaingenesis.genesis.profile import NetworkProfile
from chaingenesis.laser.simulator import SimulatedAccountState

log = logging.getLogger(__name__)

STDOUT = "stdout"
STDERR = "stderr"

GENESIS_TIMESTAMP = 0x65CF9B5C
GENESIS_GAS_LIMIT = 0x2625A00
GENESIS_DIFFICULTY = 1
PARLIA_PERIOD = 3

# forks activated at block zero on every network, in document order
LEGACY_FORK_BLOCKS = (
    "homesteadBlock",
    "eip150Block",
    "eip155Block",
    "eip158Block",
    "byzantiumBlock",
    "constantinopleBlock",
    "petersburgBlock",
    "istanbulBlock",
    "muirGlacierBlock",
    "ramanujanBlock",
    "nielsBlock",
    "mirrorSyncBlock",
    "brunoBlock",
    "eulerBlock",
    "nanoBlock",
    "moranBlock",
    "gibbsBlock",
    "planckBlock",
    "berlinBlock",
    "londonBlock",
    "hertzBlock",
)


class GenesisAllocation:
    """Address -> account map. Later writes replace earlier ones wholesale."""

    def __init__(self) -> None:
        self._accounts = {}  # type: Dict[Address, SimulatedAccountState]

    def __setitem__(self, address: Address, account: SimulatedAccountState) -> None:
        if address in self._accounts:
            log.debug("Overwriting allocation of 0x%s", address.hex())
        self._accounts[address] = account

    def __getitem__(self, address: Address) -> SimulatedAccountState:
        return self._accounts[address]

    def __contains__(self, address) -> bool:
        return address in self._accounts

    def __iter__(self) -> Iterator[Address]:
        return iter(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)

    def to_dict(self) -> Dict[str, Dict[str, object]]:
        alloc = {}
        for address in sorted(self._accounts):
            account = self._accounts[address]
            entry = {}  # type: Dict[str, object]
            if account.code:
                entry["code"] = encode_hex(account.code)
            if account.storage:
                entry["storage"] = {
                    to_word_hex(slot): to_word_hex(value)
                    for slot, value in sorted(account.storage.items())
                }
            entry["balance"] = to_quantity_hex(account.balance)
            entry["nonce"] = to_quantity_hex(account.nonce)
            alloc[address.hex()] = entry
        return alloc


def chain_config(profile: NetworkProfile) -> Dict[str, object]:
    """
    The consensus chain configuration block of a profile
    :param profile:
    :return:
    """
    config = {"chainId": profile.chain_id}  # type: Dict[str, object]
    for fork in LEGACY_FORK_BLOCKS:
        config[fork] = 0
    config["shanghaiTime"] = 0
    forks = profile.forks
    for key, value in (
        ("runtimeUpgradeBlock", forks.runtime_upgrade_block),
        ("deployOriginBlock", forks.deploy_origin_block),
        ("deploymentHookFixBlock", forks.deployment_hook_fix_block),
    ):
        if value is not None:
            config[key] = value
    config["parlia"] = {
        "period": PARLIA_PERIOD,
        "epoch": profile.consensus_params.epoch_block_interval,
    }
    return config


class GenesisDocument:
    """A complete genesis: chain configuration, header fields and allocation."""

    def __init__(
        self,
        config: Dict[str, object],
        alloc: GenesisAllocation,
        extra_data: bytes,
        timestamp: int = GENESIS_TIMESTAMP,
        gas_limit: int = GENESIS_GAS_LIMIT,
        difficulty: int = GENESIS_DIFFICULTY,
    ) -> None:
        self.config = config
        self.alloc = alloc
        self.extra_data = extra_data
        self.timestamp = timestamp
        self.gas_limit = gas_limit
        self.difficulty = difficulty

    def to_dict(self) -> Dict[str, object]:
        return {
            "config": self.config,
            "nonce": "0x0",
            "timestamp": to_quantity_hex(self.timestamp),
            "extraData": encode_hex(self.extra_data),
            "gasLimit": to_quantity_hex(self.gas_limit),
            "difficulty": to_quantity_hex(self.difficulty),
            "mixHash": encode_hex(bytes(32)),
            "coinbase": encode_hex(bytes(20)),
            "alloc": self.alloc.to_dict(),
            "number": "0x0",
            "gasUsed": "0x0",
            "parentHash": encode_hex(bytes(32)),
            "baseFeePerGas": None,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def write(self, destination: Optional[str] = STDOUT) -> None:
        """
        Writes the document to "stdout", "stderr" or a file path
        :param destination:
        """
        try:
            content = self.to_json()
        except (TypeError, ValueError) as e:
            raise SerializationError("Unable to serialize genesis: {}".format(e)) from e

        try:
            if destination in (None, STDOUT):
                sys.stdout.write(content)
                sys.stdout.flush()
            elif destination == STDERR:
                sys.stderr.write(content)
                sys.stderr.flush()
            else:
                with open(destination, "w") as f:
                    f.write(content)
                log.info("Genesis written to %s", destination)
        except OSError as e:
            raise SerializationError(
                "Unable to write genesis to {}: {}".format(destination, e)
            ) from e
