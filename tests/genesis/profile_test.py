import copy
import json

import pytest

from chaingenesis.ethereum.util import to_address
from chaingenesis.exceptions import ConfigError
from chaingenesis.genesis.assembler import initial_stake_schedule
from chaingenesis.genesis import profiles
from chaingenesis.genesis.profile import Forks, NetworkProfile
from tests import TESTDATA_PROFILES

VALIDATOR = "0x00a601f45688dba8a070722073b015277cf36725"

BASE_PROFILE = {
    "chainId": 1337,
    "validators": [VALIDATOR],
    "consensusParams": {
        "epochBlockInterval": 40,
        "minValidatorStakeAmount": "0xde0b6b3a7640000",
        "minStakingAmount": 1000,
    },
    "initialStakes": {VALIDATOR: "0x3635c9adc5dea00000"},
}


def profile_with(**changes):
    data = copy.deepcopy(BASE_PROFILE)
    data.update(changes)
    return data


def test_load_profile():
    profile = NetworkProfile.load(str(TESTDATA_PROFILES / "single_validator.json"))

    assert profile.name == "single_validator"
    assert profile.chain_id == 1337
    assert profile.validators == (to_address(VALIDATOR),)
    assert profile.deployers == (to_address(VALIDATOR),)
    assert profile.system_treasury == ((to_address(VALIDATOR), 10000),)
    assert profile.voting_period == 20
    assert profile.consensus_params.epoch_block_interval == 40
    assert profile.consensus_params.min_validator_stake_amount == 10 ** 18
    assert profile.stake_of(to_address(VALIDATOR)) == "0x3635c9adc5dea00000"
    assert profile.forks == Forks()


def test_optional_fields_default_to_zero():
    profile = NetworkProfile.from_dict(BASE_PROFILE)

    assert profile.name == "custom"
    assert profile.deployers == ()
    assert profile.faucet == ()
    assert profile.commission_rate == 0
    assert profile.consensus_params.active_validators_length == 0
    assert profile.consensus_params.min_staking_amount == 1000


def test_fork_blocks():
    profile = NetworkProfile.from_dict(
        profile_with(forks={"runtimeUpgradeBlock": 0, "deployOriginBlock": "0x10"})
    )

    assert profile.forks.runtime_upgrade_block == 0
    assert profile.forks.deploy_origin_block == 16
    assert profile.forks.deployment_hook_fix_block is None


def test_mixed_case_addresses_are_one_account():
    profile = NetworkProfile.from_dict(
        profile_with(
            faucet={
                "0x57BA24bE2cF17400f37dB3566e839bfA6A2d018a": "0x1",
                "0x57ba24be2cf17400f37db3566e839bfa6a2d018a": "0x2",
            }
        )
    )
    assert profile.faucet == (
        (to_address("0x57ba24be2cf17400f37db3566e839bfa6a2d018a"), "0x2"),
    )


invalid_profile_test_data = [
    ([], "JSON object"),
    ({k: v for k, v in BASE_PROFILE.items() if k != "chainId"}, "chainId"),
    (profile_with(chainId="1337"), "chainId"),
    (profile_with(consensusParams={"minStakingAmount": 1}), "minValidatorStakeAmount"),
    (profile_with(consensusParams={"minValidatorStakeAmount": 1}), "minStakingAmount"),
    (profile_with(validators=["00a601f45688dba8a070722073b015277cf36725"]), "address"),
    (profile_with(validators=VALIDATOR), "validators"),
    (profile_with(initialStakes={VALIDATOR: 1000}), "initialStakes"),
    (profile_with(faucet={VALIDATOR: 5}), "faucet"),
    (profile_with(systemTreasury={VALIDATOR: "10000"}), "systemTreasury"),
    (profile_with(forks={"runtimeUpgradeBlock": "soon"}), "quantity"),
]


@pytest.mark.parametrize("data,message", invalid_profile_test_data)
def test_invalid_profiles(data, message):
    with pytest.raises(ConfigError) as excinfo:
        NetworkProfile.from_dict(data)
    assert message in str(excinfo.value)


def test_profile_file_errors(tmp_path):
    with pytest.raises(ConfigError):
        NetworkProfile.load(str(tmp_path / "absent.json"))

    broken = tmp_path / "broken.json"
    broken.write_text("{")
    with pytest.raises(ConfigError):
        NetworkProfile.load(str(broken))


def test_profiles_are_immutable():
    profile = NetworkProfile.from_dict(BASE_PROFILE)
    with pytest.raises(AttributeError):
        profile.chain_id = 1


def test_builtin_profiles():
    builtins = profiles.builtin_profiles()

    assert [p.filename for p in builtins] == [
        "localnet.json",
        "devnet.json",
        "testnet.json",
        "spicy.json",
        "mainnet.json",
    ]
    assert [p.profile.chain_id for p in builtins] == [1337, 17243, 3332199, 88882, 32199]
    for builtin in builtins:
        # every validator of a shipped network must have a stake
        initial_stake_schedule(builtin.profile)


def test_testnet_stake_total():
    stakes, total = initial_stake_schedule(profiles.testnet())

    assert len(stakes) == 5
    assert total == 103050 * 10 ** 18


def test_builtin_profiles_are_fresh_values():
    assert profiles.builtin_profiles()[0].profile == profiles.builtin_profiles()[0].profile
    assert profiles.builtin_profiles()[0].profile is not profiles.builtin_profiles()[0].profile


def test_sample_profiles_are_valid_json():
    for path in TESTDATA_PROFILES.glob("*.json"):
        NetworkProfile.from_dict(json.loads(path.read_text()))
