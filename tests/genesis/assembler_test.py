import pytest

from chaingenesis.ethereum.artifact import ArtifactStore
from chaingenesis.ethereum.ctor import encode_constructor_payload
from chaingenesis.ethereum.util import to_address
from chaingenesis.exceptions import ConfigError, DeploymentError
from chaingenesis.genesis.assembler import (
    GenesisAssembler,
    faucet_balances,
    initial_stake_schedule,
)
from chaingenesis.genesis.contracts import (
    CHAIN_CONFIG_ADDRESS,
    INTERMEDIARY_SYSTEM_ADDRESS,
    STAKING_ADDRESS,
    SYSTEM_CONTRACTS,
)
from chaingenesis.genesis.profile import ConsensusParams, NetworkProfile
from chaingenesis.genesis.profiles import devnet, localnet
from chaingenesis.laser.simulator import DeploymentSimulator
from tests import RECORDER_RUNTIME, REVERTING_CREATION, TESTDATA_PROFILES
from tests.conftest import write_artifact

VALIDATORS = [
    "0x08fae3885e299c24ff9841478eb946f41023ac69",
    "0x751aaca849b09a3e347bbfe125cf18423cc24b40",
    "0xa6ff33e3250cc765052ac9d7f7dfebda183c4b9b",
    "0x49c0f7c8c11a4c80dc6449efe1010bb166818da8",
    "0x8e1ea6eaa09c3b40f4a51fcd056a031870a0549a",
]
TREASURY = "0x9c9459aaf90df6347d4585726f0e97802788f830"
FAUCET = "0xb891fe7b38f857f53a7b5529204c58d5c487280b"


def make_profile(**kwargs):
    options = dict(
        name="test",
        chain_id=1337,
        consensus_params=ConsensusParams(25, 40, 5, 10, 3, 2, 10 ** 18, 10 ** 18),
        validators=VALIDATORS,
        system_treasury={TREASURY: 10000},
        initial_stakes={v: "0x3635c9adc5dea00000" for v in VALIDATORS},
        faucet={FAUCET: "0x21e19e0c9bab2400000"},
        voting_period=20,
    )
    options.update(kwargs)
    return NetworkProfile.create(**options)


def test_single_validator_staking_balance(assembler):
    # Arrange
    profile = NetworkProfile.load(str(TESTDATA_PROFILES / "single_validator.json"))

    # Act
    document = assembler.assemble(profile).to_dict()

    # Assert
    staking = document["alloc"]["0000000000000000000000000000000000001000"]
    assert staking["balance"] == "0x3635c9adc5dea00000"
    assert len(bytes.fromhex(document["extraData"][2:])) == 117
    assert document["config"]["chainId"] == 1337


def test_allocation_contents(assembler):
    # Act
    document = assembler.assemble(make_profile())

    # Assert
    expected = {contract.address.hex() for contract in SYSTEM_CONTRACTS}
    expected.add(FAUCET[2:])
    expected.add(INTERMEDIARY_SYSTEM_ADDRESS.hex())
    alloc = document.to_dict()["alloc"]
    assert set(alloc) == expected
    assert len(alloc) == 10
    assert len(document.extra_data) == 32 + 20 * 5 + 65


def test_system_contracts_carry_code_and_storage(assembler):
    alloc = assembler.assemble(make_profile()).to_dict()["alloc"]

    for contract in SYSTEM_CONTRACTS:
        entry = alloc[contract.address.hex()]
        assert entry["code"] == "0x" + RECORDER_RUNTIME
        # written by init()
        assert entry["storage"]["0x" + "00" * 31 + "04"] == "0x" + "00" * 31 + "01"
    assert alloc[INTERMEDIARY_SYSTEM_ADDRESS.hex()] == {"balance": "0x0", "nonce": "0x0"}


def test_staking_is_funded_with_total_stake(assembler):
    # Act
    document = assembler.assemble(make_profile())

    # Assert
    staking = document.alloc[STAKING_ADDRESS]
    assert staking.balance == 5 * 1000 * 10 ** 18
    # the constructor observed the funding through BALANCE(ADDRESS)
    assert staking.storage[1] == 5 * 1000 * 10 ** 18
    assert document.alloc[CHAIN_CONFIG_ADDRESS].balance == 0
    assert 1 not in document.alloc[CHAIN_CONFIG_ADDRESS].storage


def test_constructor_payload_reaches_contract(assembler):
    # Arrange
    profile = make_profile()
    payload = encode_constructor_payload(
        ["address[]", "uint256[]", "uint16"],
        [list(profile.validators), [1000 * 10 ** 18] * 5, 0],
    )

    # Act
    document = assembler.assemble(profile)

    # Assert
    assert document.alloc[STAKING_ADDRESS].storage[3] == 32 + len(payload)


def test_faucet_overrides_system_contract(assembler):
    # Arrange
    profile = NetworkProfile.load(str(TESTDATA_PROFILES / "faucet_override.json"))

    # Act
    alloc = assembler.assemble(profile).to_dict()["alloc"]

    # Assert
    assert alloc["0000000000000000000000000000000000001000"] == {
        "balance": "0x1",
        "nonce": "0x0",
    }
    assert alloc["57ba24be2cf17400f37db3566e839bfa6a2d018a"]["balance"] == (
        "0x21e19e0c9bab2400000"
    )
    assert "code" in alloc[CHAIN_CONFIG_ADDRESS.hex()]


def test_missing_stake_fails_before_simulation(assembler, mocker):
    # Arrange
    profile = NetworkProfile.load(str(TESTDATA_PROFILES / "missing_stake.json"))
    spy = mocker.spy(DeploymentSimulator, "simulate")

    # Act
    with pytest.raises(ConfigError) as excinfo:
        assembler.assemble(profile)

    # Assert
    assert "initial stake is not found for validator" in str(excinfo.value)
    assert "0x57ba24be2cf17400f37db3566e839bfa6a2d018a" in str(excinfo.value).lower()
    assert spy.call_count == 0


@pytest.mark.parametrize("stake", ["1000", "0x", "0xnothex"])
def test_malformed_stake(stake):
    profile = make_profile(initial_stakes={v: stake for v in VALIDATORS})
    with pytest.raises(ConfigError):
        initial_stake_schedule(profile)


def test_malformed_faucet_balance():
    profile = make_profile(faucet={FAUCET: "lots"})
    with pytest.raises(ConfigError) as excinfo:
        faucet_balances(profile)
    assert "failed to parse faucet balance" in str(excinfo.value)


def test_missing_artifact_fails_before_simulation(tmp_path, mocker):
    spy = mocker.spy(DeploymentSimulator, "simulate")
    assembler = GenesisAssembler(ArtifactStore(str(tmp_path)))

    with pytest.raises(ConfigError):
        assembler.assemble(make_profile())
    assert spy.call_count == 0


def test_reverting_constructor_aborts_assembly(artifacts_dir):
    write_artifact(artifacts_dir, "Governance", REVERTING_CREATION)
    assembler = GenesisAssembler(ArtifactStore(str(artifacts_dir)))

    with pytest.raises(DeploymentError) as excinfo:
        assembler.assemble(make_profile())
    assert excinfo.value.reason == "boom"
    assert excinfo.value.address == "0x0000000000000000000000000000000000007002"


def test_assembly_is_reproducible(assembler):
    assert assembler.assemble(devnet()).to_json() == assembler.assemble(devnet()).to_json()


def test_builtin_profile_assembles(assembler):
    document = assembler.assemble(localnet())
    alloc = document.to_dict()["alloc"]

    assert to_address("0xEbCf9D06cf9333706E61213F17A795B2F7c55F1b").hex() in alloc
    assert alloc[STAKING_ADDRESS.hex()]["balance"] == "0x3635c9adc5dea00000"
