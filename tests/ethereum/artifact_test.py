import json

import pytest

from chaingenesis.ethereum.artifact import ArtifactStore, ContractArtifact
from chaingenesis.exceptions import ConfigError
from tests import RECORDER_CREATION, RECORDER_RUNTIME
from tests.conftest import write_artifact


def test_load_artifact(tmp_path):
    write_artifact(tmp_path, "Staking", RECORDER_CREATION, RECORDER_RUNTIME)

    artifact = ContractArtifact.load("Staking", str(tmp_path))

    assert artifact.name == "Staking"
    assert artifact.creation_bytecode == bytes.fromhex(RECORDER_CREATION)
    assert artifact.deployed_bytecode == bytes.fromhex(RECORDER_RUNTIME)


def test_deployed_bytecode_is_optional():
    artifact = ContractArtifact.from_json("Staking", {"bytecode": "0x6000"})
    assert artifact.deployed_bytecode == b""


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"bytecode": "0x"},
        {"bytecode": ""},
        {"bytecode": "0xzz"},
        {"bytecode": "0x600"},
        {"bytecode": 12},
        [],
    ],
)
def test_malformed_artifacts(data):
    with pytest.raises(ConfigError):
        ContractArtifact.from_json("Staking", data)


def test_missing_artifact(tmp_path):
    with pytest.raises(ConfigError) as excinfo:
        ContractArtifact.load("Staking", str(tmp_path))
    assert "Staking.json" in str(excinfo.value)


def test_artifact_is_not_json(tmp_path):
    (tmp_path / "Staking.json").write_text("{not json")
    with pytest.raises(ConfigError):
        ContractArtifact.load("Staking", str(tmp_path))


def test_store_caches_artifacts(tmp_path, mocker):
    # Arrange
    write_artifact(tmp_path, "Staking", RECORDER_CREATION)
    store = ArtifactStore(str(tmp_path))
    spy = mocker.spy(ContractArtifact, "load")

    # Act
    first = store.get("Staking")
    second = store.get("Staking")

    # Assert
    assert first is second
    assert spy.call_count == 1


def test_extra_fields_are_ignored(tmp_path):
    (tmp_path / "ChainConfig.json").write_text(
        json.dumps({"abi": [], "bytecode": "0x" + RECORDER_CREATION, "ast": {}})
    )
    artifact = ArtifactStore(str(tmp_path)).get("ChainConfig")
    assert artifact.creation_bytecode == bytes.fromhex(RECORDER_CREATION)
