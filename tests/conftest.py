import json

import pytest

from chaingenesis.ethereum.artifact import ArtifactStore
from chaingenesis.genesis.assembler import GenesisAssembler
from chaingenesis.genesis.contracts import SYSTEM_CONTRACTS
from chaingenesis.laser.simulator import DeploymentSimulator
from chaingenesis.laser.world_state import BlockEnvironment
from tests import RECORDER_CREATION, RECORDER_RUNTIME


def write_artifact(directory, name, bytecode, deployed_bytecode=""):
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / (name + ".json")
    path.write_text(
        json.dumps(
            {
                "contractName": name,
                "bytecode": "0x" + bytecode,
                "deployedBytecode": "0x" + deployed_bytecode,
            }
        )
    )
    return path


@pytest.fixture
def artifacts_dir(tmp_path):
    """Every system contract backed by the RECORDER program."""
    directory = tmp_path / "build" / "contracts"
    for contract in SYSTEM_CONTRACTS:
        write_artifact(directory, contract.name, RECORDER_CREATION, RECORDER_RUNTIME)
    return directory


@pytest.fixture
def assembler(artifacts_dir):
    return GenesisAssembler(ArtifactStore(str(artifacts_dir)))


@pytest.fixture
def simulator():
    return DeploymentSimulator(BlockEnvironment(chain_id=1337))


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    monkeypatch.delenv("CHAINGENESIS_CONFIG", raising=False)
    monkeypatch.delenv("CHAINGENESIS_ARTIFACTS_DIR", raising=False)
