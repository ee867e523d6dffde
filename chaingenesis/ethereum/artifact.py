"""This module contains the representation of compiled system contract artifacts."""
import json
import logging
import os
from typing import Optional

from chaingenesis.ethereum.util import safe_decode
from chaingenesis.exceptions import ConfigError

log = logging.getLogger(__name__)


class ContractArtifact:
    """Compiler output for one system contract, consumed verbatim."""

    def __init__(
        self, name: str, creation_bytecode: bytes, deployed_bytecode: bytes = b""
    ) -> None:
        """

        :param name: The contract name, e.g. "Staking"
        :param creation_bytecode: init code the constructor payload is appended to
        :param deployed_bytecode: runtime code as reported by the compiler, informational
        """
        self.name = name
        self.creation_bytecode = creation_bytecode
        self.deployed_bytecode = deployed_bytecode

    @classmethod
    def from_json(cls, name: str, data: dict) -> "ContractArtifact":
        try:
            bytecode = data["bytecode"]
        except (KeyError, TypeError):
            raise ConfigError("Artifact {} has no bytecode field".format(name))
        try:
            creation_bytecode = safe_decode(bytecode)
            deployed_bytecode = safe_decode(data.get("deployedBytecode") or "0x")
        except (ValueError, AttributeError) as e:
            raise ConfigError("Artifact {} holds malformed hex: {}".format(name, e)) from e
        if not creation_bytecode:
            raise ConfigError("Artifact {} has empty bytecode".format(name))
        return cls(name, creation_bytecode, deployed_bytecode)

    @classmethod
    def load(cls, name: str, artifacts_dir: str) -> "ContractArtifact":
        """
        Reads <artifacts_dir>/<name>.json
        :param name:
        :param artifacts_dir:
        :return:
        """
        path = os.path.join(artifacts_dir, name + ".json")
        try:
            with open(path) as cf:
                contractdata = json.load(cf)
        except OSError as e:
            raise ConfigError("Unable to read artifact {}: {}".format(path, e)) from e
        except json.JSONDecodeError as e:
            raise ConfigError("Artifact {} is not valid JSON: {}".format(path, e)) from e
        log.debug("Loaded artifact %s from %s", name, path)
        return cls.from_json(name, contractdata)

    def __repr__(self) -> str:
        return "<ContractArtifact {} ({} bytes)>".format(
            self.name, len(self.creation_bytecode)
        )


class ArtifactStore:
    """Lazily loads and caches the artifacts of one build directory."""

    def __init__(self, artifacts_dir: str) -> None:
        self.artifacts_dir = artifacts_dir
        self._artifacts = {}  # type: dict

    def get(self, name: str) -> ContractArtifact:
        artifact = self._artifacts.get(name)  # type: Optional[ContractArtifact]
        if artifact is None:
            artifact = ContractArtifact.load(name, self.artifacts_dir)
            self._artifacts[name] = artifact
        return artifact
