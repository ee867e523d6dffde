import logging
import os

from configparser import ConfigParser, Error as ConfigParserError
from typing import Optional

from chaingenesis.exceptions import ConfigError
from chaingenesis.laser.world_state import DEFAULT_GAS_LIMIT

log = logging.getLogger(__name__)

CONFIG_ENV = "CHAINGENESIS_CONFIG"
ARTIFACTS_DIR_ENV = "CHAINGENESIS_ARTIFACTS_DIR"
DEFAULT_ARTIFACTS_DIR = os.path.join("build", "contracts")


class BuilderConfig:
    """
    The builder configuration
    Resolves where artifacts live and how much gas simulations get. Sources, weakest
    first: defaults, the ini file named by CHAINGENESIS_CONFIG, the
    CHAINGENESIS_ARTIFACTS_DIR environment variable, explicit arguments.
    """

    def __init__(
        self, artifacts_dir: Optional[str] = None, gas_limit: Optional[int] = None
    ):
        self.artifacts_dir = DEFAULT_ARTIFACTS_DIR
        self.gas_limit = DEFAULT_GAS_LIMIT
        self.config_path = os.getenv(CONFIG_ENV)  # type: Optional[str]

        if self.config_path:
            self._load_config(self.config_path)

        env_artifacts_dir = os.getenv(ARTIFACTS_DIR_ENV)
        if env_artifacts_dir:
            self.artifacts_dir = env_artifacts_dir

        if artifacts_dir:
            self.artifacts_dir = artifacts_dir
        if gas_limit is not None:
            self.gas_limit = gas_limit

    def _load_config(self, config_path: str) -> None:
        """Reads the [defaults] section of an ini file
        Options:-
            - artifacts_dir: directory holding <ContractName>.json files
            - gas_limit: gas for each creation and initializer call
        """
        if not os.path.exists(config_path):
            raise ConfigError("Config file not found: " + config_path)

        config = ConfigParser(allow_no_value=True)
        config.optionxform = str
        try:
            config.read(config_path, "utf-8")
        except ConfigParserError as e:
            raise ConfigError("Malformed config file {}: {}".format(config_path, e)) from e

        if "defaults" not in config.sections():
            log.warning("No [defaults] section in %s, ignoring it", config_path)
            return

        artifacts_dir = config.get("defaults", "artifacts_dir", fallback=None)
        if artifacts_dir:
            self.artifacts_dir = artifacts_dir

        gas_limit = config.get("defaults", "gas_limit", fallback=None)
        if gas_limit:
            try:
                self.gas_limit = int(gas_limit, 0)
            except ValueError as e:
                raise ConfigError("Invalid gas_limit in {}: {}".format(config_path, gas_limit)) from e
        log.debug("Loaded config from %s", config_path)
