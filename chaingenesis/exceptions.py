"""This module contains the exceptions used by chaingenesis.

Every error is fatal for the profile being built: nothing here is retried and
a partially assembled genesis is never written.
"""


class GenesisBaseException(Exception):
    """The chaingenesis exception base type."""

    pass


class ConfigError(GenesisBaseException):
    """A chaingenesis exception denoting missing or malformed profile or artifact data."""

    pass


class EncodingError(GenesisBaseException):
    """A chaingenesis exception denoting an ABI type/argument mismatch."""

    pass


class ExecutionError(GenesisBaseException):
    """Base type for failures reported by the execution engine.

    :param address: The system contract address being simulated
    :param reason: Printable text recovered from the engine's return data
    :param output: The raw return data
    """

    def __init__(self, message: str, address: str, reason: str = "", output: bytes = b""):
        if reason:
            message = "{} (reason: {})".format(message, reason)
        super().__init__(message)
        self.address = address
        self.reason = reason
        self.output = output


class DeploymentError(ExecutionError):
    """A chaingenesis exception denoting a reverted or rejected contract creation."""

    pass


class InitializationError(ExecutionError):
    """A chaingenesis exception denoting a reverted post-deploy initializer call."""

    pass


class SerializationError(GenesisBaseException):
    """A chaingenesis exception denoting a failure while writing the genesis document."""

    pass
