"""Exception types raised outside the conversion core.

The extraction, synthesis and enhancement stages report failures as data
(see ``BaseResult`` and ``EnhancementReport``). These exceptions cover the
edges: configuration files and strict contract validation.
"""


class AutomancyError(Exception):
    """Base class for automancy errors."""


class ConfigError(AutomancyError):
    """A configuration file is malformed or holds invalid values."""


class ContractError(AutomancyError):
    """A conversion result does not satisfy the output contract."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []
