"""
Exceptions raised by OmniEvent.

Contract violations and configuration errors are always surfaced to the
caller. Data-quality problems in provider payloads are never raised; those
events are simply filtered out of the results.
"""


class OmniEventError(Exception):
    """Base class for all OmniEvent errors."""


class StrategyNotImplementedError(OmniEventError, NotImplementedError):
    """An operation was invoked that the strategy does not provide."""


class InvalidConfiguration(OmniEventError, ValueError):
    """Strategy options failed validation at construction time."""


class FetchError(OmniEventError):
    """Raw events could not be retrieved from the provider."""


class UnknownStrategyError(OmniEventError, KeyError):
    """No strategy is registered under the requested name."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""
