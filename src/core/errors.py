from __future__ import annotations


class FundingError(Exception):
    """Base class for failures of the aggregator funding step."""


class ConfigError(FundingError):
    """Network entry or settings are missing or malformed."""


class TransferError(FundingError):
    """A token transfer could not be issued or did not succeed.

    Covers unresolvable token/aggregator addresses, reverted transfers,
    RPC and signing failures. Never retried locally.
    """
