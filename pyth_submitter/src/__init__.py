"""
Pyth price update submitter

This module fetches signed price updates from the Pyth network and submits
them to a consumer contract:
- clients: Hermes v2 and legacy REST price service clients
- UpdateProvider: Primary fetch with a single REST fallback
- FeeCalculator: On-chain update fee query
- UpdateSubmitter: Transaction submission with failure hints
- PriceMonitor: Bounded-duration price change reporting
- PriceSubmitter: Main orchestrator
"""

from .ContractUtility import ContractUtility
from .FeeCalculator import FeeCalculator
from .PriceMonitor import PriceMonitor
from .PriceSubmitter import PriceSubmitter, create_provider
from .PriceUpdate import PriceObservation, PriceUpdate, SubmissionReceipt
from .SubmitterConfig import ConfigError, SubmitterConfig
from .UpdateProvider import UpdateProvider
from .UpdateSubmitter import UpdateSubmitter, classify_failure

__all__ = [
    "ConfigError",
    "ContractUtility",
    "FeeCalculator",
    "PriceMonitor",
    "PriceObservation",
    "PriceSubmitter",
    "PriceUpdate",
    "SubmissionReceipt",
    "SubmitterConfig",
    "UpdateProvider",
    "UpdateSubmitter",
    "classify_failure",
    "create_provider",
]
