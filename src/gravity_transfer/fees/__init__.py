from __future__ import annotations

from .estimator import FEE_TIERS, FeeEstimator, fee_exceeds_balance, sum_congestion_fee
from .relay import Erc20Fee, GravityInfoClient, PendingBatch, PendingTransaction

__all__ = [
    "FEE_TIERS",
    "Erc20Fee",
    "FeeEstimator",
    "GravityInfoClient",
    "PendingBatch",
    "PendingTransaction",
    "fee_exceeds_balance",
    "sum_congestion_fee",
]
