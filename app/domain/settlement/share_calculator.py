"""
Profit share calculator.

The operator is entitled to half of a client's positive net profit.
Losses are never shared: the share floors at zero.
"""

from dataclasses import dataclass
from decimal import Decimal

from app.domain.settlement.money import ZERO, quantize

SHARE_RATE = Decimal("0.5")


@dataclass(frozen=True)
class ShareBreakdown:
    """Net profit of a managed account and the operator's share of it."""

    net_profit: Decimal
    share: Decimal

    @property
    def settlement_due(self) -> bool:
        """True when the client owes a share for the current period."""
        return self.net_profit > 0


def compute_share(starting: Decimal, current: Decimal) -> ShareBreakdown:
    """Compute net profit and share for a starting/current balance pair.

    Args:
        starting: Balance recorded when the account was approved.
        current: Latest balance reported by the operator.

    Returns:
        ShareBreakdown with both values rounded to cents.
    """
    net_profit = current - starting
    share = net_profit * SHARE_RATE if net_profit > 0 else ZERO
    return ShareBreakdown(net_profit=quantize(net_profit), share=quantize(share))
