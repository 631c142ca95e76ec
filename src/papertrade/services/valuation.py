"""Mark-to-market valuation of accounts."""

from decimal import Decimal
from typing import Mapping

from papertrade.domain.models import Account
from papertrade.domain.views import HoldingValuation


def valuate_holdings(
    account: Account,
    prices: Mapping[str, Decimal],
) -> list[HoldingValuation]:
    """
    Value each holding against a price snapshot.

    A holding without a quote is valued at its average cost.
    """
    result: list[HoldingValuation] = []
    for holding in account.holdings:
        live_price = prices.get(holding.symbol)
        price = live_price if live_price is not None else holding.average_cost
        result.append(
            HoldingValuation(
                symbol=holding.symbol,
                shares=holding.shares,
                average_cost=holding.average_cost,
                price=price,
                market_value=holding.shares * price,
                is_live_quote=live_price is not None,
            )
        )
    return result


def valuate(account: Account, prices: Mapping[str, Decimal]) -> Decimal:
    """
    Total worth of an account: cash + Σ shares × price.

    Never fails; missing quotes degrade to cost basis for that holding.
    """
    total = account.cash
    for item in valuate_holdings(account, prices):
        total += item.market_value
    return total
