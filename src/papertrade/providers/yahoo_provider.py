"""
Yahoo Finance market data provider via yfinance.

Per-symbol failures omit the symbol; a timeout or total failure raises
QuotesUnavailableError so MarketDataService can fall back to its cache.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from papertrade.core.exceptions import QuotesUnavailableError
from papertrade.core.timezone import now_eastern
from papertrade.domain.views import Quote

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT_SECONDS = 10.0


# Lazy import so tests can patch before import
def _get_yf():
    import yfinance as yf
    return yf


def _ticker_info(symbol: str, tickers_obj: Any) -> Optional[dict]:
    """Return the yfinance info dict for one symbol, or None on any failure."""
    try:
        ticker = tickers_obj.tickers.get(symbol)
        if ticker is None:
            return None
        info = ticker.info
        return info if isinstance(info, dict) else None
    except Exception:
        logger.debug("yfinance info lookup failed for %s", symbol, exc_info=True)
        return None


def _price_from_info(info: dict) -> Optional[Decimal]:
    # currentPrice preferred, then regularMarketPrice
    price = info.get("currentPrice")
    if price is None:
        price = info.get("regularMarketPrice")
    if price is None:
        return None
    try:
        return Decimal(str(price)).quantize(Decimal("0.01"))
    except (InvalidOperation, ValueError):
        return None


class YahooFinanceProvider:
    """Quotes and industries from Yahoo Finance."""

    def __init__(self, fetch_timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS):
        self._fetch_timeout = fetch_timeout_seconds

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """Fetch last prices; symbols without a usable price are omitted."""
        infos = self._fetch_infos(symbols)
        as_of = now_eastern()
        result: dict[str, Quote] = {}
        for symbol, info in infos.items():
            price = _price_from_info(info)
            if price is not None:
                result[symbol] = Quote(symbol=symbol, last_price=price, as_of=as_of)
        return result

    def get_industries(self, symbols: list[str]) -> dict[str, str]:
        """Fetch industry names; symbols without one are omitted."""
        infos = self._fetch_infos(symbols)
        return {
            symbol: info["industry"]
            for symbol, info in infos.items()
            if info.get("industry")
        }

    def _fetch_infos(self, symbols: list[str]) -> dict[str, dict]:
        symbols = [s.strip().upper() for s in symbols if s and s.strip()]
        if not symbols:
            return {}
        # A timed-out fetch is left running; the caller does not wait for it
        ex = ThreadPoolExecutor(max_workers=1)
        try:
            fut = ex.submit(self._fetch_infos_impl, symbols)
            return fut.result(timeout=self._fetch_timeout)
        except FuturesTimeoutError as exc:
            raise QuotesUnavailableError(
                f"Timed out fetching market data for {', '.join(symbols)}"
            ) from exc
        except Exception as exc:
            raise QuotesUnavailableError(f"Market data fetch failed: {exc}") from exc
        finally:
            ex.shutdown(wait=False, cancel_futures=True)

    @staticmethod
    def _fetch_infos_impl(symbols: list[str]) -> dict[str, dict]:
        yf = _get_yf()
        tickers = yf.Tickers(" ".join(symbols))
        result = {}
        for symbol in symbols:
            info = _ticker_info(symbol, tickers)
            if info is not None:
                result[symbol] = info
        return result
