"""dcfValuation tool: discounted-cash-flow valuation from Alpha Vantage data.

The valuation projects free cash flow five years forward at a fixed growth
rate, discounts each year and a Gordon-growth terminal value back to the
present, and derives an intrinsic value per share. Buy prices follow the
Buffett (30% margin) and Lynch (20% margin) rules of thumb.
"""

import asyncio
import logging
import math
from typing import Any

from pydantic import BaseModel

from finchat_server.errors import ToolExecutionError
from finchat_server.tools.providers import fetch_json, require_credential
from finchat_server.tools.registry import (
    Tool,
    ToolArguments,
    ToolContext,
    ToolParameter,
    ToolSpec,
)

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Failed to calculate DCF valuation"
INSUFFICIENT_DATA_MESSAGE = "Insufficient data for DCF calculation"
MISSING_KEY_MESSAGE = "Alpha Vantage API key not configured"

GROWTH_RATE = 0.05
DISCOUNT_RATE = 0.10
TERMINAL_GROWTH = 0.03
PROJECTION_YEARS = 5

BUFFETT_MARGIN_FACTOR = 0.70
LYNCH_MARGIN_FACTOR = 0.80
SELL_PREMIUM_FACTOR = 1.20
BUFFETT_MIN_SAFETY_MARGIN = 30.0

STRONG_BUY = "STRONG BUY (Buffett Criteria)"
BUY = "BUY (Lynch Criteria)"
SELL = "SELL"
HOLD = "HOLD"


class DcfValuationArguments(ToolArguments):
    ticker: str


class BuyRange(BaseModel):
    buffett: float
    lynch: float


class ValuationMetrics(BaseModel):
    pe: float
    peg: float
    fcf: float
    growth: float


class DcfValuation(BaseModel):
    ticker: str
    intrinsic_value: float
    current_price: float
    recommendation: str
    safety_margin: float
    buy_range: BuyRange
    metrics: ValuationMetrics


def enterprise_value(
    fcf: float,
    growth_rate: float = GROWTH_RATE,
    discount_rate: float = DISCOUNT_RATE,
    terminal_growth: float = TERMINAL_GROWTH,
    years: int = PROJECTION_YEARS,
) -> float:
    """Present value of projected cash flows plus the terminal value.

    Raises:
        ValueError: If discount_rate does not exceed terminal_growth
    """
    spread = discount_rate - terminal_growth
    if spread <= 0:
        raise ValueError(
            f"Discount rate ({discount_rate}) must exceed terminal growth ({terminal_growth})"
        )

    projected = fcf
    total_present_value = 0.0
    for year in range(1, years + 1):
        projected *= 1 + growth_rate
        total_present_value += projected / (1 + discount_rate) ** year

    terminal_value = projected * (1 + terminal_growth) / spread
    terminal_present_value = terminal_value / (1 + discount_rate) ** years
    return total_present_value + terminal_present_value


def recommend(
    intrinsic_value: float, current_price: float, safety_margin: float, peg: float
) -> str:
    """Pick a recommendation; earlier rules win."""
    if (
        current_price <= intrinsic_value * BUFFETT_MARGIN_FACTOR
        and safety_margin >= BUFFETT_MIN_SAFETY_MARGIN
    ):
        return STRONG_BUY
    if current_price <= intrinsic_value * LYNCH_MARGIN_FACTOR and peg < 1:
        return BUY
    if current_price > intrinsic_value * SELL_PREMIUM_FACTOR:
        return SELL
    return HOLD


def value_company(
    ticker: str,
    fcf: float,
    current_price: float,
    market_cap: float,
    pe: float,
) -> DcfValuation:
    """Run the full valuation for one company.

    Raises:
        ValueError: If price, market cap or the resulting intrinsic value
            make the per-share figures undefined
    """
    if current_price <= 0 or market_cap <= 0:
        raise ValueError("Current price and market cap must be positive")

    shares_outstanding = market_cap / current_price
    intrinsic_value = enterprise_value(fcf) / shares_outstanding
    if intrinsic_value == 0:
        raise ValueError("Intrinsic value is zero")

    growth = GROWTH_RATE * 100
    peg = pe / growth
    safety_margin = (intrinsic_value - current_price) / intrinsic_value * 100

    return DcfValuation(
        ticker=ticker,
        intrinsic_value=intrinsic_value,
        current_price=current_price,
        recommendation=recommend(intrinsic_value, current_price, safety_margin, peg),
        safety_margin=safety_margin,
        buy_range=BuyRange(
            buffett=intrinsic_value * BUFFETT_MARGIN_FACTOR,
            lynch=intrinsic_value * LYNCH_MARGIN_FACTOR,
        ),
        metrics=ValuationMetrics(pe=pe, peg=peg, fcf=fcf, growth=growth),
    )


def _number(value: Any, default: float | None = 0.0) -> float | None:
    """Parse a provider number; Alpha Vantage reports gaps as "None"."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(parsed) or math.isinf(parsed):
        return default
    return parsed


def extract_inputs(
    overview: Any, cash_flow: Any, quote_payload: Any
) -> tuple[float, float, float, float]:
    """Pull (fcf, current_price, market_cap, pe) out of the three datasets.

    Raises:
        ToolExecutionError: If any dataset is missing or unusable
    """
    if not isinstance(overview, dict) or not overview.get("Symbol"):
        raise ToolExecutionError(INSUFFICIENT_DATA_MESSAGE)

    reports = cash_flow.get("annualReports") if isinstance(cash_flow, dict) else None
    if not reports:
        raise ToolExecutionError(INSUFFICIENT_DATA_MESSAGE)

    quote = (
        quote_payload.get("Global Quote") if isinstance(quote_payload, dict) else None
    )
    if not quote:
        raise ToolExecutionError(INSUFFICIENT_DATA_MESSAGE)

    current_price = _number(quote.get("05. price"), default=None)
    if current_price is None:
        raise ToolExecutionError(INSUFFICIENT_DATA_MESSAGE)

    latest = reports[0] or {}
    fcf = _number(latest.get("operatingCashflow")) - _number(
        latest.get("capitalExpenditures")
    )
    market_cap = _number(overview.get("MarketCapitalization"))
    pe = _number(overview.get("PERatio"))
    return fcf, current_price, market_cap, pe


async def fetch_dcf_valuation(
    args: DcfValuationArguments, context: ToolContext
) -> DcfValuation:
    api_key = require_credential(
        context.settings.alpha_vantage_api_key, MISSING_KEY_MESSAGE
    )
    ticker = args.ticker.strip().upper()
    url = f"{context.settings.alpha_vantage_base_url}/query"

    overview, cash_flow, quote = await asyncio.gather(
        *(
            fetch_json(
                context,
                url,
                FAILURE_MESSAGE,
                params={"function": function, "symbol": ticker, "apikey": api_key},
            )
            for function in ("OVERVIEW", "CASH_FLOW", "GLOBAL_QUOTE")
        )
    )

    fcf, current_price, market_cap, pe = extract_inputs(overview, cash_flow, quote)
    try:
        valuation = value_company(ticker, fcf, current_price, market_cap, pe)
    except ValueError as e:
        logger.warning(f"DCF valuation for {ticker} not computable: {e}")
        raise ToolExecutionError(INSUFFICIENT_DATA_MESSAGE) from e

    logger.info(f"DCF valuation for {ticker}: {valuation.recommendation}")
    return valuation


DCF_VALUATION_TOOL = Tool(
    spec=ToolSpec(
        name="dcfValuation",
        description="Perform DCF (Discounted Cash Flow) valuation analysis for a stock",
        parameters=(
            ToolParameter(
                "ticker", "string", "Stock ticker symbol (e.g., AAPL, GOOGL)"
            ),
        ),
    ),
    arguments=DcfValuationArguments,
    handler=fetch_dcf_valuation,
)
