"""cryptoPrice tool backed by the CoinGecko markets API."""

import logging

from pydantic import BaseModel, ConfigDict, ValidationError

from finchat_server.errors import ToolExecutionError
from finchat_server.tools.providers import fetch_json
from finchat_server.tools.registry import (
    Tool,
    ToolArguments,
    ToolContext,
    ToolParameter,
    ToolSpec,
)

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Failed to fetch cryptocurrency data"
EMPTY_COIN_MESSAGE = "Cryptocurrency id must not be empty"


class CryptoPriceArguments(ToolArguments):
    coin: str


class CryptoSnapshot(BaseModel):
    """Market snapshot for a single coin."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    symbol: str
    current_price: float | None = None
    market_cap: float | None = None
    price_change_percentage_24h: float | None = None


class CryptoNoData(BaseModel):
    """Explicit answer when the provider knows nothing about a coin."""

    coin: str
    found: bool = False
    message: str


async def fetch_crypto_price(
    args: CryptoPriceArguments, context: ToolContext
) -> CryptoSnapshot | CryptoNoData:
    coin = args.coin.strip().lower()
    if not coin:
        raise ToolExecutionError(EMPTY_COIN_MESSAGE)

    data = await fetch_json(
        context,
        f"{context.settings.coingecko_base_url}/coins/markets",
        FAILURE_MESSAGE,
        params={
            "vs_currency": "usd",
            "ids": coin,
            "order": "market_cap_desc",
            "per_page": 1,
            "page": 1,
            "sparkline": "false",
        },
    )

    if not isinstance(data, list):
        logger.warning(f"{FAILURE_MESSAGE}: unexpected payload type")
        raise ToolExecutionError(FAILURE_MESSAGE)

    if not data:
        logger.debug(f"No market data for coin {coin}")
        return CryptoNoData(coin=coin, message=f"No market data found for '{coin}'")

    try:
        return CryptoSnapshot.model_validate(data[0])
    except ValidationError as e:
        logger.warning(f"{FAILURE_MESSAGE}: malformed market data")
        raise ToolExecutionError(FAILURE_MESSAGE) from e


CRYPTO_PRICE_TOOL = Tool(
    spec=ToolSpec(
        name="cryptoPrice",
        description="Get current cryptocurrency price and market data",
        parameters=(
            ToolParameter(
                "coin", "string", "Cryptocurrency ID (e.g., bitcoin, ethereum)"
            ),
        ),
    ),
    arguments=CryptoPriceArguments,
    handler=fetch_crypto_price,
)
