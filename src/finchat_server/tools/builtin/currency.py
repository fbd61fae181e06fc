"""currencyConversion tool backed by ExchangeRate-API pair conversion."""

import logging
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

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

FAILURE_MESSAGE = "Failed to convert currency"
MISSING_KEY_MESSAGE = "Exchange Rate API key not configured"


class CurrencyConversionArguments(ToolArguments):
    amount: int | float
    from_: str = Field(alias="from")
    to: str


class CurrencyConversion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: int | float
    from_: str = Field(alias="from")
    to: str
    rate: float
    converted_amount: float
    timestamp: str | None = None


async def convert_currency(
    args: CurrencyConversionArguments, context: ToolContext
) -> CurrencyConversion:
    api_key = require_credential(
        context.settings.exchange_rate_api_key, MISSING_KEY_MESSAGE
    )
    amount = format(Decimal(str(args.amount)), "f")
    source = args.from_.strip().upper()
    target = args.to.strip().upper()

    data = await fetch_json(
        context,
        f"{context.settings.exchange_rate_base_url}/{api_key}/pair/{source}/{target}/{amount}",
        FAILURE_MESSAGE,
    )

    if not isinstance(data, dict) or data.get("result") == "error":
        error_type = data.get("error-type") if isinstance(data, dict) else None
        logger.warning(f"{FAILURE_MESSAGE}: provider reported {error_type}")
        raise ToolExecutionError(FAILURE_MESSAGE)

    rate = data.get("conversion_rate")
    converted = data.get("conversion_result")
    if rate is None or converted is None:
        logger.warning(f"{FAILURE_MESSAGE}: response is missing conversion fields")
        raise ToolExecutionError(FAILURE_MESSAGE)

    return CurrencyConversion(
        amount=args.amount,
        from_=source,
        to=target,
        rate=rate,
        converted_amount=converted,
        timestamp=data.get("time_last_update_utc"),
    )


CURRENCY_CONVERSION_TOOL = Tool(
    spec=ToolSpec(
        name="currencyConversion",
        description="Convert amount from one currency to another",
        parameters=(
            ToolParameter("amount", "number", "Amount to convert"),
            ToolParameter("from", "string", "Source currency code (e.g., USD)"),
            ToolParameter("to", "string", "Target currency code (e.g., EUR)"),
        ),
    ),
    arguments=CurrencyConversionArguments,
    handler=convert_currency,
)
