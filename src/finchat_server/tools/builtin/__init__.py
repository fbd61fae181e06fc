"""Built-in tools advertised to the model."""

from finchat_server.tools.builtin.arithmetic import PRIME_NUMBER_TOOL, SUM_TOOL
from finchat_server.tools.builtin.crypto import CRYPTO_PRICE_TOOL
from finchat_server.tools.builtin.currency import CURRENCY_CONVERSION_TOOL
from finchat_server.tools.builtin.news import NEWS_TOOL
from finchat_server.tools.builtin.valuation import DCF_VALUATION_TOOL

BUILTIN_TOOLS = (
    SUM_TOOL,
    PRIME_NUMBER_TOOL,
    CRYPTO_PRICE_TOOL,
    NEWS_TOOL,
    DCF_VALUATION_TOOL,
    CURRENCY_CONVERSION_TOOL,
)

__all__ = ["BUILTIN_TOOLS"]
