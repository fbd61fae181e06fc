"""Pure computational tools: sum and primeNumber."""

import math

from finchat_server.tools.registry import (
    Tool,
    ToolArguments,
    ToolContext,
    ToolParameter,
    ToolSpec,
)


def add(num1: int | float, num2: int | float) -> int | float:
    return num1 + num2


def is_prime(number: int) -> bool:
    """Check primality by trial division over odd divisors up to sqrt(n)."""
    if number < 2:
        return False
    if number == 2:
        return True
    if number % 2 == 0:
        return False

    for divisor in range(3, math.isqrt(number) + 1, 2):
        if number % divisor == 0:
            return False
    return True


class SumArguments(ToolArguments):
    num1: int | float
    num2: int | float


class PrimeNumberArguments(ToolArguments):
    number: int


async def _sum(args: SumArguments, context: ToolContext) -> int | float:
    return add(args.num1, args.num2)


async def _prime_number(args: PrimeNumberArguments, context: ToolContext) -> bool:
    return is_prime(args.number)


SUM_TOOL = Tool(
    spec=ToolSpec(
        name="sum",
        description="Calculate the sum of two numbers",
        parameters=(
            ToolParameter("num1", "number", "First number"),
            ToolParameter("num2", "number", "Second number"),
        ),
    ),
    arguments=SumArguments,
    handler=_sum,
)

PRIME_NUMBER_TOOL = Tool(
    spec=ToolSpec(
        name="primeNumber",
        description="Check if a number is prime",
        parameters=(
            ToolParameter("number", "integer", "Number to check for primality"),
        ),
    ),
    arguments=PrimeNumberArguments,
    handler=_prime_number,
)
