"""
First-match drivers for strategy cascades.

A strategy is any object with an ``attempt`` method and a ``name``. The driver
walks the list in order and returns the first non-None result.
"""

from typing import Any, Optional, Protocol, Sequence, Tuple

import logfire


class Strategy(Protocol):
    name: str

    def attempt(self, subject: Any) -> Optional[Any]:
        ...


class AsyncStrategy(Protocol):
    name: str

    async def attempt(self, subject: Any) -> Optional[Any]:
        ...


def first_result(strategies: Sequence[Strategy], subject: Any, cascade: str) -> Tuple[Optional[Any], Optional[str]]:
    """
    Run synchronous strategies until one produces a result.

    Returns:
        (result, strategy name) or (None, None) when every strategy missed
    """
    for strategy in strategies:
        result = strategy.attempt(subject)
        if result is not None:
            logfire.debug("strategy_hit", cascade=cascade, strategy=strategy.name)
            return result, strategy.name
        logfire.debug("strategy_miss", cascade=cascade, strategy=strategy.name)
    return None, None


async def first_result_async(
    strategies: Sequence[AsyncStrategy],
    subject: Any,
    cascade: str,
) -> Tuple[Optional[Any], Optional[str]]:
    """Async counterpart of ``first_result``."""
    for strategy in strategies:
        result = await strategy.attempt(subject)
        if result is not None:
            logfire.debug("strategy_hit", cascade=cascade, strategy=strategy.name)
            return result, strategy.name
        logfire.debug("strategy_miss", cascade=cascade, strategy=strategy.name)
    return None, None
