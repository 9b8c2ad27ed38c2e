"""Lifespan composition for the app factory.

Composes ordered LifespanContribution hooks into one FastAPI lifespan.
"""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from fastapi import FastAPI

    from credora.foundation.application import LifespanContribution

logger = logging.getLogger(__name__)


def compose_lifespan(
    hooks: list[LifespanContribution],
) -> Callable[[FastAPI], Any]:
    """Combine hooks into a single lifespan.

    Hooks are sorted by ascending priority. Lower priorities start first and
    shut down last (stack semantics via AsyncExitStack).

    Args:
        hooks: LifespanContribution instances.

    Returns:
        An async context manager factory suitable for FastAPI's ``lifespan``.
    """
    sorted_hooks = sorted(hooks, key=lambda h: h.priority)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with AsyncExitStack() as stack:
            for contribution in sorted_hooks:
                logger.info(
                    "Entering lifespan hook (priority=%d): %r",
                    contribution.priority,
                    contribution.hook,
                )
                await stack.enter_async_context(contribution.hook(app))
            yield

    return lifespan
