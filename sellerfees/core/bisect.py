"""
Bounded bisection for threshold crossings of a monotonic function.

Every inverse solver fixes all inputs but one scalar ``x`` and looks for
the boundary where ``is_satisfied(evaluate(x))`` flips. The iteration count
is the only termination guarantee: 80 halvings of a 500 000 wide interval
leave a width far below one cent.
"""

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_ITERATIONS = 80

_TWO = Decimal(2)


class SearchDirection(StrEnum):
    """Which end of the satisfying region to converge on."""
    SMALLEST = "smallest"  # satisfied above the root, e.g. price for a net
    LARGEST = "largest"  # satisfied below the root, e.g. discount for a net


@dataclass(frozen=True)
class BisectionResult(Generic[T]):
    x: Decimal
    value: T | None
    found: bool


def bisect_threshold(
    evaluate: Callable[[Decimal], T],
    is_satisfied: Callable[[T], bool],
    low: Decimal,
    high: Decimal,
    seek: SearchDirection,
    iterations: int = DEFAULT_ITERATIONS,
    fallback: T | None = None,
) -> BisectionResult[T]:
    """
    Narrow ``[low, high]`` to the smallest or largest satisfying ``x``.

    Args:
        evaluate: Evaluates the response at ``x`` (usually a forward calculation).
        is_satisfied: Target test on an evaluated value.
        low: Lower bound of the search domain.
        high: Upper bound of the search domain.
        seek: ``SMALLEST`` keeps the lowest satisfying ``x`` seen,
            ``LARGEST`` keeps the highest.
        iterations: Number of halvings.
        fallback: Value reported when no evaluation satisfied the target.

    Returns:
        BisectionResult with the best ``x`` and its evaluated value. When no
        evaluation satisfied the target, ``found`` is False and ``x`` is the
        domain boundary on the satisfying side (``high`` for SMALLEST,
        ``low`` for LARGEST).
    """
    low = Decimal(low)
    high = Decimal(high)
    best_x = high if seek == SearchDirection.SMALLEST else low
    best_value = fallback
    found = False

    for _ in range(iterations):
        mid = (low + high) / _TWO
        value = evaluate(mid)

        if is_satisfied(value):
            best_x, best_value, found = mid, value, True
            if seek == SearchDirection.SMALLEST:
                high = mid
            else:
                low = mid
        elif seek == SearchDirection.SMALLEST:
            low = mid
        else:
            high = mid

    return BisectionResult(x=best_x, value=best_value, found=found)
