from __future__ import annotations

from functools import lru_cache
from numbers import Integral

from . import config
from .types import DomainError


@lru_cache(maxsize=None)
def _pascal(n: int, k: int) -> int:
    if n == k:
        return 1
    if k == 1:
        return n
    return _pascal(n - 1, k) + _pascal(n - 1, k - 1)


def binomial(n: int, k: int) -> int:
    """Binomial coefficient C(n, k) from Pascal's rule.

    Memoised, so each (n, k) pair is computed once and the recursion depth is
    at most ``n``. Valid for ``1 <= k <= n <= BINOMIAL_MAX_N``.

    Raises:
        DomainError: Non-integer arguments or arguments outside that range
    """
    for label, value in (("n", n), ("k", k)):
        if isinstance(value, bool) or not isinstance(value, Integral):
            raise DomainError(f"binomial: {label} must be an integer, got {value!r}")
    n, k = int(n), int(k)
    if n < 0:
        raise DomainError(f"binomial: n must be non-negative, got {n}")
    if k < 1 or k > n:
        raise DomainError(f"binomial: k must satisfy 1 <= k <= n, got n={n}, k={k}")
    if n > config.BINOMIAL_MAX_N:
        raise DomainError(f"binomial: n={n} exceeds the limit of {config.BINOMIAL_MAX_N}")
    return _pascal(n, k)
