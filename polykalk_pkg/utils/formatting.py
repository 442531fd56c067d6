from __future__ import annotations

import json
from typing import Any

from .. import config
from ..logging_config import get_logger
from ..types import EvalResult

logger = get_logger("formatting")


def format_number_no_trailing_zeros(num_str: str) -> str:
    """Format a number string by removing trailing zeros and decimal point if not needed."""
    try:
        num = float(num_str)
        if num.is_integer() and abs(num) < 1e15:
            return str(int(num))
        if "e" in num_str.lower():
            return num_str
        return num_str.rstrip("0").rstrip(".") if "." in num_str else num_str
    except (ValueError, TypeError):
        return num_str


def format_number(value: Any, precision: int | None = None) -> str:
    """Render a numeric result with ``precision`` significant digits.

    Integers (binomial coefficients) are printed exactly; anything that is
    not a number (symbolic forms from ``show``) is printed as is.
    """
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        digits = precision if precision is not None else config.OUTPUT_PRECISION
        return format_number_no_trailing_zeros(f"{value:.{digits}g}")
    return str(value)


def print_result_pretty(res: EvalResult, output_format: str = "human") -> None:
    """Print one command outcome.

    Args:
        res: Result of running a command
        output_format: "human" or "json"
    """
    if output_format == "json":
        print(json.dumps(res.to_dict()))
        return
    if res.ok:
        print(format_number(res.result))
        if res.warning:
            print(f"Warning: {res.warning}")
    else:
        logger.debug("Command failed with %s: %s", res.error_code, res.error)
        print(f"Error: {res.error}")
