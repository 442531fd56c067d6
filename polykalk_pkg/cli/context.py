from dataclasses import dataclass, field
from typing import List, Tuple

from ..types import EvalResult


@dataclass
class ReplContext:
    """Holds the state of the interactive REPL session."""
    debug_mode: bool = False
    saved_log_level: int = 0  # package log level to restore on "debug off"
    output_format: str = "human"
    history: List[Tuple[str, EvalResult]] = field(default_factory=list)
