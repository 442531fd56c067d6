# Re-export print_result_pretty for tests
from ..utils.formatting import print_result_pretty
from .app import _health_check
from .app import main_entry
from .commands import run_command
from .repl_core import REPL
from .repl_core import repl_loop

__all__ = ["main_entry", "repl_loop", "REPL", "run_command", "_health_check", "print_result_pretty"]
