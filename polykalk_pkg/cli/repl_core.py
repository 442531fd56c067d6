import re
from typing import Optional

from ..config import VERSION
from ..logging_config import get_level
from ..logging_config import get_logger
from ..logging_config import set_level
from ..utils.formatting import format_number, print_result_pretty
from .commands import COMMANDS, CommandOptions, run_command
from .context import ReplContext

logger = get_logger("cli.repl")

HISTORY_RERUN_RE = re.compile(r"^!(\d+)$")

HELP_EXAMPLES = [
    ("binomial(24, 5)", "Binomial combinatorics."),
    ("solve(2*x = 4)", "Equation solving."),
    ("differentiate(x^2, 5)", "Numeric differentiation."),
    ("limit(1/(x-1), 2)", "Very basic limits."),
    ("sum(2*x, 1, 10)", "Sigma sums."),
    ("product(x^x, 1, 10)", "Products."),
    ("pi*e", "Constants."),
    ("solve(atan2(1, x) = 0)", "Transcendental equations."),
    ("2*2+1+5+99", "Basic math."),
]


class REPL:
    """
    Read-eval-print loop over the command language.
    Input history is kept here, in the session context, never in the core.
    """
    def __init__(self, context: Optional[ReplContext] = None, options: Optional[CommandOptions] = None):
        self.ctx = context if context else ReplContext()
        self.options = options if options else CommandOptions()
        self.running = True
        self._setup_readline()

    def _setup_readline(self):
        # Arrow-key scrollback through previous inputs where GNU readline exists
        try:
            import readline  # noqa: F401
        except ImportError:
            pass

    def start(self):
        """Main loop entry point."""
        print(f"polykalk v{VERSION}: type 'help' for examples, 'quit' to exit.")
        while self.running:
            self.loop_once()

    def loop_once(self):
        """Single iteration of the read-eval-print loop."""
        try:
            prompt = ">>> " if not self.ctx.debug_mode else "DEBUG>>> "
            try:
                raw = input(prompt)
            except EOFError:
                self.running = False
                return
            self.process_input(raw)
        except KeyboardInterrupt:
            print("\n[Interrupted]")
        except Exception as e:
            logger.exception("Unexpected error in REPL loop")
            print(f"Error: {e}")

    def process_input(self, text: str):
        """Dispatch input to specific handlers."""
        text = text.split("#", 1)[0].strip()
        if not text:
            return

        lowered = text.lower()
        if lowered in ("quit", "exit"):
            self.running = False
            return
        if lowered == "help":
            self.show_help()
            return
        if lowered == "history":
            self.show_history()
            return
        if lowered in ("debug on", "debug off"):
            self.toggle_debug(lowered == "debug on")
            return

        rerun = HISTORY_RERUN_RE.match(text)
        if rerun:
            index = int(rerun.group(1))
            if not 1 <= index <= len(self.ctx.history):
                print(f"Error: no history entry {index}")
                return
            text = self.ctx.history[index - 1][0]
            print(text)

        self.execute(text)

    def execute(self, text: str):
        result = run_command(text, self.options)
        self.ctx.history.append((text, result))
        print_result_pretty(result, self.ctx.output_format)

    def show_help(self):
        print("Commands: " + ", ".join(cmd.usage for cmd in COMMANDS.values()))
        print("Session: help, history, !N (re-run entry N), debug on|off, quit")
        print("Examples:")
        for example, description in HELP_EXAMPLES:
            print(f">>> {example}    # {description}")
            self.execute(example)

    def show_history(self):
        if not self.ctx.history:
            print("No history yet.")
            return
        for index, (text, result) in enumerate(self.ctx.history, start=1):
            outcome = format_number(result.result) if result.ok else f"Error: {result.error}"
            print(f"{index:>3}  {text}  =>  {outcome}")

    def toggle_debug(self, enabled: bool):
        if enabled and not self.ctx.debug_mode:
            self.ctx.saved_log_level = get_level()
            set_level("DEBUG")
        elif not enabled and self.ctx.debug_mode:
            set_level(self.ctx.saved_log_level)
        self.ctx.debug_mode = enabled
        print("Debug mode enabled" if enabled else "Debug mode disabled")


def repl_loop(options: Optional[CommandOptions] = None, context: Optional[ReplContext] = None) -> None:
    REPL(context=context, options=options).start()
