"""REPL interface for interactive sessions."""
import logging
import sys
from typing import Callable, Dict, Optional

from lisplet.sexp_evaluator.sexp_environment import Environment
from lisplet.sexp_evaluator.sexp_evaluator import LispEvaluator
from lisplet.sexp_evaluator.sexp_primitives import standard_environment
from lisplet.system.errors import LispEvaluationError, LispSyntaxError

logger = logging.getLogger(__name__)


class Repl:
    """Interactive REPL (Read-Eval-Print Loop) interface.

    Every line is parsed as one or more top-level forms and evaluated against
    a session environment that persists between lines.
    """

    def __init__(
        self,
        evaluator: Optional[LispEvaluator] = None,
        env_factory: Callable[[], Environment] = standard_environment,
        output_stream=None,
        verbose: bool = False,
    ):
        """Initialize the REPL interface.

        Args:
            evaluator: Evaluator to use (a default one is created if omitted)
            env_factory: Builds the session environment, on start and on /reset
            output_stream: Optional output stream (defaults to sys.stdout)
            verbose: Print the value of every form instead of just the last
        """
        self.evaluator = evaluator if evaluator is not None else LispEvaluator()
        self.env_factory = env_factory
        self.env = env_factory()
        self.verbose = verbose
        self.output = output_stream or sys.stdout
        self.running = False
        self.commands: Dict[str, Callable[[str], None]] = {
            "/help": self._cmd_help,
            "/env": self._cmd_env,
            "/reset": self._cmd_reset,
            "/verbose": self._cmd_verbose,
            "/exit": self._cmd_exit,
        }

    def start(self) -> None:
        """Start the REPL interface.

        Reads lines until /exit, end of input or an interrupt.
        """
        print("lisplet REPL", file=self.output)
        print("Type expressions or commands (/help for help)", file=self.output)

        self.running = True
        while self.running:
            try:
                user_input = input("> ")
            except (KeyboardInterrupt, EOFError):
                print("\nExiting...", file=self.output)
                break
            self._process_input(user_input)

    def _process_input(self, user_input: str) -> None:
        """Process one line of user input.

        Args:
            user_input: Input from the user
        """
        user_input = user_input.strip()

        if not user_input:
            return

        if user_input.startswith("/"):
            self._handle_command(user_input)
        else:
            self._handle_source(user_input)

    def _handle_command(self, command: str) -> None:
        parts = command.split(maxsplit=1)
        cmd = parts[0].lower()
        args = parts[1] if len(parts) > 1 else ""

        if cmd in self.commands:
            self.commands[cmd](args)
        else:
            print(f"Unknown command: {cmd}", file=self.output)
            print("Type /help for available commands", file=self.output)

    def _handle_source(self, source: str) -> None:
        """Evaluate source text and print the result.

        Errors are reported and the session carries on with the environment
        as it stood when the failing form was reached.
        """
        try:
            results = self.evaluator.evaluate_program(source, self.env)
        except LispSyntaxError as e:
            print(f"Syntax error: {e.message}", file=self.output)
            if e.line is not None:
                print(f"  at line {e.line}, column {e.column}", file=self.output)
            return
        except LispEvaluationError as e:
            print(f"Error: {e.message}", file=self.output)
            return

        shown = results if self.verbose else results[-1:]
        for value in shown:
            print(value, file=self.output)

    def _cmd_help(self, args: str) -> None:
        print("Available commands:", file=self.output)
        print("  /help - Show this help", file=self.output)
        print("  /env - List the bindings in the session environment", file=self.output)
        print("  /reset - Start over with a fresh environment", file=self.output)
        print("  /verbose [on|off] - Print the value of every form", file=self.output)
        print("  /exit - Exit the REPL", file=self.output)

    def _cmd_env(self, args: str) -> None:
        bindings = self.env.get_local_bindings()
        if not bindings:
            print("Environment is empty", file=self.output)
            return
        for name in sorted(bindings):
            print(f"  {name} = {bindings[name]}", file=self.output)

    def _cmd_reset(self, args: str) -> None:
        self.env = self.env_factory()
        print("Environment reset", file=self.output)

    def _cmd_verbose(self, args: str) -> None:
        """Handle the verbose command.

        Args:
            args: 'on' or 'off'; toggles when empty
        """
        if not args:
            self.verbose = not self.verbose
        elif args.lower() in ["on", "true", "yes", "1"]:
            self.verbose = True
        elif args.lower() in ["off", "false", "no", "0"]:
            self.verbose = False
        else:
            print(f"Invalid option: {args}", file=self.output)
            print("Usage: /verbose [on|off]", file=self.output)
            return

        print(f"Verbose mode: {'on' if self.verbose else 'off'}", file=self.output)

    def _cmd_exit(self, args: str) -> None:
        print("Exiting...", file=self.output)
        self.running = False
