import sys
from dataclasses import dataclass, field
from typing import List, Optional, TextIO

from termcolor import colored

from .lexer import Lexer
from .parser import Parser
from .interpreter import Interpreter
from .errors import LoxError


@dataclass
class RunResult:
    """The outcome of one run: what went wrong, if anything."""
    errors: List[LoxError] = field(default_factory=list)
    runtime_error: Optional[LoxError] = None

    @property
    def succeeded(self) -> bool:
        return not self.errors and self.runtime_error is None

    def all_errors(self) -> List[LoxError]:
        if self.runtime_error is None:
            return list(self.errors)
        return self.errors + [self.runtime_error]


class Lox:
    def __init__(self, output: Optional[TextIO] = None):
        self.output = output
        # One interpreter for the lifetime of the session, so globals
        # defined on one prompt line are visible on the next.
        self.interpreter = Interpreter(output)

    def run(self, source: str) -> RunResult:
        """
        Scans, parses and, when both were clean, executes the source.
        Nothing is executed if any lexical or syntax error was found.
        """
        lexer = Lexer(source)
        tokens = lexer.scan_tokens()
        parser = Parser(tokens)
        statements = parser.parse()

        result = RunResult(errors=lexer.errors + parser.errors)
        if result.errors:
            return result

        result.runtime_error = self.interpreter.interpret(statements)
        return result

    def report(self, result: RunResult, highlight: bool = False):
        """Prints every error of a run, one line each."""
        for error in result.all_errors():
            line = str(error)
            if highlight:
                line = colored(line, "red", attrs=["bold"])
            print(line, file=self.output)

    def run_file(self, path: str) -> int:
        """Runs a script file and returns the process exit status."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                source = f.read()
        except OSError as error:
            print(f"Could not read '{path}': {error.strerror}", file=self.output)
            return 66
        except UnicodeDecodeError:
            print(f"Could not read '{path}': not valid UTF-8 text.", file=self.output)
            return 66

        result = self.run(source)
        self.report(result)
        if result.errors:
            return 65
        if result.runtime_error is not None:
            return 70
        return 0

    def run_prompt(self):
        print("Lox REPL (Ctrl+C to exit)", file=self.output)
        while True:
            try:
                line = input("> ")
            except (KeyboardInterrupt, EOFError):
                print("\nExiting.", file=self.output)
                break
            if not line:
                continue
            self.report(self.run(line), highlight=True)


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) > 1:
        print("Usage: lox [script]")
        return 64

    lox = Lox()
    if args:
        return lox.run_file(args[0])
    lox.run_prompt()
    return 0


if __name__ == "__main__":
    sys.exit(main())
