from typing import Dict, Any, Optional

from .tokens import Token
from .errors import LoxError

class Environment:
    """
    One lexical scope: its own bindings plus a link to the enclosing scope.
    The interpreter opens one per block and drops it when the block ends;
    the global scope is the only one with no enclosing link.
    """
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.values: Dict[str, Any] = {}
        self.enclosing: Optional['Environment'] = enclosing

    def define(self, name: str, value: Any):
        """Binds `name` here; a second `var` of the same name replaces the first."""
        self.values[name] = value

    def get(self, name: Token) -> Any:
        """Looks `name` up from this scope outwards to the globals."""
        if name.lexeme in self.values:
            return self.values[name.lexeme]

        if self.enclosing is not None:
            return self.enclosing.get(name)

        raise LoxError.at(name, "Undefined variable.")

    def assign(self, name: Token, value: Any):
        # Writes to the innermost scope that already has the name; never creates one.
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
            return

        if self.enclosing is not None:
            self.enclosing.assign(name, value)
            return

        raise LoxError.at(name, "Undefined variable.")
