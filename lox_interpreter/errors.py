from .tokens import Token, TokenType

class LoxError(Exception):
    """
    The one error kind shared by the lexer, the parser and the interpreter.
    Only the message text tells a syntax error apart from a runtime error.
    """
    def __init__(self, line: int, where: str, message: str):
        self.line = line
        self.where = where
        self.message = message
        super().__init__(str(self))

    @classmethod
    def at(cls, token: Token, message: str) -> 'LoxError':
        """Builds an error located at a token."""
        if token.token_type == TokenType.EOF:
            return cls(token.line, " at end ", message)
        return cls(token.line, f" at '{token.lexeme}' ", message)

    def __str__(self) -> str:
        return f"[line {self.line}] Error {self.where}: {self.message}"
