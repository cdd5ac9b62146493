from .lox import Lox, RunResult, main
from .errors import LoxError
