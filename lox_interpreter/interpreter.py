import math
from decimal import Decimal
from typing import List, Any, Optional, TextIO

from . import ast_nodes as ast
from .tokens import Token, TokenType
from .errors import LoxError
from .environment import Environment


def stringify(value: Any) -> str:
    """Returns the display form of a runtime value, as `print` writes it."""
    if value is None: return "nil"
    if isinstance(value, bool): return "true" if value else "false"
    if isinstance(value, float): return _format_number(value)
    return str(value)


def _format_number(value: float) -> str:
    if math.isnan(value): return "NaN"
    if math.isinf(value): return "inf" if value > 0 else "-inf"
    if value == 0 and math.copysign(1.0, value) < 0:
        return "-0"
    # Shortest round-trip digits, never in exponent notation.
    text = format(Decimal(repr(value)), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


class Interpreter(ast.ExprVisitor, ast.StmtVisitor):
    """
    The Interpreter walks the AST and executes the code.
    """
    def __init__(self, output: Optional[TextIO] = None):
        self.globals = Environment()
        self.environment = self.globals
        # None means "whatever sys.stdout is when print runs".
        self.output = output

    def interpret(self, statements: List[ast.Stmt]) -> Optional[LoxError]:
        """
        The main entry point for the interpreter. The first runtime error stops
        the program and is returned; None means every statement ran.
        """
        try:
            for statement in statements:
                self._execute(statement)
        except LoxError as error:
            return error
        except RecursionError:
            # Nesting with no operator token to point at, e.g. bare groupings.
            return LoxError(0, "", "Expression nesting too deep.")
        return None

    def _execute(self, stmt: ast.Stmt):
        """Helper to execute a single statement."""
        stmt.accept(self)

    def _evaluate(self, expr: ast.Expr) -> Any:
        """Helper to evaluate a single expression."""
        return expr.accept(self)

    def _evaluate_operand(self, operator: Token, expr: ast.Expr) -> Any:
        """
        Evaluates an operand, reporting a too-deep expression at the operator
        closest to where the stack ran out.
        """
        try:
            return self._evaluate(expr)
        except RecursionError:
            raise LoxError.at(operator, "Expression nesting too deep.") from None

    # --- STATEMENT VISITOR METHODS ---

    def visit_print_stmt(self, stmt: ast.Print):
        value = self._evaluate(stmt.expression)
        print(stringify(value), file=self.output)
        return None

    def visit_expression_stmt(self, stmt: ast.Expression):
        self._evaluate(stmt.expression)
        return None

    def visit_var_stmt(self, stmt: ast.Var):
        value = None
        if stmt.initializer is not None:
            value = self._evaluate(stmt.initializer)

        self.environment.define(stmt.name.lexeme, value)
        return None

    def visit_block_stmt(self, stmt: ast.Block):
        self._execute_block(stmt.statements, Environment(self.environment))
        return None

    def visit_if_stmt(self, stmt: ast.If):
        if self._is_truthy(self._evaluate(stmt.condition)):
            self._execute(stmt.then_branch)
        elif stmt.else_branch is not None:
            self._execute(stmt.else_branch)
        return None

    def visit_while_stmt(self, stmt: ast.While):
        while self._is_truthy(self._evaluate(stmt.condition)):
            self._execute(stmt.body)
        return None

    def _execute_block(self, statements: List[ast.Stmt], environment: Environment):
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                self._execute(statement)
        finally:
            self.environment = previous

    # --- HELPER METHODS FOR RUNTIME CHECKS ---

    def _is_truthy(self, obj: Any) -> bool:
        """Only nil and false are falsey; 0 and "" are true."""
        if obj is None: return False
        if isinstance(obj, bool): return obj
        return True

    def _is_number(self, obj: Any) -> bool:
        return isinstance(obj, float)

    def _divide(self, left: float, right: float) -> float:
        try:
            return left / right
        except ZeroDivisionError:
            # IEEE-754: the signs of both operands pick the infinity.
            if left == 0 or math.isnan(left):
                return math.nan
            return math.copysign(math.inf, left) * math.copysign(1.0, right)

    def _number_operation(self, operator: Token, left: float, right: float) -> Any:
        op_type = operator.token_type

        if op_type == TokenType.PLUS: return left + right
        if op_type == TokenType.MINUS: return left - right
        if op_type == TokenType.STAR: return left * right
        if op_type == TokenType.SLASH: return self._divide(left, right)

        if op_type == TokenType.GREATER: return left > right
        if op_type == TokenType.GREATER_EQUAL: return left >= right
        if op_type == TokenType.LESS: return left < right
        if op_type == TokenType.LESS_EQUAL: return left <= right

        if op_type == TokenType.EQUAL_EQUAL: return left == right
        if op_type == TokenType.BANG_EQUAL: return left != right

        # Should be unreachable.
        raise LoxError.at(operator, "Unexpected combination.")

    def _string_operation(self, operator: Token, left: str, right: str) -> Any:
        op_type = operator.token_type

        if op_type == TokenType.PLUS: return left + right
        if op_type == TokenType.EQUAL_EQUAL: return left == right
        if op_type == TokenType.BANG_EQUAL: return left != right

        raise LoxError.at(operator, "Operands must be two numbers or two strings.")

    # --- EXPRESSION VISITOR METHODS ---

    def visit_binary_expr(self, expr: ast.Binary):
        operator = expr.operator
        left = self._evaluate_operand(operator, expr.left)
        right = self._evaluate_operand(operator, expr.right)

        if self._is_number(left) and self._is_number(right):
            return self._number_operation(operator, left, right)

        if isinstance(left, str) and isinstance(right, str):
            return self._string_operation(operator, left, right)

        if (isinstance(left, str) and self._is_number(right)) or (self._is_number(left) and isinstance(right, str)):
            if operator.token_type == TokenType.PLUS:
                return stringify(left) + stringify(right)
            raise LoxError.at(operator, "Strings and numbers can only be concatenated.")

        raise LoxError.at(operator, "Unexpected combination.")

    def visit_grouping_expr(self, expr: ast.Grouping):
        return self._evaluate(expr.expression)

    def visit_literal_expr(self, expr: ast.Literal):
        return expr.value

    def visit_unary_expr(self, expr: ast.Unary):
        right = self._evaluate_operand(expr.operator, expr.right)
        op_type = expr.operator.token_type

        if op_type == TokenType.MINUS:
            # Negating anything but a number quietly yields nil.
            if self._is_number(right):
                return -right
            return None
        if op_type == TokenType.BANG:
            return not self._is_truthy(right)

        # Should be unreachable.
        return None

    def visit_variable_expr(self, expr: ast.Variable):
        return self.environment.get(expr.name)

    def visit_assign_expr(self, expr: ast.Assign):
        value = self._evaluate_operand(expr.name, expr.value)
        self.environment.assign(expr.name, value)
        return value

    def visit_logical_expr(self, expr: ast.Logical):
        left = self._evaluate_operand(expr.operator, expr.left)

        if expr.operator.token_type == TokenType.OR:
            if self._is_truthy(left):
                return left
        else: # AND
            if not self._is_truthy(left):
                return left

        return self._evaluate_operand(expr.operator, expr.right)
