# FormulaEngine.py
"""
Formula compiler for the function grapher.

Pipeline
--------
1) Preprocessor: applies the user-facing shorthand rules (first 'y=', '2x',
   '-x') and strips every character outside the arithmetic whitelist.
2) Tokenizer: converts the prepared string into a flat list of tokens.
3) Parser (AST): builds an expression tree (recursive-descent, precedence aware).
4) Compiler: wraps the tree into a callable of the single variable 'x' and
   evaluates it once at x = 0.

The tree is evaluated with IEEE float semantics, so a compiled formula never
raises for numeric input: poles and domain violations come back as inf/NaN.
"""

import logging
import math
import re

from . import error as E

logger = logging.getLogger(__name__)

VARIABLE = "x"

# Supported operators (kept as simple lists for quick membership checks)
Operations = ["+", "-", "*", "/", "**"]
Separators = ["(", ")", ","]
Digits = "0123456789"

# Evaluation recurses once per tree level
MAX_TREE_DEPTH = 200

_DIGIT_BEFORE_VARIABLE = re.compile(r"(\d)x")
_NEGATIVE_SQUARE = re.compile(r"-x\^2")
_NEGATIVE_VARIABLE = re.compile(r"-x(?!\^)")
_NOT_WHITELISTED = re.compile(r"[^x\s0-9+\-*/().,^]")


# -----------------------------
# IEEE helpers
# -----------------------------

def is_odd_integer(value):
    """Return True if the float holds an odd integral value."""
    return math.isfinite(value) and value.is_integer() and value % 2 == 1


def divide(left_value, right_value):
    """Float division that yields inf/NaN instead of raising on zero."""
    if right_value == 0:
        if left_value == 0 or math.isnan(left_value):
            return math.nan
        return math.copysign(math.inf, left_value) * math.copysign(1.0, right_value)
    try:
        return left_value / right_value
    except OverflowError:
        return math.copysign(math.inf, left_value) * math.copysign(1.0, right_value)


def power(base, exponent):
    """Float exponentiation that yields inf/NaN instead of raising or going complex."""
    if math.isnan(exponent):
        return math.nan
    if abs(base) == 1 and math.isinf(exponent):
        return math.nan
    try:
        result = base ** exponent
    except ZeroDivisionError:
        # 0 ** negative
        if is_odd_integer(exponent):
            return math.copysign(math.inf, base)
        return math.inf
    except OverflowError:
        if base < 0 and is_odd_integer(exponent):
            return -math.inf
        return math.inf

    # Negative base with a fractional exponent leaves the reals
    if isinstance(result, complex):
        return math.nan
    return result


# -----------------------------
# AST node types
# -----------------------------

class Constant:
    """AST node for a numeric literal."""
    def __init__(self, value):
        self.value = float(value)

    def evaluate(self, x):
        return self.value

    def __repr__(self):
        return f"Constant({self.value!r})"


class Variable:
    """AST node for the formula variable."""
    def __init__(self, name=VARIABLE):
        self.name = name

    def evaluate(self, x):
        return x

    def __repr__(self):
        return f"Variable('{self.name}')"


class UnaryMinus:
    """AST node negating its operand."""
    def __init__(self, operand):
        self.operand = operand

    def evaluate(self, x):
        return -self.operand.evaluate(x)

    def __repr__(self):
        return f"UnaryMinus({self.operand})"


class BinaryOp:
    """AST node for a binary operation: left <operator> right."""
    def __init__(self, left, operator, right):
        if operator not in Operations:
            raise E.FormulaSyntaxError(f"Unknown operator: {operator}", code="3008")
        self.left = left
        self.operator = operator
        self.right = right

    def evaluate(self, x):
        left_value = self.left.evaluate(x)
        right_value = self.right.evaluate(x)

        if self.operator == '+':
            return left_value + right_value
        elif self.operator == '-':
            return left_value - right_value
        elif self.operator == '*':
            return left_value * right_value
        elif self.operator == '/':
            return divide(left_value, right_value)
        else:
            return power(left_value, right_value)

    def __repr__(self):
        return f"BinaryOp({self.operator!r}, left={self.left}, right={self.right})"


# -----------------------------
# Preprocessor
# -----------------------------

def prepare_formula(formula):
    """Apply the shorthand rules and the character whitelist.

    'y=3x-5' -> '3*x-5', '-x^2' -> '-1*x**2', '2x+1' -> '2*x+1'.
    """
    # Only the first 'y=' goes, wherever it sits ('2y=x' -> '2x')
    processed = formula.replace("y=", "", 1)

    processed = _DIGIT_BEFORE_VARIABLE.sub(r"\1*x", processed)
    processed = _NEGATIVE_SQUARE.sub("-1*x^2", processed)
    processed = _NEGATIVE_VARIABLE.sub("-1*x", processed)

    processed = _NOT_WHITELISTED.sub("", processed)
    return processed.replace("^", "**")


# -----------------------------
# Tokenizer
# -----------------------------

def translator(formula):
    """Convert a prepared formula into a token list (floats, operators, parens, 'x').

    No implicit multiplication is inserted here; '2x' is handled by the
    preprocessor and every other juxtaposition is a syntax error in the parser.
    """
    tokens = []
    b = 0

    while b < len(formula):
        current_char = formula[b]

        # --- Numbers: digits and decimal separator ---
        if current_char in Digits or current_char == ".":
            str_number = current_char
            has_point = current_char == "."

            while b + 1 < len(formula) and (formula[b + 1] in Digits or formula[b + 1] == "."):
                if formula[b + 1] == ".":
                    if has_point:
                        raise E.FormulaSyntaxError("Double decimal point.", code="3002", formula=formula)
                    has_point = True
                b += 1
                str_number += formula[b]

            if str_number == ".":
                raise E.FormulaSyntaxError("Lone decimal point.", code="3005", formula=formula)
            tokens.append(float(str_number))

        # --- Exponentiation (two characters) ---
        elif formula.startswith("**", b):
            tokens.append("**")
            b += 1

        # --- Operators ---
        elif current_char in Operations:
            tokens.append(current_char)

        # --- Parentheses and comma ---
        elif current_char in Separators:
            tokens.append(current_char)

        elif current_char == VARIABLE:
            tokens.append(VARIABLE)

        # --- Whitespace (ignored) ---
        elif current_char.isspace():
            pass

        else:
            raise E.FormulaSyntaxError(f"Unexpected token: {current_char}", code="3004", formula=formula)

        b += 1

    return tokens


# -----------------------------
# Tree depth
# -----------------------------

def tree_depth(tree):
    """Return the number of levels of an expression tree, without recursing."""
    deepest = 0
    pending = [(tree, 1)]
    while pending:
        node, depth = pending.pop()
        deepest = max(deepest, depth)
        if isinstance(node, BinaryOp):
            pending.append((node.left, depth + 1))
            pending.append((node.right, depth + 1))
        elif isinstance(node, UnaryMinus):
            pending.append((node.operand, depth + 1))
    return deepest


# -----------------------------
# Parser (recursive descent)
# -----------------------------

def ast(tokens):
    """Parse a token list into an expression tree.

    Implements precedence via nested functions:
    factor -> power -> unary -> term -> sum -> sequence.
    """
    tokens = list(tokens)
    if not tokens:
        raise E.FormulaSyntaxError("Empty formula.", code="3001")

    def parse_factor(tokens):
        """Numbers, the variable and sub-expressions in '()'."""
        if not tokens:
            raise E.FormulaSyntaxError("Missing Number.", code="3005")
        token = tokens.pop(0)

        if token == "(":
            tree_in_brackets = parse_sequence(tokens)
            if not tokens or tokens.pop(0) != ")":
                raise E.FormulaSyntaxError("Missing closing parenthesis ')'", code="3003")
            return tree_in_brackets
        elif isinstance(token, float):
            return Constant(token)
        elif token == VARIABLE:
            return Variable()
        else:
            raise E.FormulaSyntaxError(f"Unexpected token: {token}", code="3004")

    def parse_power(tokens):
        """Exponentiation, right-associative and tighter than unary minus."""
        base = parse_factor(tokens)
        if tokens and tokens[0] == "**":
            operator = tokens.pop(0)
            if not tokens:
                raise E.FormulaSyntaxError(f"Missing Number after {operator}", code="3006")
            exponent = parse_unary(tokens)
            return BinaryOp(base, operator, exponent)
        return base

    def parse_unary(tokens):
        """Leading '+'/'-'."""
        if tokens and tokens[0] in ("+", "-"):
            operator = tokens.pop(0)
            operand = parse_unary(tokens)
            if operator == "-":
                # -Number -> Number(-value)
                if isinstance(operand, Constant):
                    return Constant(-operand.value)
                return UnaryMinus(operand)
            return operand
        return parse_power(tokens)

    def parse_term(tokens):
        """Multiplication and division."""
        current_tree = parse_unary(tokens)
        while tokens and tokens[0] in ("*", "/"):
            operator = tokens.pop(0)
            right_part = parse_unary(tokens)
            current_tree = BinaryOp(current_tree, operator, right_part)
        return current_tree

    def parse_sum(tokens):
        """Addition and subtraction."""
        current_tree = parse_term(tokens)
        while tokens and tokens[0] in ("+", "-"):
            operator = tokens.pop(0)
            right_side = parse_term(tokens)
            current_tree = BinaryOp(current_tree, operator, right_side)
        return current_tree

    def parse_sequence(tokens):
        """Comma list; the value of the last operand wins ('1,x' -> x)."""
        current_tree = parse_sum(tokens)
        while tokens and tokens[0] == ",":
            tokens.pop(0)
            current_tree = parse_sum(tokens)
        return current_tree

    final_tree = parse_sequence(tokens)

    if tokens:
        # Juxtaposed operands ('x x', '2(x)') or a stray ')'
        raise E.FormulaSyntaxError(f"Unexpected token: {tokens[0]}", code="3004")

    if tree_depth(final_tree) > MAX_TREE_DEPTH:
        raise E.FormulaSyntaxError(f"Formula nested deeper than {MAX_TREE_DEPTH} levels.", code="3007")

    logger.debug("Final AST: %s", final_tree)
    return final_tree


# -----------------------------
# Compiled function
# -----------------------------

class FormulaFunction:
    """Callable of exactly one parameter wrapping a parsed expression tree."""

    def __init__(self, tree, expression):
        self.tree = tree
        self.expression = expression

    def __call__(self, x):
        return self.tree.evaluate(float(x))

    def __repr__(self):
        return f"FormulaFunction({self.expression!r})"


# -----------------------------
# Public entry point
# -----------------------------

def compile_formula(formula):
    """Main API: preprocess -> tokenize -> parse -> trial call at x = 0.

    Raises InvalidFormulaError with a generic message; the actual cause is
    only logged.
    """
    if not isinstance(formula, str):
        raise E.InvalidFormulaError(E.INVALID_FORMULA_MESSAGE, code="3000", formula=formula)

    try:
        processed = prepare_formula(formula)
        logger.debug("Processed formula: %s", processed)
        function = FormulaFunction(ast(translator(processed)), processed)
    except (E.FormulaSyntaxError, ValueError, RecursionError) as e:
        logger.warning("Rejected formula %r: %s", formula, e)
        raise E.InvalidFormulaError(E.INVALID_FORMULA_MESSAGE, code="3000", formula=formula) from None

    try:
        function(0)
    except (ArithmeticError, ValueError, TypeError, RecursionError) as e:
        logger.warning("Formula %r failed at x = 0: %s", formula, e)
        raise E.InvalidFormulaError(E.INVALID_FORMULA_MESSAGE, code="3109", formula=formula) from None

    return function
