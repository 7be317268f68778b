"""
Abstract Syntax Tree node definitions for Kaleidoscope.

The node set is closed and small: four expression kinds, prototypes,
function definitions and the program that holds them. Nodes are frozen
dataclasses that exclusively own their children (no parent pointers, no
sharing), so a tree never changes once the parser has built it.

Each node carries an optional source span that is ignored by equality,
which lets tests compare parsed trees against hand-built ones.

Author: xwest
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional, Tuple, Union

from ..lexer.tokens import SourceLocation, KEYWORDS


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    # Top-level
    PROGRAM = "Program"
    FUNCTION = "Function"
    PROTOTYPE = "Prototype"

    # Expressions
    NUMBER_EXPR = "NumberExpr"
    VARIABLE_EXPR = "VariableExpr"
    BINARY_EXPR = "BinaryExpr"
    CALL_EXPR = "CallExpr"


# Name given to the prototype that wraps a top-level expression
ANONYMOUS_FUNCTION_NAME = ""


@dataclass(frozen=True)
class SourceSpan:
    """Represents a span of source code (start and end locations)."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename == self.end.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start}-{self.end}"


def is_valid_identifier(name: str) -> bool:
    """Check that ``name`` is something the lexer would produce as an IDENTIFIER."""
    return (
        isinstance(name, str)
        and name[:1].isalpha()
        and name.isalnum()
        and name not in KEYWORDS
    )


class ASTVisitor:
    """
    Visitor base class.

    ``visit`` dispatches to ``visit_<ClassName>``; node types without a
    handler go to ``generic_visit``.
    """

    def visit(self, node: 'ASTNode') -> Any:
        method = getattr(self, f"visit_{type(node).__name__}", None)
        if method is None:
            return self.generic_visit(node)
        return method(node)

    def generic_visit(self, node: 'ASTNode') -> Any:
        raise NotImplementedError(
            f"{type(self).__name__} has no handler for {type(node).__name__}"
        )


class ASTNode:
    """Base class for all AST nodes."""

    node_type: ClassVar[ASTNodeType]

    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    def children(self) -> Tuple['ASTNode', ...]:
        """Get all child nodes."""
        return ()

    def __str__(self) -> str:
        return ASTPrinter().visit(self)


# ============================================================================
# Expressions
# ============================================================================

@dataclass(frozen=True)
class NumberExpr(ASTNode):
    """Numeric literal, e.g. ``1.0``."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.NUMBER_EXPR

    value: float
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class VariableExpr(ASTNode):
    """Reference to a variable; resolution happens in a later stage."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.VARIABLE_EXPR

    name: str
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class BinaryExpr(ASTNode):
    """Binary operation expression."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.BINARY_EXPR

    operator: str
    left: 'Expression'
    right: 'Expression'
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        for side in (self.left, self.right):
            if not isinstance(side, EXPRESSION_TYPES):
                raise TypeError(f"BinaryExpr operand must be an expression, got {side!r}")

    def children(self) -> Tuple[ASTNode, ...]:
        return (self.left, self.right)


@dataclass(frozen=True)
class CallExpr(ASTNode):
    """Function call expression. ``args`` is always a tuple."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.CALL_EXPR

    callee: str
    args: Tuple['Expression', ...] = ()
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        args = tuple(self.args)
        for arg in args:
            if not isinstance(arg, EXPRESSION_TYPES):
                raise TypeError(f"CallExpr argument must be an expression, got {arg!r}")
        object.__setattr__(self, "args", args)

    def children(self) -> Tuple[ASTNode, ...]:
        return self.args


Expression = Union[NumberExpr, VariableExpr, BinaryExpr, CallExpr]
EXPRESSION_TYPES = (NumberExpr, VariableExpr, BinaryExpr, CallExpr)


# ============================================================================
# Top-level nodes
# ============================================================================

@dataclass(frozen=True)
class Prototype(ASTNode):
    """
    A function's name and parameter names.

    Used on its own for ``extern`` declarations and as the head of a
    ``def``. Parameter names are distinct valid identifiers.
    """
    node_type: ClassVar[ASTNodeType] = ASTNodeType.PROTOTYPE

    name: str
    params: Tuple[str, ...] = ()
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        params = tuple(self.params)
        if self.name != ANONYMOUS_FUNCTION_NAME and not is_valid_identifier(self.name):
            raise ValueError(f"Invalid function name: {self.name!r}")
        seen = set()
        for param in params:
            if not is_valid_identifier(param):
                raise ValueError(f"Invalid parameter name: {param!r}")
            if param in seen:
                raise ValueError(f"Duplicate parameter name: {param!r}")
            seen.add(param)
        object.__setattr__(self, "params", params)

    @property
    def arity(self) -> int:
        return len(self.params)

    @property
    def is_anonymous(self) -> bool:
        return self.name == ANONYMOUS_FUNCTION_NAME


@dataclass(frozen=True)
class Function(ASTNode):
    """Function definition: a prototype and a body expression."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.FUNCTION

    prototype: Prototype
    body: Expression
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if not isinstance(self.prototype, Prototype):
            raise TypeError(f"Function prototype must be a Prototype, got {self.prototype!r}")
        if not isinstance(self.body, EXPRESSION_TYPES):
            raise TypeError(f"Function body must be an expression, got {self.body!r}")

    @property
    def name(self) -> str:
        return self.prototype.name

    @property
    def is_anonymous(self) -> bool:
        return self.prototype.is_anonymous

    def children(self) -> Tuple[ASTNode, ...]:
        return (self.prototype, self.body)


TopLevelItem = Union[Function, Prototype]


@dataclass(frozen=True)
class Program(ASTNode):
    """Root node: every top-level item of a source text, in order."""
    node_type: ClassVar[ASTNodeType] = ASTNodeType.PROGRAM

    items: Tuple[TopLevelItem, ...] = ()
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))

    def children(self) -> Tuple[ASTNode, ...]:
        return self.items

    @property
    def functions(self) -> Tuple[Function, ...]:
        return tuple(item for item in self.items if isinstance(item, Function))

    @property
    def externs(self) -> Tuple[Prototype, ...]:
        return tuple(item for item in self.items if isinstance(item, Prototype))


# ============================================================================
# Printing
# ============================================================================

class ASTPrinter(ASTVisitor):
    """
    Renders a tree as an S-expression, e.g. ``(def (f x) (+ x 1.0))``.

    Top-level prototypes inside a Program print as ``(extern (f x))``.
    """

    def visit_NumberExpr(self, node: NumberExpr) -> str:
        return repr(node.value)

    def visit_VariableExpr(self, node: VariableExpr) -> str:
        return node.name

    def visit_BinaryExpr(self, node: BinaryExpr) -> str:
        return f"({node.operator} {self.visit(node.left)} {self.visit(node.right)})"

    def visit_CallExpr(self, node: CallExpr) -> str:
        parts = ["call", node.callee] + [self.visit(arg) for arg in node.args]
        return "(" + " ".join(parts) + ")"

    def visit_Prototype(self, node: Prototype) -> str:
        return "(" + " ".join((node.name,) + node.params).strip() + ")"

    def visit_Function(self, node: Function) -> str:
        return f"(def {self.visit(node.prototype)} {self.visit(node.body)})"

    def visit_Program(self, node: Program) -> str:
        lines = []
        for item in node.items:
            if isinstance(item, Prototype):
                lines.append(f"(extern {self.visit(item)})")
            else:
                lines.append(self.visit(item))
        return "\n".join(lines)
