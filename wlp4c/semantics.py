"""Symbol tables and type checking for WLP4 parse trees."""

from __future__ import annotations

from dataclasses import dataclass, field

from .parser import Node

INT = "int"
POINTER = "int*"

_PLUS_TYPES = {
    (INT, INT): INT,
    (POINTER, INT): POINTER,
    (INT, POINTER): POINTER,
}
_MINUS_TYPES = {
    (INT, INT): INT,
    (POINTER, INT): POINTER,
    (POINTER, POINTER): INT,
}


class SemanticError(ValueError):
    """Raised when a program breaks WLP4's declaration or typing rules."""


@dataclass(frozen=True)
class Variable:
    """A declared variable: its name and type."""

    name: str
    type: str

    @classmethod
    def from_dcl(cls, node: Node) -> Variable:
        """Read a variable from a ``dcl type ID`` node."""
        type_node, id_node = node.children[0], node.children[1]
        kind = INT if len(type_node.children) == 1 else POINTER
        return cls(id_node.token.value, kind)

    def __str__(self) -> str:
        return f"{self.type} {self.name}"


@dataclass
class VariableTable:
    """The variables declared in one procedure, keyed by name."""

    table: dict[str, Variable] = field(default_factory=dict)

    def add(self, variable: Variable) -> None:
        if variable.name in self.table:
            raise SemanticError("duplicate variable declaration")
        self.table[variable.name] = variable

    def get(self, name: str) -> Variable:
        try:
            return self.table[name]
        except KeyError:
            raise SemanticError("use of undeclared variable") from None

    def __contains__(self, name: object) -> bool:
        return name in self.table

    def __str__(self) -> str:
        lines = "".join(
            f"{name} : {self.table[name]}\n" for name in sorted(self.table)
        )
        return "VARIABLES:\n" + lines


@dataclass
class Procedure:
    """A procedure's name, parameter types and local symbol table."""

    name: str
    signature: list[str] = field(default_factory=list)
    symbol_table: VariableTable = field(default_factory=VariableTable)

    @classmethod
    def from_node(cls, node: Node) -> Procedure:
        """Build a procedure from a ``procedure`` or ``main`` node."""
        local_dcls = declarations(node.child("dcls"))
        if node.name() == "procedure":
            params = declarations(node.child("params", 1))
        else:
            params = [node.child("dcl", 1), node.child("dcl", 2)]
            if len(params[1].children[0].children) != 1:
                raise SemanticError("main invalid second parameter declaration")

        procedure = cls(node.children[1].token.value)
        for param in params:
            variable = Variable.from_dcl(param)
            procedure.symbol_table.add(variable)
            procedure.signature.append(variable.type)
        for dcl in local_dcls:
            procedure.symbol_table.add(Variable.from_dcl(dcl))
        return procedure

    def __str__(self) -> str:
        signature = "".join(f"{kind} " for kind in self.signature)
        table = self.symbol_table.table
        decls = "".join(f"    {name} : {table[name]}\n" for name in sorted(table))
        return (
            f"Procedure {self.name}:\n"
            f"  Signature: {signature}\n"
            f"  Declarations:\n{decls}"
        )


@dataclass
class ProcedureTable:
    """All procedures of a program, keyed by name."""

    table: dict[str, Procedure] = field(default_factory=dict)

    def add(self, procedure: Procedure) -> None:
        if procedure.name in self.table:
            raise SemanticError("duplicate procedure declaration")
        self.table[procedure.name] = procedure

    def get(self, name: str) -> Procedure:
        try:
            return self.table[name]
        except KeyError:
            raise SemanticError("use of undeclared procedure") from None

    def __str__(self) -> str:
        entries = "".join(
            f"{name} : {self.table[name]}" for name in sorted(self.table)
        )
        return "PROCEDURES:\n" + entries


def _check_call(node: Node, procedures: ProcedureTable, variables: VariableTable) -> Procedure:
    name = node.children[0].token.value
    if name in variables:
        raise SemanticError("function call on local variable")
    return procedures.get(name)


def _annotate_expr(node: Node, rhs: tuple[str, ...]) -> None:
    kids = node.children
    if rhs == ("term",):
        node.type = kids[0].type
    elif rhs == ("expr", "PLUS", "term"):
        result = _PLUS_TYPES.get((kids[0].type, kids[2].type))
        if result is None:
            raise SemanticError("expr 'PLUS' derived type error")
        node.type = result
    elif rhs == ("expr", "MINUS", "term"):
        result = _MINUS_TYPES.get((kids[0].type, kids[2].type))
        if result is None:
            raise SemanticError("expr 'PLUS' derived type error")
        node.type = result


def _annotate_term(node: Node, rhs: tuple[str, ...]) -> None:
    kids = node.children
    if rhs == ("factor",):
        node.type = kids[0].type
    elif len(rhs) == 3:
        node.type = INT
        if kids[0].type != INT or kids[2].type != INT:
            raise SemanticError("invalid term or factor in term expression")


def _annotate_factor(
    node: Node,
    rhs: tuple[str, ...],
    procedures: ProcedureTable,
    variables: VariableTable,
) -> None:
    kids = node.children
    if rhs == ("ID",):
        node.type = variables.get(kids[0].token.value).type
    elif rhs == ("NUM",):
        node.type = INT
    elif rhs == ("NULL",):
        node.type = POINTER
    elif rhs == ("AMP", "lvalue"):
        node.type = POINTER
        if kids[1].type != INT:
            raise SemanticError("invalid '&' address retrieval")
    elif rhs == ("STAR", "factor"):
        node.type = INT
        if kids[1].type != POINTER:
            raise SemanticError("invalid '*' address retrieval")
    elif rhs == ("LPAREN", "expr", "RPAREN"):
        node.type = kids[1].type
    elif rhs == ("ID", "LPAREN", "RPAREN"):
        procedure = _check_call(node, procedures, variables)
        if procedure.signature:
            raise SemanticError("invalid parameters")
        node.type = INT
    elif rhs == ("ID", "LPAREN", "arglist", "RPAREN"):
        procedure = _check_call(node, procedures, variables)
        given = arg_types(kids[2])
        if len(procedure.signature) != len(given):
            raise SemanticError("invalid parameters incorrect amount")
        if any(a != b for a, b in zip(given, procedure.signature)):
            raise SemanticError("invalid parameters incorrect types")
        node.type = INT
    elif rhs == ("NEW", "INT", "LBRACK", "expr", "RBRACK"):
        node.type = POINTER
        if kids[3].type != INT:
            raise SemanticError("invalid 'new' address retrieval")


def _annotate_lvalue(node: Node, rhs: tuple[str, ...], variables: VariableTable) -> None:
    kids = node.children
    if rhs == ("ID",):
        node.type = variables.get(kids[0].token.value).type
    elif rhs == ("STAR", "factor"):
        node.type = INT
        if kids[1].type != POINTER:
            raise SemanticError("invalid '*' address retrieval")
    elif rhs == ("LPAREN", "lvalue", "RPAREN"):
        node.type = kids[1].type


def annotate_types(
    node: Node, procedures: ProcedureTable, variables: VariableTable
) -> None:
    """Set ``type`` on every expression-like node, bottom up, checking as it goes."""
    for child in node.children:
        annotate_types(child, procedures, variables)
    if node.terminal:
        return
    lhs, rhs = node.rule.lhs, node.rule.rhs
    if lhs == "expr":
        _annotate_expr(node, rhs)
    elif lhs == "term":
        _annotate_term(node, rhs)
    elif lhs == "factor":
        _annotate_factor(node, rhs, procedures, variables)
    elif lhs == "lvalue":
        _annotate_lvalue(node, rhs, variables)


def declarations(node: Node) -> list[Node]:
    """The ``dcl`` nodes under a node, checking initialiser types of ``dcls``."""
    if node.terminal:
        return []
    rule = node.rule
    if rule.lhs == "dcls" and rule.rhs:
        found = declarations(node.children[1])
        if found:
            type_size = len(found[0].children[0].children)
            initialiser = rule.rhs[3]
            if (type_size == 1 and initialiser == "NULL") or (
                type_size == 2 and initialiser == "NUM"
            ):
                raise SemanticError("incorrect assignment in declaration")
        return found + declarations(node.children[0])
    if rule.lhs == "dcl":
        return [node]
    return [dcl for child in node.children for dcl in declarations(child)]


def arg_types(node: Node) -> list[str]:
    """The types of the expressions in an argument list, in order."""
    if node.terminal:
        return []
    if node.rule.lhs == "expr":
        return [node.type]
    return [kind for child in node.children for kind in arg_types(child)]


def collect_procedures(node: Node, procedures: ProcedureTable) -> None:
    """Record and type-check every procedure under a ``procedures`` node."""
    if node.terminal:
        return
    if node.rule.lhs in ("procedure", "main"):
        procedure = Procedure.from_node(node)
        procedures.add(procedure)
        annotate_types(node, procedures, procedure.symbol_table)
        check_statements(node)
        if node.child("expr").type != INT:
            raise SemanticError(
                "expression derived from procedure/main must return int"
            )
    elif node.rule.lhs == "procedures":
        for child in node.children:
            collect_procedures(child, procedures)


def check_statements(node: Node) -> None:
    """Check the types used by statements and tests under an annotated node."""
    if not node.terminal:
        lhs, rhs, kids = node.rule.lhs, node.rule.rhs, node.children
        if lhs == "statement":
            if rhs == ("lvalue", "BECOMES", "expr", "SEMI"):
                if kids[0].type != kids[2].type:
                    raise SemanticError(
                        "lvalue and expression must have the same type"
                    )
            elif rhs == ("PRINTLN", "LPAREN", "expr", "RPAREN", "SEMI"):
                if kids[2].type != INT:
                    raise SemanticError(
                        "expression derived from PRINTLN must be of type int"
                    )
            elif rhs == ("DELETE", "LBRACK", "RBRACK", "expr", "SEMI"):
                if kids[3].type != POINTER:
                    raise SemanticError(
                        "expression derived from DELETE must be of type int*"
                    )
        elif lhs == "test" and len(rhs) == 3 and rhs[0] == "expr" and rhs[2] == "expr":
            if kids[0].type != kids[2].type:
                raise SemanticError(
                    "expression derived from test must have the same type"
                )
    for child in node.children:
        check_statements(child)


def find_node(node: Node, name: str) -> Node | None:
    """The first node named ``name`` in preorder, or None."""
    if node.name() == name:
        return node
    if node.terminal:
        return None
    for child in node.children:
        found = find_node(child, name)
        if found is not None:
            return found
    return None