"""MIPS code generation for type-checked WLP4 parse trees."""

from __future__ import annotations

import random
import string
from typing import Iterable

from .mips import Emitter
from .parser import Node, ParseError, parse
from .scanner import Token
from .semantics import INT, POINTER, ProcedureTable, SemanticError, collect_procedures

RESERVED_LABELS = frozenset({"print", "init", "new", "delete", "main"})
IMPORTS = ("print", "init", "new", "delete")
LABEL_LENGTH = 10
NULL_VALUE = 1


class CompileError(Exception):
    """Raised when compilation fails; ``stage`` names the failing phase."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(f"ERROR in {stage}: {message}")
        self.stage = stage
        self.message = message


def _strip_parens(lvalue: Node) -> Node:
    while len(lvalue.children) == 3:
        lvalue = lvalue.child("lvalue")
    return lvalue


class CodeGenerator:
    """Emits MIPS assembly for a parsed and annotated WLP4 program."""

    def __init__(
        self,
        procedures: ProcedureTable | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.procedures = procedures if procedures is not None else ProcedureTable()
        self.rng = rng if rng is not None else random.Random()
        self.labels: set[str] = set(RESERVED_LABELS)
        self.function_labels: dict[str, str] = {}
        self.emitter = Emitter()

    def new_label(self) -> str:
        """A fresh random label of lower-case letters, never used before."""
        while True:
            label = "".join(
                self.rng.choice(string.ascii_lowercase) for _ in range(LABEL_LENGTH)
            )
            if label not in self.labels:
                self.labels.add(label)
                return label

    def generate(self, tree: Node) -> str:
        """Assembly for the whole program rooted at ``tree``."""
        self.emitter = Emitter()
        emit = self.emitter
        for name in IMPORTS:
            emit.raw(f".import {name}")
        emit.lis(4)
        emit.word(4)
        emit.beq(0, 0, "main")
        procedures = tree.child("procedures")
        while procedures is not None:
            procedure = procedures.child("procedure")
            if procedure is None:
                procedure = procedures.child("main")
            self.procedure(procedure)
            procedures = procedures.child("procedures")
        return emit.text()

    def _call(self, routine: str) -> None:
        emit = self.emitter
        emit.push(31)
        emit.lis(31)
        emit.word(routine)
        emit.jalr(31)
        emit.pop(31)

    def procedure(self, node: Node) -> None:
        """Emit one ``procedure`` or ``main`` node."""
        emit = self.emitter
        offsets: dict[str, int] = {}
        local_count = 0

        if node.name() == "procedure":
            name = node.child("ID").token.value
            if name in self.labels:
                label = self.new_label()
            else:
                self.labels.add(name)
                label = name
            self.function_labels.setdefault(name, label)
            emit.label(self.function_labels[name])

            names = []
            paramlist = node.child("params").child("paramlist")
            while paramlist is not None:
                names.append(paramlist.child("dcl").child("ID").token.value)
                paramlist = paramlist.child("paramlist")
            for index, param in enumerate(names):
                offsets.setdefault(param, 4 * (len(names) - index))
            emit.sub(29, 30, 4)
        else:
            emit.label("main")
            first, second = node.child("dcl", 1), node.child("dcl", 2)
            if first.type == POINTER:
                self._call("init")
            else:
                emit.push(2)
                emit.lis(2)
                emit.word(0)
                self._call("init")
                emit.pop(2)
            offsets.setdefault(first.child("ID").token.value, 8)
            emit.push(1)
            offsets.setdefault(second.child("ID").token.value, 4)
            emit.push(2)
            local_count = 2
            emit.sub(29, 30, 4)

        initialised: list[tuple[str, int]] = []
        dcls = node.child("dcls")
        while dcls is not None:
            dcl = dcls.child("dcl")
            if dcl is not None:
                var_name = dcl.child("ID").token.value
                num = dcls.child("NUM")
                if num is not None:
                    initialised.append((var_name, int(num.token.value)))
                elif dcls.child("NULL") is not None:
                    initialised.append((var_name, NULL_VALUE))
            dcls = dcls.child("dcls")

        offset = 0
        for var_name, value in reversed(initialised):
            offsets.setdefault(var_name, offset)
            offset -= 4
            local_count += 1
            emit.lis(3)
            emit.word(value)
            emit.push(3)

        self.node(node.child("statements"), offsets)
        self.node(node.child("expr"), offsets)
        for _ in range(local_count):
            emit.pop()
        emit.jr(31)

    def node(self, node: Node, offsets: dict[str, int]) -> None:
        """Emit code for an expression, statement or test node; result in $3."""
        if node.terminal:
            return
        handler = {
            "expr": self._expr,
            "term": self._term,
            "factor": self._factor,
            "statements": self._statements,
            "statement": self._statement,
            "test": self._test,
        }.get(node.rule.lhs)
        if handler is not None:
            handler(node, offsets)

    def _binary(self, node: Node, left: Node, right: Node, offsets: dict[str, int]) -> None:
        emit = self.emitter
        emit.push(5)
        self.node(left, offsets)
        emit.push(3)
        self.node(right, offsets)
        emit.pop(5)

    def _expr(self, node: Node, offsets: dict[str, int]) -> None:
        emit = self.emitter
        expression = node.child("expr")
        term = node.child("term")
        if len(node.rule.rhs) <= 1:
            if term is None:
                raise CompileError("code generation", "expression must have at least one term")
            self.node(term, offsets)
            return
        operation = node.child("PLUS") or node.child("MINUS")
        op = operation.token.type
        self._binary(node, expression, term, offsets)
        combine = emit.add if op == "PLUS" else emit.sub
        kinds = (expression.type, term.type)
        if kinds == (INT, INT):
            combine(3, 5, 3)
        elif kinds == (POINTER, INT):
            emit.mult(3, 4)
            emit.mflo(3)
            combine(3, 5, 3)
        elif kinds == (INT, POINTER):
            emit.mult(5, 4)
            emit.mflo(5)
            combine(3, 5, 3)
        elif kinds == (POINTER, POINTER):
            if op != "MINUS":
                raise CompileError("code generation", "cannot add two int*'s")
            emit.sub(3, 5, 3)
            emit.div(3, 4)
            emit.mflo(3)
        emit.pop(5)

    def _term(self, node: Node, offsets: dict[str, int]) -> None:
        emit = self.emitter
        term = node.child("term")
        factor = node.child("factor")
        if len(node.rule.rhs) <= 1:
            if factor is not None:
                self.node(factor, offsets)
            return
        op = node.children[1].token.type
        self._binary(node, term, factor, offsets)
        if op == "STAR":
            emit.mult(5, 3)
            emit.mflo(3)
        elif op == "SLASH":
            emit.div(5, 3)
            emit.mflo(3)
        elif op == "PCT":
            emit.div(5, 3)
            emit.mfhi(3)
        emit.pop(5)

    def _function_label(self, name: str) -> str:
        try:
            return self.function_labels[name]
        except KeyError:
            raise CompileError("code generation", f"unknown procedure {name}") from None

    def _factor(self, node: Node, offsets: dict[str, int]) -> None:
        emit = self.emitter
        rhs = node.rule.rhs
        if rhs == ("ID",):
            emit.lw(3, 29, offsets.get(node.child("ID").token.value, 0))
        elif rhs == ("NUM",):
            emit.lis(3)
            emit.word(int(node.child("NUM").token.value))
        elif rhs == ("NULL",):
            emit.lis(3)
            emit.word(NULL_VALUE)
        elif rhs == ("AMP", "lvalue"):
            lvalue = _strip_parens(node.child("lvalue"))
            if len(lvalue.children) == 1:
                emit.lis(3)
                emit.word(offsets.get(lvalue.child("ID").token.value, 0))
                emit.add(3, 29, 3)
            elif len(lvalue.children) == 2:
                self.node(lvalue.child("factor"), offsets)
        elif rhs == ("STAR", "factor"):
            self.node(node.child("factor"), offsets)
            emit.lw(3, 3, 0)
        elif rhs == ("LPAREN", "expr", "RPAREN"):
            self.node(node.child("expr"), offsets)
        elif rhs == ("ID", "LPAREN", "RPAREN"):
            emit.push(29)
            emit.push(31)
            emit.lis(31)
            emit.word(self._function_label(node.child("ID").token.value))
            emit.jalr(31)
            emit.pop(31)
            emit.pop(29)
        elif rhs == ("ID", "LPAREN", "arglist", "RPAREN"):
            emit.push(29)
            emit.push(31)
            count = 0
            arglist = node.child("arglist")
            while arglist is not None:
                self.node(arglist.child("expr"), offsets)
                emit.push(3)
                count += 1
                arglist = arglist.child("arglist")
            emit.lis(31)
            emit.word(self._function_label(node.child("ID").token.value))
            emit.jalr(31)
            for _ in range(count):
                emit.pop()
            emit.pop(31)
            emit.pop(29)
        elif len(rhs) == 5:
            self.node(node.child("expr"), offsets)
            end = self.new_label()
            emit.push(1)
            emit.add(1, 3, 0)
            self._call("new")
            emit.pop(1)
            emit.bne(3, 0, end)
            emit.lis(3)
            emit.word(NULL_VALUE)
            emit.label(end)

    def _statements(self, node: Node, offsets: dict[str, int]) -> None:
        if len(node.rule.rhs) == 2:
            self.node(node.child("statements"), offsets)
            self.node(node.child("statement"), offsets)

    def _statement(self, node: Node, offsets: dict[str, int]) -> None:
        emit = self.emitter
        rhs = node.rule.rhs
        if len(rhs) == 4:
            lvalue = _strip_parens(node.child("lvalue"))
            expr = node.child("expr")
            if len(lvalue.children) == 1:
                offset = offsets.get(lvalue.child("ID").token.value, 0)
                self.node(expr, offsets)
                emit.sw(3, 29, offset)
            elif len(lvalue.children) == 2:
                emit.push(5)
                self.node(lvalue.child("factor"), offsets)
                emit.push(3)
                self.node(expr, offsets)
                emit.pop(5)
                emit.sw(3, 5, 0)
                emit.pop(5)
        elif rhs == ("PRINTLN", "LPAREN", "expr", "RPAREN", "SEMI"):
            self.node(node.child("expr"), offsets)
            emit.push(1)
            emit.add(1, 3, 0)
            self._call("print")
            emit.pop(1)
        elif rhs == ("DELETE", "LBRACK", "RBRACK", "expr", "SEMI"):
            self.node(node.child("expr"), offsets)
            skip = self.new_label()
            emit.push(1)
            emit.lis(1)
            emit.word(NULL_VALUE)
            emit.beq(3, 1, skip)
            emit.add(1, 3, 0)
            self._call("delete")
            emit.label(skip)
            emit.pop(1)
        elif len(rhs) == 7:
            begin = self.new_label()
            end = self.new_label()
            emit.label(begin)
            self.node(node.child("test"), offsets)
            emit.beq(3, 0, end)
            self.node(node.child("statements"), offsets)
            emit.beq(0, 0, begin)
            emit.label(end)
        elif len(rhs) == 11:
            otherwise = self.new_label()
            end = self.new_label()
            self.node(node.child("test"), offsets)
            emit.beq(3, 0, otherwise)
            self.node(node.child("statements"), offsets)
            emit.beq(0, 0, end)
            emit.label(otherwise)
            self.node(node.child("statements", 2), offsets)
            emit.label(end)

    def _test(self, node: Node, offsets: dict[str, int]) -> None:
        emit = self.emitter
        left = node.child("expr")
        right = node.child("expr", 2)
        op = node.children[1].token.type
        emit.push(5)
        self.node(left, offsets)
        emit.push(3)
        self.node(right, offsets)
        emit.pop(5)
        both_int = left.type == INT and right.type == INT
        less = emit.slt if both_int else emit.sltu
        if op in ("EQ", "NE"):
            true_label = self.new_label()
            false_label = self.new_label()
            branch = emit.bne if op == "EQ" else emit.beq
            branch(3, 5, false_label)
            emit.lis(3)
            emit.word(1)
            emit.beq(0, 0, true_label)
            emit.label(false_label)
            emit.add(3, 0, 0)
            emit.label(true_label)
        elif op == "LT":
            less(3, 5, 3)
        elif op == "GT":
            less(3, 3, 5)
        elif op in ("LE", "GE"):
            if op == "LE":
                less(3, 3, 5)
            else:
                less(3, 5, 3)
            emit.lis(5)
            emit.word(1)
            emit.slt(3, 3, 5)
        emit.pop(5)


def compile_tokens(tokens: Iterable[Token]) -> str:
    """Parse, check and compile WLP4 tokens into MIPS assembly text."""
    try:
        tree = parse(tokens)
    except ParseError as err:
        raise CompileError("setup", str(err)) from err

    procedures = ProcedureTable()
    try:
        collect_procedures(tree.child("procedures"), procedures)
    except SemanticError as err:
        raise CompileError("processing", str(err)) from err

    return CodeGenerator(procedures).generate(tree)