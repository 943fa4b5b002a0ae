"""SLR(1) parsing of a token stream into a parse tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .grammar import ParseTable, Rule, wlp4_rules, wlp4_table
from .scanner import Token


class ParseError(ValueError):
    """Raised when the token stream does not fit the grammar."""


@dataclass(eq=False)
class Node:
    """A parse tree node: a rule with children, or a token leaf."""

    rule: Rule | None = None
    token: Token | None = None
    children: list[Node] = field(default_factory=list)
    type: str = ""

    @property
    def terminal(self) -> bool:
        return self.token is not None

    def name(self) -> str:
        """The rule's left-hand symbol, or the token's kind for a leaf."""
        if self.token is not None:
            return self.token.type
        assert self.rule is not None
        return self.rule.lhs

    def child(self, name: str, n: int = 1) -> Node | None:
        """The ``n``-th child named ``name``, counting from 1, or None."""
        matches = (child for child in self.children if child.name() == name)
        for index, child in enumerate(matches, start=1):
            if index == n:
                return child
        return None

    def _line(self) -> str:
        if self.token is not None:
            return f"{self.token.type} {self.token.value}\n"
        return f"{self.rule}\n"

    def format(self) -> str:
        """The tree in preorder, one rule or token per line."""
        return self._line() + "".join(child.format() for child in self.children)

    def debug_format(self, prefix: str = "") -> str:
        """The tree drawn with box-drawing branches."""
        parts = [self._line()]
        last = len(self.children) - 1
        for index, child in enumerate(self.children):
            if index == last:
                parts.append(prefix + "╰─" + child.debug_format(prefix + "  "))
            else:
                parts.append(prefix + "├─" + child.debug_format(prefix + "│ "))
        return "".join(parts)


def _reduce(trees: list[Node], states: list[int], rule: Rule, table: ParseTable) -> None:
    count = len(rule.rhs)
    split = len(trees) - count
    children = trees[split:]
    del trees[split:]
    trees.append(Node(rule=rule, children=children))

    del states[len(states) - count :]
    target = table.transitions.get((states[-1], rule.lhs))
    if target is None:
        raise ParseError(f"No transition on {rule.lhs}")
    states.append(target)


def parse(
    tokens: Iterable[Token],
    rules: Sequence[Rule] | None = None,
    table: ParseTable | None = None,
) -> Node:
    """Parse tokens, wrapped in BOF and EOF, into a tree rooted at rule 0."""
    rules = wlp4_rules() if rules is None else rules
    table = wlp4_table() if table is None else table

    stream = [Token("BOF", "BOF"), *tokens, Token("EOF", "EOF")]
    trees: list[Node] = []
    states = [0]

    for token in stream:
        while (rule_no := table.reductions.get((states[-1], token.type))) is not None:
            rule = rules[rule_no]
            trees_len = len(trees)
            if len(rule.rhs) > trees_len:
                raise ParseError("Reduction longer than the stack")
            _reduce(trees, states, rule, table)
        target = table.transitions.get((states[-1], token.type))
        if target is None:
            raise ParseError("No next transition")
        trees.append(Node(token=token))
        states.append(target)

    start = rules[0]
    count = len(start.rhs)
    split = len(trees) - count
    children = trees[split:]
    del trees[split:]
    trees.append(Node(rule=start, children=children))
    return trees[0]