"""Lexical analysis of WLP4 source text using a table-driven DFA."""

from __future__ import annotations

import string
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Mapping, NamedTuple, Sequence

STATES = ".STATES"
TRANSITIONS = ".TRANSITIONS"
INPUT = ".INPUT"

MAX_NUM = 2147483647

WLP4_LEXER = r"""
.STATES
start
ID!
ZERO!
invalidnum
NUM!
LPAREN!
RPAREN!
LBRACE!
RBRACE!
LBRACK!
RBRACK!
BECOMES!
PLUS!
MINUS!
STAR!
SLASH!
PCT!
AMP!
COMMA!
SEMI!
LT!
GT!
LE!
GE!
EQ!
not
NE!
?WHITESPACE!
?COMMENT!
.TRANSITIONS
start a-z A-Z     ID
ID    a-z A-Z 0-9 ID
start 0 ZERO
ZERO 0-9 invalidnum
start  1-9 NUM
start  -   MINUS
NUM 0-9 NUM
start ( LPAREN
start ) RPAREN
start { LBRACE
start } RBRACE
start [ LBRACK
start ] RBRACK
start = BECOMES
BECOMES = EQ
start + PLUS
start - MINUS
start * STAR
start / SLASH
SLASH / ?COMMENT
start % PCT
start & AMP
start , COMMA
start ; SEMI
start < LT
LT = LE
start > GT
GT = GE
start ! not
not = NE
start       \s \t \n \r ?WHITESPACE
?WHITESPACE \s \t \n \r ?WHITESPACE
start    ; ?COMMENT
?COMMENT \x00-\x09 \x0B \x0C \x0E-\x7F ?COMMENT
"""

KEYWORDS = {
    "int": "INT",
    "wain": "WAIN",
    "if": "IF",
    "else": "ELSE",
    "while": "WHILE",
    "println": "PRINTLN",
    "return": "RETURN",
    "new": "NEW",
    "delete": "DELETE",
    "NULL": "NULL",
}


class ScanError(ValueError):
    """Raised when the lexer specification or the input cannot be scanned."""


@dataclass(frozen=True)
class Token:
    """A lexical token: its kind and the text it was read from."""

    type: str
    value: str

    def __str__(self) -> str:
        return f"{self.type} {self.value}"


class State(NamedTuple):
    name: str
    accepting: bool


class DFA:
    """A deterministic automaton over characters, starting in ``start``."""

    initial = State("start", False)

    def __init__(
        self,
        states: Mapping[str, bool],
        transitions: Iterable[tuple[str, str, Iterable[str]]],
    ) -> None:
        self.states = dict(states)
        self._transitions: dict[tuple[str, str], State] = {}
        for source, target, chars in transitions:
            target_state = State(target, self.states.get(target, False))
            for char in chars:
                self._transitions.setdefault((source, char), target_state)

    def _lookup(self, state: str, char: str) -> State | None:
        return self._transitions.get((state, char))

    def next_state(self, state: str, char: str) -> State:
        """The state reached from ``state`` on ``char``."""
        found = self._lookup(state, char)
        if found is None:
            raise ScanError("NO TRANSITION TO NEXT STATE")
        return found


def squish(text: str) -> str:
    """Strip the ends and collapse inner runs of whitespace to one space."""
    return " ".join(text.split())


def _is_graph(char: str) -> bool:
    return "!" <= char <= "~"


def hex_to_num(char: str) -> int:
    """The value of one hexadecimal digit."""
    if char and char in string.hexdigits:
        return int(char, 16)
    raise ScanError("Invalid hex digit!")


def hex_to_bin(text: str) -> str:
    """Binary digits for a hex string, four per digit; other characters are skipped."""
    return "".join(
        format(int(char, 16), "04b") for char in text if char in string.hexdigits
    )


def num_to_hex(value: int) -> str:
    """The upper-case hexadecimal digit for a value below 16."""
    return chr(value + ord("0")) if value < 10 else chr(value - 10 + ord("A"))


def escape(text: str) -> str:
    """Turn escape sequences such as ``\\s``, ``\\n`` and ``\\x41`` into characters."""
    out = []
    i = 0
    while i < len(text):
        char = text[i]
        if char == "\\" and i + 1 < len(text):
            i += 1
            code = text[i]
            if code == "s":
                out.append(" ")
            elif code == "n":
                out.append("\n")
            elif code == "r":
                out.append("\r")
            elif code == "t":
                out.append("\t")
            elif code == "x":
                digits = text[i + 1 : i + 3]
                if (
                    i + 2 < len(text)
                    and all(d in string.hexdigits for d in digits)
                ):
                    if hex_to_num(digits[0]) > 8:
                        raise ScanError(
                            f"Invalid escape sequence \\x{digits}: "
                            "not in ASCII range (0x00 to 0x7F)"
                        )
                    out.append(chr(hex_to_num(digits[0]) * 16 + hex_to_num(digits[1])))
                    i += 2
                else:
                    out.append(code)
            else:
                out.append(code)
        else:
            out.append(char)
        i += 1
    return "".join(out)


_UNESCAPES = {" ": "\\s", "\n": "\\n", "\r": "\\r", "\t": "\\t"}


def unescape(text: str) -> str:
    """Write special and unprintable characters as escape sequences."""
    out = []
    for char in text:
        if char in _UNESCAPES:
            out.append(_UNESCAPES[char])
        elif not _is_graph(char):
            code = ord(char) % 256
            out.append("\\x" + num_to_hex(code // 16) + num_to_hex(code % 16))
        else:
            out.append(char)
    return "".join(out)


def parse_dfa(text: str) -> DFA:
    """Build a DFA from a ``.STATES`` / ``.TRANSITIONS`` specification."""
    lines = iter(text.splitlines())

    for line in lines:
        line = squish(line)
        if line == STATES:
            break
        if line:
            raise ScanError(f"Expected {STATES}, but found: {line}")
    else:
        raise ScanError(f"Expected {STATES}, but found end of input.")

    states: dict[str, bool] = {}
    found_transitions = False
    for line in lines:
        for word in line.split():
            if word == TRANSITIONS:
                found_transitions = True
                break
            accepting = len(word) > 1 and word.endswith("!")
            if accepting:
                states.setdefault(word[:-1], True)
            states.setdefault(word, accepting)
        if found_transitions:
            break
    if not found_transitions:
        raise ScanError(
            "Unexpected end of input while reading state set: "
            f"{TRANSITIONS}not found."
        )

    transitions: list[tuple[str, str, list[str]]] = []
    for line in lines:
        line = squish(line)
        if line == INPUT:
            break
        words = line.split()
        if not words:
            continue
        if len(words) < 3:
            raise ScanError(f"Incomplete transition line: {line}")
        chars: list[str] = []
        for item in words[1:-1]:
            spec = escape(item)
            if len(spec) == 1:
                if ord(spec) > 127:
                    raise ScanError(
                        f"Invalid (non-ASCII) character in transition line: {line}\n"
                        f"Character {unescape(spec)} is outside ASCII range"
                    )
                chars.append(spec)
            elif len(spec) == 3 and spec[1] == "-":
                chars.extend(chr(c) for c in range(ord(spec[0]), ord(spec[2]) + 1))
            else:
                raise ScanError(
                    f"Expected character or range, but found {spec} "
                    f"in transition line: {line}"
                )
        transitions.append((words[0], words[-1], chars))

    return DFA(states, transitions)


def id_type(text: str) -> str:
    """The token kind of an identifier-shaped word: a keyword kind or ``ID``."""
    return KEYWORDS.get(text, "ID")


def check_token(token: Token) -> None:
    """Raise if the token breaks a language limit, such as a NUM too large."""
    if token.type == "NUM" and int(token.value) > MAX_NUM:
        raise ScanError("NUM OUT-OF-RANGE")


def _finish(tokens: list[Token], kind: str, value: str) -> None:
    token = Token(kind, value)
    check_token(token)
    if not kind.startswith("?"):
        tokens.append(token)


def tokenize(dfa: DFA, text: str) -> list[Token]:
    """Split text into tokens by maximal munch, dropping kinds that start with ``?``."""
    state = dfa.initial
    tokens: list[Token] = []
    start = 0
    index = 0
    while index < len(text):
        following = dfa._lookup(state.name, text[index])
        if following is not None:
            state = following
            index += 1
            continue
        if not state.accepting:
            raise ScanError("SCAN FAILURE")
        if state.name == "ID":
            kind = id_type(text[start:index])
        else:
            kind = "NUM" if state.name == "ZERO" else state.name
        _finish(tokens, kind, text[start:index])
        state = dfa.initial
        start = index
    if not state.accepting:
        raise ScanError("SCAN FAILURE")
    _finish(tokens, "DECINT" if state.name == "ZERO" else state.name, text[start:])
    return tokens


_THREE_REGISTER = {"add", "sub", "slt", "sltu", "beq", "bne"}
_TWO_REGISTER = {"mult", "multu", "div", "divu"}
_ONE_REGISTER = {"mfhi", "mflo", "lis", "jalr", "jr"}
_MEMORY = {"lw", "sw"}
_IMMEDIATE = {"ID", "DECINT", "HEXINT"}
_INTEGER = {"DECINT", "HEXINT"}


def valid_line(tokens: Sequence[Token]) -> bool:
    """Whether a line of assembly tokens forms a well-shaped instruction."""
    if not tokens:
        return False
    kinds = [token.type for token in tokens]
    head = tokens[0]
    if head.type == "DOTID" and head.value == ".word" and len(tokens) == 2:
        return kinds[1] in _IMMEDIATE
    if head.type != "ID":
        return False
    if head.value in _THREE_REGISTER and len(tokens) == 6:
        return kinds[1:5] == ["REGISTER", "COMMA", "REGISTER", "COMMA"] and (
            kinds[5] == "REGISTER" or kinds[5] in _IMMEDIATE
        )
    if head.value in _TWO_REGISTER and len(tokens) == 4:
        return kinds[1:] == ["REGISTER", "COMMA", "REGISTER"]
    if head.value in _ONE_REGISTER and len(tokens) == 2:
        return kinds[1] == "REGISTER"
    if head.value in _MEMORY and len(tokens) == 7:
        return (
            kinds[1:3] == ["REGISTER", "COMMA"]
            and kinds[3] in _INTEGER
            and kinds[4:] == ["LPAREN", "REGISTER", "RPAREN"]
        )
    return False


@lru_cache(maxsize=None)
def _wlp4_dfa() -> DFA:
    return parse_dfa(WLP4_LEXER)


def scan(text: str) -> list[Token]:
    """Tokenize WLP4 source text."""
    return tokenize(_wlp4_dfa(), text)