"""Collects MIPS assembly lines."""

from __future__ import annotations

STACK_POINTER = 30
WORD_SIZE_REGISTER = 4


class Emitter:
    """Accumulates MIPS assembly instructions as text lines."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def _three(self, op: str, d: int, s: int, t: int) -> None:
        self.lines.append(f"{op} ${d}, ${s}, ${t}")

    def _two(self, op: str, s: int, t: int) -> None:
        self.lines.append(f"{op} ${s}, ${t}")

    def _one(self, op: str, r: int) -> None:
        self.lines.append(f"{op} ${r}")

    def add(self, d: int, s: int, t: int) -> None:
        self._three("add", d, s, t)

    def sub(self, d: int, s: int, t: int) -> None:
        self._three("sub", d, s, t)

    def mult(self, s: int, t: int) -> None:
        self._two("mult", s, t)

    def multu(self, s: int, t: int) -> None:
        self._two("multu", s, t)

    def div(self, s: int, t: int) -> None:
        self._two("div", s, t)

    def divu(self, s: int, t: int) -> None:
        self._two("divu", s, t)

    def mfhi(self, d: int) -> None:
        self._one("mfhi", d)

    def mflo(self, d: int) -> None:
        self._one("mflo", d)

    def lis(self, d: int) -> None:
        self._one("lis", d)

    def slt(self, d: int, s: int, t: int) -> None:
        self._three("slt", d, s, t)

    def sltu(self, d: int, s: int, t: int) -> None:
        self._three("sltu", d, s, t)

    def jr(self, s: int) -> None:
        self._one("jr", s)

    def jalr(self, s: int) -> None:
        self._one("jalr", s)

    def beq(self, s: int, t: int, target: int | str) -> None:
        self.lines.append(f"beq ${s}, ${t}, {target}")

    def bne(self, s: int, t: int, target: int | str) -> None:
        self.lines.append(f"bne ${s}, ${t}, {target}")

    def lw(self, t: int, s: int, offset: int = 0) -> None:
        self.lines.append(f"lw ${t}, {offset}(${s})")

    def sw(self, t: int, s: int, offset: int = 0) -> None:
        self.lines.append(f"sw ${t}, {offset}(${s})")

    def word(self, value: int | str) -> None:
        self.lines.append(f".word {value}")

    def label(self, name: str) -> None:
        self.lines.append(f"{name}:")

    def raw(self, line: str) -> None:
        """Append a line verbatim."""
        self.lines.append(line)

    def push(self, s: int) -> None:
        """Push register ``s`` onto the stack."""
        self.sw(s, STACK_POINTER, -4)
        self.sub(STACK_POINTER, STACK_POINTER, WORD_SIZE_REGISTER)

    def pop(self, d: int | None = None) -> None:
        """Pop the stack, into register ``d`` if one is given."""
        self.add(STACK_POINTER, STACK_POINTER, WORD_SIZE_REGISTER)
        if d is not None:
            self.lw(d, STACK_POINTER, -4)

    def text(self) -> str:
        """All lines, each ended by a newline."""
        return "".join(f"{line}\n" for line in self.lines)