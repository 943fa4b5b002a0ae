import random
import re

import pytest

from wlp4c.codegen import RESERVED_LABELS, CodeGenerator, CompileError, compile_tokens
from wlp4c.parser import parse
from wlp4c.scanner import scan
from wlp4c.semantics import ProcedureTable, collect_procedures, find_node

MINIMAL = "int wain(int a, int b) { return a; }"

CONTROL = """
int wain(int a, int b) {
  int c = 0;
  while (a < b) {
    if (a == c) { println(a); } else { c = c + 1; }
    a = a + 1;
  }
  return c;
}
"""

HEADER = [
    ".import print",
    ".import init",
    ".import new",
    ".import delete",
    "lis $4",
    ".word 4",
    "beq $0, $0, main",
]


def _tree(text):
    tree = parse(scan(text))
    procedures = ProcedureTable()
    collect_procedures(tree.child("procedures"), procedures)
    return tree, procedures


def _compile(text, seed=0):
    tree, procedures = _tree(text)
    return CodeGenerator(procedures, random.Random(seed)).generate(tree).splitlines()


def _defined(lines):
    return [line[:-1] for line in lines if line.endswith(":")]


def _branch_targets(lines):
    return [
        line.rsplit(", ", 1)[1]
        for line in lines
        if line.startswith(("beq ", "bne "))
    ]


def test_minimal_program_worked_example():
    assert _compile(MINIMAL) == [
        ".import print",
        ".import init",
        ".import new",
        ".import delete",
        "lis $4",
        ".word 4",
        "beq $0, $0, main",
        "main:",
        "sw $2, -4($30)",
        "sub $30, $30, $4",
        "lis $2",
        ".word 0",
        "sw $31, -4($30)",
        "sub $30, $30, $4",
        "lis $31",
        ".word init",
        "jalr $31",
        "add $30, $30, $4",
        "lw $31, -4($30)",
        "add $30, $30, $4",
        "lw $2, -4($30)",
        "sw $1, -4($30)",
        "sub $30, $30, $4",
        "sw $2, -4($30)",
        "sub $30, $30, $4",
        "sub $29, $30, $4",
        "lw $3, 8($29)",
        "add $30, $30, $4",
        "add $30, $30, $4",
        "jr $31",
    ]


def test_second_parameter_read_at_smaller_offset():
    first = _compile(MINIMAL)
    second = _compile("int wain(int a, int b) { return b; }")
    assert len(first) == len(second)
    differing = [(x, y) for x, y in zip(first, second) if x != y]
    assert len(differing) == 1
    assert differing[0][0].replace("8(", "4(") == differing[0][1]


def test_local_declaration_pushed_and_popped():
    lines = _compile("int wain(int a, int b) { int c = 5; return c; }")
    assert ".word 5" in lines
    assert lines[-1] == "jr $31"
    pops = lines[lines.index("lw $3, 0($29)") + 1 : -1]
    assert len(pops) == 3
    assert set(pops) == {"add $30, $30, $4"}


def test_labels_unique_and_branch_targets_defined():
    lines = _compile(CONTROL)
    defined = _defined(lines)
    assert len(defined) == len(set(defined))
    assert set(_branch_targets(lines)) <= set(defined)
    assert ".word print" in lines


def test_same_seed_gives_same_output():
    first = _compile(CONTROL, seed=7)
    second = _compile(CONTROL, seed=7)
    assert first[: len(HEADER)] == HEADER
    assert first[-1] == "jr $31"
    assert first == second


def test_procedure_label_and_call():
    source = """
    int f(int x, int y) { return x - y; }
    int wain(int a, int b) { return f(a, b); }
    """
    lines = _compile(source)
    assert "f:" in lines
    assert ".word f" in lines
    body = lines[lines.index("f:") : lines.index("main:")]
    assert body.index("lw $3, 8($29)") < body.index("lw $3, 4($29)")


def test_procedure_named_like_runtime_routine_gets_fresh_label():
    source = """
    int print(int x) { return x; }
    int wain(int a, int b) { return print(a); }
    """
    lines = _compile(source)
    assert "print:" not in lines
    custom = [name for name in _defined(lines) if name != "main"]
    assert len(custom) == 1
    assert re.fullmatch("[a-z]{10}", custom[0])
    assert f".word {custom[0]}" in lines


def test_pointer_arithmetic_scales_by_word_size():
    plain = _compile("int wain(int a, int b) { return a + b; }")
    pointer = _compile("int wain(int* a, int b) { return *(a + b); }")
    assert not any(line.startswith("mult ") for line in plain)
    assert any(line.startswith("mult ") for line in pointer)


def test_pointer_difference_divides():
    lines = _compile("int wain(int* a, int b) { return (a + 1) - a; }")
    assert any(line.startswith("div ") for line in lines)


def test_pointer_comparison_is_unsigned():
    ints = _compile("int wain(int a, int b) { while (a < b) { a = a + 1; } return a; }")
    ptrs = _compile(
        "int wain(int* a, int b) { int* c = NULL; while (a < c) { c = a; } return b; }"
    )
    assert any(line.startswith("slt ") for line in ints)
    assert not any(line.startswith("sltu ") for line in ints)
    assert any(line.startswith("sltu ") for line in ptrs)


def test_node_emits_test_code():
    tree, procedures = _tree(
        "int wain(int a, int b) { while (a < b) { a = a + 1; } return a; }"
    )
    gen = CodeGenerator(procedures)
    gen.node(find_node(tree, "test"), {"a": 8, "b": 4})
    assert gen.emitter.lines == [
        "sw $5, -4($30)",
        "sub $30, $30, $4",
        "lw $3, 8($29)",
        "sw $3, -4($30)",
        "sub $30, $30, $4",
        "lw $3, 4($29)",
        "add $30, $30, $4",
        "lw $5, -4($30)",
        "slt $3, $5, $3",
        "add $30, $30, $4",
        "lw $5, -4($30)",
    ]


def test_new_label_is_fresh():
    gen = CodeGenerator(rng=random.Random(1))
    labels = [gen.new_label() for _ in range(200)]
    assert len(set(labels)) == 200
    assert all(re.fullmatch("[a-z]{10}", label) for label in labels)
    assert not set(labels) & RESERVED_LABELS


def test_new_label_skips_taken_names():
    first = CodeGenerator(rng=random.Random(3)).new_label()
    gen = CodeGenerator(rng=random.Random(3))
    gen.labels.add(first)
    assert gen.new_label() != first


def test_compile_tokens_returns_assembly():
    text = compile_tokens(scan(MINIMAL))
    assert text.startswith(".import print\n")
    assert text.endswith("jr $31\n")
    assert text.splitlines() == _compile(MINIMAL)


def test_compile_tokens_parse_error():
    with pytest.raises(CompileError) as info:
        compile_tokens(scan("int wain(int a) { return a; }"))
    assert info.value.stage == "setup"
    assert str(info.value) == "ERROR in setup: No next transition"


def test_compile_tokens_undeclared_variable():
    with pytest.raises(CompileError) as info:
        compile_tokens(scan("int wain(int a, int b) { return c; }"))
    assert info.value.stage == "processing"
    assert info.value.message == "use of undeclared variable"


def test_compile_tokens_pointer_return_rejected():
    with pytest.raises(CompileError) as info:
        compile_tokens(scan("int wain(int* a, int b) { return a; }"))
    assert info.value.message == "expression derived from procedure/main must return int"


def test_compile_tokens_bad_second_main_parameter():
    with pytest.raises(CompileError) as info:
        compile_tokens(scan("int wain(int a, int* b) { return a; }"))
    assert info.value.message == "main invalid second parameter declaration"