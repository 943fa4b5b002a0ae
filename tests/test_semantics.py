import pytest

from wlp4c.parser import parse
from wlp4c.scanner import scan
from wlp4c.semantics import (
    Procedure,
    ProcedureTable,
    SemanticError,
    Variable,
    VariableTable,
    arg_types,
    check_statements,
    collect_procedures,
    declarations,
    find_node,
)


def _tree(source):
    return parse(scan(source))


def _check(source):
    tree = _tree(source)
    procedures = ProcedureTable()
    collect_procedures(tree.child("procedures"), procedures)
    return tree, procedures


def test_wain_signature_int_int():
    _, procs = _check("int wain(int a, int b) { return a + b; }")
    assert procs.get("wain").signature == ["int", "int"]


def test_wain_signature_pointer_first():
    _, procs = _check("int wain(int* a, int b) { return b; }")
    assert procs.get("wain").signature == ["int*", "int"]


def test_wain_second_param_pointer_rejected():
    with pytest.raises(SemanticError, match="main invalid second parameter"):
        _check("int wain(int a, int* b) { return a; }")


def test_duplicate_variable():
    with pytest.raises(SemanticError, match="duplicate variable declaration"):
        _check("int wain(int a, int b) { int a = 1; return a; }")


def test_undeclared_variable():
    with pytest.raises(SemanticError, match="use of undeclared variable"):
        _check("int wain(int a, int b) { return c; }")


def test_pointer_plus_int_is_pointer():
    tree, _ = _check(
        "int wain(int* a, int b) { int* c = NULL; c = a + b; return b; }"
    )
    statement = find_node(tree, "statement")
    assert statement.child("expr").type == "int*"


def test_pointer_plus_pointer_rejected():
    with pytest.raises(SemanticError, match="derived type error"):
        _check("int wain(int* a, int b) { int* c = NULL; c = a + a; return b; }")


def test_pointer_difference_is_int():
    tree, _ = _check("int wain(int* a, int b) { return a - a; }")
    assert tree.child("procedures").child("main").child("expr").type == "int"


def test_return_pointer_rejected():
    with pytest.raises(SemanticError, match="must return int"):
        _check("int wain(int* a, int b) { return a; }")


def test_println_pointer_rejected():
    with pytest.raises(SemanticError, match="PRINTLN"):
        _check("int wain(int* a, int b) { println(a); return b; }")


def test_delete_int_rejected():
    with pytest.raises(SemanticError, match="DELETE"):
        _check("int wain(int* a, int b) { delete [] b; return b; }")


def test_mixed_comparison_rejected():
    with pytest.raises(SemanticError, match="test must have the same type"):
        _check("int wain(int* a, int b) { while (a < b) { } return b; }")


def test_assignment_type_mismatch():
    with pytest.raises(SemanticError, match="same type"):
        _check("int wain(int* a, int b) { b = a; return b; }")


def test_deref_int_rejected():
    with pytest.raises(SemanticError, match="invalid '\\*' address retrieval"):
        _check("int wain(int a, int b) { return *a; }")


def test_address_of_pointer_rejected():
    with pytest.raises(SemanticError, match="invalid '&' address retrieval"):
        _check("int wain(int* a, int b) { int* c = NULL; c = &a; return b; }")


def test_multiply_pointer_rejected():
    with pytest.raises(SemanticError, match="invalid term or factor"):
        _check("int wain(int* a, int b) { return b * a; }")


def test_new_with_pointer_size_rejected():
    with pytest.raises(SemanticError, match="invalid 'new'"):
        _check("int wain(int* a, int b) { a = new int[a]; return b; }")


PROC = "int f(int x, int* y) { return x; } "


def test_call_wrong_count():
    with pytest.raises(SemanticError, match="incorrect amount"):
        _check(PROC + "int wain(int a, int b) { return f(a); }")


def test_call_wrong_types():
    with pytest.raises(SemanticError, match="incorrect types"):
        _check(PROC + "int wain(int a, int b) { return f(NULL, a); }")


def test_call_without_args_to_procedure_with_params():
    with pytest.raises(SemanticError, match="invalid parameters"):
        _check(PROC + "int wain(int a, int b) { return f(); }")


def test_call_undeclared_procedure():
    with pytest.raises(SemanticError, match="undeclared procedure"):
        _check("int wain(int a, int b) { return g(); }")


def test_call_on_local_variable():
    with pytest.raises(SemanticError, match="function call on local variable"):
        _check(PROC + "int wain(int f, int b) { return f(b, NULL); }")


def test_recursive_call_allowed():
    _, procs = _check(
        "int g(int n) { return g(n); } int wain(int a, int b) { return g(a); }"
    )
    assert sorted(procs.table) == ["g", "wain"]


def test_duplicate_procedure():
    with pytest.raises(SemanticError, match="duplicate procedure declaration"):
        _check(
            "int g() { return 1; } int g() { return 2; } "
            "int wain(int a, int b) { return a; }"
        )


def test_declaration_with_wrong_initialiser():
    with pytest.raises(SemanticError, match="incorrect assignment"):
        _check("int wain(int a, int b) { int* c = 5; return a; }")
    with pytest.raises(SemanticError, match="incorrect assignment"):
        _check("int wain(int a, int b) { int c = NULL; return a; }")


def test_declarations_come_latest_first():
    tree = _tree("int wain(int a, int b) { int x = 1; int* y = NULL; return a; }")
    dcls = tree.child("procedures").child("main").child("dcls")
    found = [Variable.from_dcl(node) for node in declarations(dcls)]
    assert found == [Variable("y", "int*"), Variable("x", "int")]


def test_procedure_from_node_includes_locals():
    tree = _tree("int wain(int a, int b) { int x = 1; return a; }")
    procedure = Procedure.from_node(tree.child("procedures").child("main"))
    assert procedure.name == "wain"
    assert "x" in procedure.symbol_table
    assert procedure.symbol_table.get("a") == Variable("a", "int")


def test_variable_str():
    assert str(Variable("p", "int*")) == "int* p"


def test_variable_table_operations():
    table = VariableTable()
    table.add(Variable("b", "int"))
    table.add(Variable("a", "int*"))
    assert "a" in table
    assert "z" not in table
    assert str(table) == "VARIABLES:\na : int* a\nb : int b\n"
    with pytest.raises(SemanticError):
        table.add(Variable("a", "int"))
    with pytest.raises(SemanticError):
        table.get("z")


def test_procedure_str():
    _, procs = _check("int wain(int a, int b) { return a; }")
    assert str(procs.get("wain")) == (
        "Procedure wain:\n"
        "  Signature: int int \n"
        "  Declarations:\n"
        "    a : int a\n"
        "    b : int b\n"
    )
    assert str(procs).startswith("PROCEDURES:\nwain : Procedure wain:\n")


def test_find_node_missing_returns_none():
    tree = _tree("int wain(int a, int b) { return a; }")
    assert find_node(tree, "arglist") is None
    assert find_node(tree, "main").name() == "main"


def test_check_statements_on_unannotated_assignment_of_equal_types():
    tree = _tree("int wain(int a, int b) { a = b; return a; }")
    statement = find_node(tree, "statement")
    statement.children[0].type = "int"
    statement.children[2].type = "int*"
    with pytest.raises(SemanticError, match="same type"):
        check_statements(tree)