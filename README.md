# wlp4c

`wlp4c` compiles programs in WLP4, a small C-like teaching language, into MIPS
assembly. It scans the source, parses it with an SLR(1) parse table, checks
declarations and types, and writes the assembly to standard output.

## Installing

```
pip install .
```

## Using the command

The `wlp4c` command reads a WLP4 program from the file named on the command
line, or from standard input when no file is given. It first prints
`Tokenized:` and the scanned tokens, one `TYPE value` pair per line, then the
generated assembly:

```
wlp4c < program.wlp4
wlp4c program.wlp4
```

A program looks like this:

```
int wain(int a, int b) {
  int c = 0;
  c = a + b;
  println(c);
  return c;
}
```

Errors are written to standard error and the command exits with status 1.
Scanning errors appear as `ERROR: ...`; parsing, type checking and code
generation errors as `ERROR in setup: ...`, `ERROR in processing: ...` and
`ERROR in code generation: ...`.

## Using the library

- `wlp4c.scanner`: `scan(text)` turns source text into a list of `Token`s
  (`type`, `value`), raising `ScanError` on bad input or a `NUM` above
  2147483647. `parse_dfa(text)` and `tokenize(dfa, text)` build and run a
  scanner from any `.STATES` / `.TRANSITIONS` specification. Helpers
  `escape`, `unescape`, `squish`, `hex_to_num`, `hex_to_bin`, `num_to_hex`,
  `id_type`, `check_token` and `valid_line` are available too.
- `wlp4c.grammar`: `wlp4_rules()` and `wlp4_table()` return the WLP4 grammar
  as `Rule`s and its `ParseTable`; `parse_rules(text)` and
  `parse_table(transitions, reductions)` read such listings from text.
- `wlp4c.parser`: `parse(tokens, rules=None, table=None)` builds a `Node`
  parse tree, raising `ParseError` when the tokens do not fit the grammar.
  `Node.child(name, n)` finds the n-th child of a given name;
  `Node.format()` and `Node.debug_format()` render the tree.
- `wlp4c.semantics`: `collect_procedures(node, procedures)` fills a
  `ProcedureTable` and type-checks every procedure, raising `SemanticError`.
  `Variable`, `VariableTable`, `Procedure`, `annotate_types`,
  `check_statements`, `declarations`, `arg_types` and `find_node` are the
  pieces it is built from.
- `wlp4c.codegen`: `compile_tokens(tokens)` parses, checks and compiles a
  token list, returning the assembly text or raising `CompileError`, whose
  `stage` names the failing phase. `CodeGenerator` does the emitting and
  accepts a `random.Random` for its generated labels.
- `wlp4c.mips`: `Emitter` builds MIPS assembly one instruction at a time
  (`add`, `sub`, `mult`, `lw`, `sw`, `beq`, `push`, `pop`, ...) and returns it
  with `text()`.

```python
from wlp4c.scanner import scan
from wlp4c.codegen import compile_tokens

source = "int wain(int a, int b) { return a + b; }"
print(compile_tokens(scan(source)))
```

## What it does not do

`wlp4c` stops at assembly text. It does not assemble, link or run the
program. The output begins with `.import print`, `.import init`,
`.import new` and `.import delete`; those runtime routines are not part of
this package and must be supplied when the assembly is linked. Labels for
branches are random, so two runs on the same program give different label
names.

## Running the tests

```
pip install .[test]
pytest
```