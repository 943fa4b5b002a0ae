"""Compiler for the WLP4 language: scanner, SLR(1) parser, type checker and MIPS code generator."""

__version__ = "0.1.0"