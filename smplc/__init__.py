"""A compiler for the Smpl language: lexer, parser, type checker and C code generator."""

__version__ = "0.1.0"