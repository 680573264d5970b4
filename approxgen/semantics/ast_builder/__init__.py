"""
AST Builder module for declaration files.

Exports:
    ASTBuilder: Main class for building the declaration AST from Lark parse trees
"""
from approxgen.semantics.ast_builder.builder import ASTBuilder

__all__ = [
    'ASTBuilder',
]
