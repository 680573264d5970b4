"""Main ASTBuilder orchestrator for declaration files.

Turns a Lark parse tree into the declaration AST in `semantics.ast`. The
builder delegates to specialized parsers:

- Declarations: semantics.ast_builder.declarations (structs, enums, fields, attributes)
- Generics: semantics.ast_builder.types.generics
- Opaque expressions: semantics.ast_builder.expressions
"""
from __future__ import annotations
from typing import List

from lark import Tree

from approxgen.internals.errors import raise_internal_error
from approxgen.internals.report import span_of
from approxgen.semantics.ast import ImportDecl, Program, TypeDecl
from approxgen.semantics.ast_builder.declarations.attributes import parse_attributes
from approxgen.semantics.ast_builder.declarations.enums import parse_enumdecl
from approxgen.semantics.ast_builder.declarations.structs import parse_structdecl
from approxgen.semantics.ast_builder.utils.tree_navigation import first_tree, names


class ASTBuilder:
    def build(self, tree: Tree) -> Program:
        """Build Program AST from parse tree, keeping declaration order."""
        assert isinstance(tree, Tree) and tree.data == "start"

        imports: List[ImportDecl] = []
        types: List[TypeDecl] = []

        for item in tree.children:
            if not isinstance(item, Tree):
                continue
            if item.data == "import_stmt":
                imports.append(self._import(item))
            elif item.data == "from_import":
                imports.append(self._from_import(item))
            elif item.data == "type_decl":
                types.append(self._type_decl(item))
            else:
                raise_internal_error("CE0003", node=item.data)

        return Program(loc=span_of(tree), imports=imports, types=types)

    def _import(self, t: Tree) -> ImportDecl:
        """import_stmt: "import" dotted_name ["as" NAME]"""
        alias = names(t.children)
        return ImportDecl(
            loc=span_of(t),
            module=self._dotted(first_tree(t.children, "dotted_name")),
            alias=str(alias[0]) if alias else None,
        )

    def _from_import(self, t: Tree) -> ImportDecl:
        """from_import: "from" dotted_name "import" NAME ("," NAME)*"""
        return ImportDecl(
            loc=span_of(t),
            module=self._dotted(first_tree(t.children, "dotted_name")),
            names=[str(n) for n in names(t.children)],
        )

    def _type_decl(self, t: Tree) -> TypeDecl:
        """type_decl: attribute* (struct_decl | enum_decl)"""
        attributes = parse_attributes(t.children)

        struct_node = first_tree(t.children, "struct_decl")
        if struct_node is not None:
            return parse_structdecl(struct_node, attributes)

        enum_node = first_tree(t.children, "enum_decl")
        if enum_node is not None:
            return parse_enumdecl(enum_node, attributes)

        raise_internal_error("CE0003", node=t.data)

    @staticmethod
    def _dotted(t: Tree) -> str:
        return ".".join(str(n) for n in names(t.children))
