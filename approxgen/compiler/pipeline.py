"""Parse, analyse and generate: the declaration file to Python source pipeline."""
from __future__ import annotations
import ast as pyast
from dataclasses import dataclass, field
from pprint import pprint
from typing import List, Optional

from lark import UnexpectedInput

from approxgen.backend.codegen_python import PythonCodegen
from approxgen.backend.emitter import emit_type
from approxgen.compiler.config import GeneratorConfig
from approxgen.internals.parse_errors import handle_parse_exception
from approxgen.internals.parser import parse_to_ast
from approxgen.internals.report import Reporter
from approxgen.semantics.ast import Program
from approxgen.semantics.exceptions import ValidationError
from approxgen.semantics.options import ResolvedType
from approxgen.semantics.semantic_analyzer import SemanticAnalyzer


@dataclass
class GeneratedModule:
    source: str
    tree: pyast.Module
    types: List[ResolvedType] = field(default_factory=list)
    program: Optional[Program] = None

    @property
    def type_names(self) -> List[str]:
        return [rt.name for rt in self.types]


def compile_source(
    src: str,
    reporter: Reporter,
    config: Optional[GeneratorConfig] = None,
    source_name: Optional[str] = None,
    dump_parse: bool = False,
    dump_ast: bool = False,
    dump_ir: bool = False,
) -> Optional[GeneratedModule]:
    """Generate the Python module for a declaration file.

    Diagnostics go to `reporter`. Returns None when any error was reported;
    warnings alone do not stop generation.
    """
    config = config or GeneratorConfig()

    try:
        program, _ = parse_to_ast(src, dump_parse=dump_parse)
    except (UnexpectedInput, ValidationError) as e:
        handle_parse_exception(e, reporter)
        return None

    if dump_ast:
        pprint(program)
        print()

    resolved = SemanticAnalyzer(reporter).check(program)
    if reporter.has_errors:
        return None

    if dump_ir:
        for rt in resolved:
            for pair in emit_type(rt):
                print(f"{rt.name}.{pair.comparator.name}:")
                pprint(pair.comparator.body)
        print()

    codegen = PythonCodegen(runtime_module=config.runtime_module, frozen=config.frozen)
    tree = codegen.generate(resolved, program.imports, source_name=source_name)
    return GeneratedModule(source=pyast.unparse(tree) + "\n", tree=tree, types=resolved, program=program)
