"""Shared helpers for the test modules."""
from __future__ import annotations

from typing import Tuple

from approxgen.internals.parser import parse_to_ast
from approxgen.internals.report import Reporter
from approxgen.semantics.ast import Program
from approxgen.semantics.semantic_analyzer import SemanticAnalyzer


def parse(src: str) -> Program:
    program, _ = parse_to_ast(src)
    return program


def analyze(src: str) -> Tuple[Reporter, SemanticAnalyzer]:
    """Run the semantic passes and return the reporter and the analyzer."""
    reporter = Reporter(source=src, filename="<test>")
    analyzer = SemanticAnalyzer(reporter)
    analyzer.check(parse(src))
    return reporter, analyzer
