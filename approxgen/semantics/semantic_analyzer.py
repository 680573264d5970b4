# semantics/semantic_analyzer.py
from __future__ import annotations
from typing import Dict, List, Optional

from approxgen.internals.report import Reporter
from approxgen.semantics.ast import Program
from approxgen.semantics.model import TypeShape
from approxgen.semantics.options import ResolvedType
from approxgen.semantics.passes.annotations import AnnotationPass
from approxgen.semantics.passes.collect import CollectorPass, TypeTable
from approxgen.semantics.passes.resolve import OptionsPass


class SemanticAnalyzer:
    """
    Runs the semantic passes over a parsed declaration file.

    Pass execution order:
      - Pass 0: Collection (names, derives, option keys, generics)
      - Pass 1: Annotation Model (skip/approximate validation, TypeShape construction)
      - Pass 2: Options resolution (ToleranceConfig per deriving type)

    All diagnostics go to the reporter; a type with errors is dropped from
    the result while the remaining types are still analysed.
    """

    def __init__(self, reporter: Reporter) -> None:
        self.reporter = reporter
        self.types: Optional[TypeTable] = None
        self.shapes: Dict[str, TypeShape] = {}
        self.resolved: List[ResolvedType] = []

    def check(self, program: Program) -> List[ResolvedType]:
        self.types = CollectorPass(self.reporter).run(program)
        self.shapes = AnnotationPass(self.reporter).run(self.types)
        self.resolved = OptionsPass(self.reporter).run(self.types, self.shapes)
        return self.resolved
