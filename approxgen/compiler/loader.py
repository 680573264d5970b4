"""In-process loading of generated modules."""
from __future__ import annotations
import importlib.abc
import importlib.util
import sys
import types
from typing import Optional, Union

from approxgen.compiler.config import GeneratorConfig
from approxgen.compiler.pipeline import GeneratedModule, compile_source
from approxgen.internals.report import Reporter


class CompilationFailed(Exception):
    """Generation stopped on errors; the reporter holds the diagnostics."""

    def __init__(self, reporter: Reporter) -> None:
        self.reporter = reporter
        super().__init__(reporter.format(use_color=False, use_unicode=False))


class GeneratedSourceLoader(importlib.abc.SourceLoader):
    """Serves generated source from memory to the import machinery.

    The filename is a `<name>` pseudo path with no modification time, so
    no bytecode is ever cached for it.
    """

    def __init__(self, name: str, source: str) -> None:
        self.name = name
        self.source = source

    def get_filename(self, fullname: str) -> str:
        return f"<{self.name}>"

    def get_data(self, path: str) -> bytes:
        return self.source.encode("utf-8")


def load_module(generated: Union[GeneratedModule, str], name: str) -> types.ModuleType:
    """Import generated source as a fresh module registered as `name`.

    The module is placed in `sys.modules` before execution so that dataclass
    annotations, which are strings under `from __future__ import annotations`,
    resolve against it. A failing execution leaves nothing registered.
    """
    source = generated.source if isinstance(generated, GeneratedModule) else generated
    loader = GeneratedSourceLoader(name, source)
    spec = importlib.util.spec_from_loader(name, loader)
    module = importlib.util.module_from_spec(spec)

    previous = sys.modules.get(name)
    sys.modules[name] = module
    try:
        loader.exec_module(module)
    except BaseException:
        if previous is None:
            sys.modules.pop(name, None)
        else:
            sys.modules[name] = previous
        raise
    return module


def compile_and_load(src: str, name: str, config: Optional[GeneratorConfig] = None,
                     filename: str = "<input>") -> types.ModuleType:
    """Generate and load a declaration file in one step.

    Raises:
        CompilationFailed: the declarations have errors.
    """
    reporter = Reporter(source=src, filename=filename)
    generated = compile_source(src, reporter, config=config, source_name=filename)
    if generated is None:
        raise CompilationFailed(reporter)
    return load_module(generated, name)
