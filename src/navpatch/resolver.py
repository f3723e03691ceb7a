"""Rebinding of free names in the refactored outline module.

The refactored host bundles the outline logic as a flat script fragment that
reads its helpers as bare globals. Once wrapped in the synthesized factory
those names are undefined, so the factory text is compiled once, the
"Cannot find name" diagnostics are harvested, and a single preamble line binds
each missing name from ``host_api``.
"""

from __future__ import annotations

import ast
import builtins
import difflib
import re
import symtable
from dataclasses import dataclass
from typing import Iterable, Iterator, Protocol, Sequence

from navpatch.diagnostic_codes import DiagnosticCode, cannot_find_codes
from navpatch.synthesis import BINDING_NAMES, synthesize_module

_NOT_FOUND_RE = re.compile(r"^Cannot find name '(.+?)'")


@dataclass(frozen=True)
class DiagnosticMessageChain:
    message_text: str
    next: tuple["DiagnosticMessageChain", ...] = ()


@dataclass(frozen=True)
class Diagnostic:
    code: int
    message_text: str | DiagnosticMessageChain
    line: int | None = None


class DiagnosticsProbe(Protocol):
    def compile(self, source_text: str) -> Sequence[Diagnostic]: ...


def _walk_tables(table: symtable.SymbolTable) -> Iterator[symtable.SymbolTable]:
    yield table
    for child in table.get_children():
        yield from _walk_tables(child)


def _first_load_lines(tree: ast.AST) -> dict[str, int]:
    lines: dict[str, int] = {}
    for node in ast.walk(tree):
        if isinstance(node, ast.Name) and isinstance(node.ctx, ast.Load):
            known = lines.get(node.id)
            if known is None or node.lineno < known:
                lines[node.id] = node.lineno
    return lines


class SymtableProbe:
    """In-memory compile of Python text reporting unbound global names."""

    file_name = "main.py"

    def compile(self, source_text: str) -> list[Diagnostic]:
        try:
            top = symtable.symtable(source_text, self.file_name, "exec")
            tree = ast.parse(source_text, self.file_name)
        except SyntaxError as exc:
            return [
                Diagnostic(
                    code=DiagnosticCode.SYNTAX_ERROR,
                    message_text=str(exc.msg),
                    line=exc.lineno,
                )
            ]
        defined = {
            symbol.get_name()
            for symbol in top.get_symbols()
            if symbol.is_assigned() or symbol.is_imported() or symbol.is_namespace()
        }
        known = defined | set(dir(builtins))
        missing: dict[str, None] = {}
        local_names: set[str] = set()
        for table in _walk_tables(top):
            for symbol in table.get_symbols():
                name = symbol.get_name()
                if symbol.is_local() or symbol.is_parameter():
                    local_names.add(name)
                if symbol.is_referenced() and symbol.is_global() and name not in known:
                    missing[name] = None
        load_lines = _first_load_lines(tree)
        candidates = sorted((defined | local_names) - set(missing))
        return [
            self._diagnostic(name, candidates, load_lines.get(name))
            for name in missing
        ]

    def _diagnostic(
        self, name: str, candidates: Sequence[str], line: int | None
    ) -> Diagnostic:
        close = difflib.get_close_matches(name, candidates, n=1, cutoff=0.8)
        if close:
            return Diagnostic(
                code=DiagnosticCode.CANNOT_FIND_NAME_DID_YOU_MEAN,
                message_text=f"Cannot find name '{name}'. Did you mean '{close[0]}'?",
                line=line,
            )
        return Diagnostic(
            code=DiagnosticCode.CANNOT_FIND_NAME,
            message_text=f"Cannot find name '{name}'.",
            line=line,
        )


class HostCompilerProbe:
    """Ask a throwaway host language service for semantic diagnostics."""

    file_name = "main.py"

    def __init__(self, host_api: object) -> None:
        self._host_api = host_api

    def compile(self, source_text: str) -> list[Diagnostic]:
        service = self._host_api.create_language_service({self.file_name: source_text})
        return list(service.get_semantic_diagnostics(self.file_name))


def default_probe(host_api: object | None = None) -> DiagnosticsProbe:
    if callable(getattr(host_api, "create_language_service", None)):
        return HostCompilerProbe(host_api)
    return SymtableProbe()


def _head_message(message: object) -> str:
    if isinstance(message, str):
        return message
    text = getattr(message, "message_text", "")
    return text if isinstance(text, str) else ""


def collect_unresolved_names(
    diagnostics: Iterable[object],
    codes: Iterable[int] | None = None,
) -> set[str]:
    allowed = set(cannot_find_codes(include_from_lib=False) if codes is None else codes)
    names: set[str] = set()
    for diagnostic in diagnostics:
        if getattr(diagnostic, "code", None) not in allowed:
            continue
        match = _NOT_FOUND_RE.match(_head_message(getattr(diagnostic, "message_text", "")))
        if match is None:
            continue
        name = match.group(1)
        if name.isidentifier() and name not in BINDING_NAMES:
            names.add(name)
    return names


def binding_preamble(names: Iterable[str]) -> str:
    """One line binding each name from ``host_api``; empty for no names."""

    return "; ".join(f"{name} = host_api.{name}" for name in sorted(set(names)))


@dataclass(frozen=True)
class Resolution:
    names: frozenset[str]
    preamble: str
    module_text: str


def resolve_free_variables(
    lines: Sequence[str],
    export_expression: str,
    probe: DiagnosticsProbe,
    codes: Iterable[int] | None = None,
) -> Resolution:
    # Single pass: names the preamble itself leaves unresolved are not chased.
    draft = synthesize_module(lines, export_expression)
    names = collect_unresolved_names(probe.compile(draft), codes)
    preamble = binding_preamble(names)
    return Resolution(
        names=frozenset(names),
        preamble=preamble,
        module_text=synthesize_module(lines, export_expression, preamble or None),
    )
