from __future__ import annotations

import io
import tokenize
from functools import partial
from typing import Callable, Mapping, Sequence

from navpatch.exceptions import ModuleSynthesisError

FACTORY_NAME = "build_navigation_module"
BINDING_NAMES: tuple[str, ...] = ("host_api", "label_formatter")
MODULE_FILENAME = "<navpatch:navigation_bar>"
_BODY_INDENT = "    "
_FSTRING_STARTS = {
    getattr(tokenize, name)
    for name in ("FSTRING_START", "TSTRING_START")
    if hasattr(tokenize, name)
}
_FSTRING_ENDS = {
    getattr(tokenize, name)
    for name in ("FSTRING_END", "TSTRING_END")
    if hasattr(tokenize, name)
}


def _string_continuation_lines(text: str) -> set[int]:
    """1-based numbers of lines that begin inside a multi-line string literal."""

    inside: set[int] = set()
    opened: list[int] = []
    tokens = tokenize.generate_tokens(io.StringIO(text).readline)
    try:
        for token in tokens:
            if token.type in _FSTRING_STARTS:
                opened.append(token.start[0])
                continue
            if token.type in _FSTRING_ENDS and opened:
                first = opened.pop()
            elif token.type == tokenize.STRING:
                first = token.start[0]
            else:
                continue
            inside.update(range(first + 1, token.end[0] + 1))
    except (tokenize.TokenError, SyntaxError):
        # Fragments that stop tokenizing keep the lines found so far.
        pass
    return inside


def indent_code(text: str, prefix: str) -> str:
    """Prefix each non-blank line of ``text``, leaving string continuations alone."""

    continuations = _string_continuation_lines(text)
    return "\n".join(
        line if number in continuations or not line.strip() else prefix + line
        for number, line in enumerate(text.split("\n"), start=1)
    )


def synthesize_module(
    lines: Sequence[str],
    export_expression: str,
    preamble: str | None = None,
) -> str:
    """Wrap patched module lines into a factory taking the injected bindings."""

    body_lines = list(lines)
    if preamble:
        body_lines.insert(0, preamble)
    body = indent_code("\n".join(body_lines), _BODY_INDENT)
    signature = ", ".join(BINDING_NAMES)
    return (
        f"def {FACTORY_NAME}({signature}):\n"
        f"{body}\n"
        f"{_BODY_INDENT}return {export_expression}\n"
    )


def compile_module(
    module_text: str, bindings: Mapping[str, object]
) -> Callable[[], object]:
    """Compile synthesized module text into a factory bound to ``bindings``.

    Only the fixed binding set is accepted; the returned callable runs the
    patched body once per call and returns its export expression.
    """

    if set(bindings) != set(BINDING_NAMES):
        raise ValueError(
            f"module bindings must be exactly {', '.join(BINDING_NAMES)}; "
            f"got {', '.join(sorted(bindings)) or 'none'}"
        )
    try:
        code = compile(module_text, MODULE_FILENAME, "exec")
    except SyntaxError as exc:
        raise ModuleSynthesisError(
            f"synthesized navigation module does not compile: {exc.msg} (line {exc.lineno})"
        ) from exc
    namespace: dict[str, object] = {"__name__": "navpatch.patched_navigation_bar"}
    exec(code, namespace)
    factory = namespace[FACTORY_NAME]
    return partial(factory, **dict(bindings))
