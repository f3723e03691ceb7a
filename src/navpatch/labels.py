from __future__ import annotations

from typing import Iterable, Tuple

CLASS_ATTRIBUTE_NAMES = frozenset({"class", "className"})
ID_ATTRIBUTE_NAME = "id"


def format_markup_label(
    tag_name: str, attributes: Iterable[Tuple[str, object]]
) -> str:
    """Render a markup element as ``Tag.class-a.class-b#id``.

    ``attributes`` are ``(name, value)`` pairs in source order. A ``str`` value
    is a string literal; any other value is an expression and contributes
    nothing.
    """

    chips: list[str] = []
    id_suffix = ""
    for name, value in attributes:
        if not isinstance(value, str):
            continue
        if name in CLASS_ATTRIBUTE_NAMES:
            chips.extend(f".{token}" for token in value.split())
        elif name == ID_ATTRIBUTE_NAME:
            id_suffix = f"#{value}"
    return tag_name + "".join(chips) + id_suffix
