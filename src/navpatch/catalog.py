"""Versioned patch catalog for the host outline module.

Ops are applied in the order listed and each one rescans the buffer left by
the previous ones. The two type-alias ops share a search token: the first adds
the replacement case below the host's own case, the second deletes the host's
case, which is still the first line carrying the token.
"""

from __future__ import annotations

import re
import textwrap

from navpatch.exceptions import HostIncompatible
from navpatch.model import AnchorWindow, HostVersionProfile, PatchOp, ProfileKind

REFACTORED_MAJOR_VERSION = 5

ADD_CHILDREN_TOKEN = "def add_children_recursively(node):"
TYPE_ALIAS_CASE_TOKEN = "case 265:  # SyntaxKind.TypeAliasDeclaration"
UNKNOWN_NAME_TOKEN = 'return "<unknown>"'

_VERSION_RE = re.compile(r"^\s*v?(\d+)(?:\.|$)")


def _block(text: str) -> str:
    return textwrap.dedent(text).strip("\n")


MARKUP_ELEMENT_CASES = PatchOp(
    search_token=ADD_CHILDREN_TOKEN,
    line_offset=7,
    inserted_lines=(
        _block(
            """
            case host_api.SyntaxKind.JsxSelfClosingElement:
                add_leaf_node(node)
            case host_api.SyntaxKind.JsxElement:
                start_node(node)
                host_api.for_each_child(node, add_children_recursively)
                end_node()
            """
        ),
    ),
)

TYPE_ALIAS_MEMBERS_CASE = PatchOp(
    search_token=TYPE_ALIAS_CASE_TOKEN,
    line_offset=2,
    inserted_lines=(
        _block(
            """
            case host_api.SyntaxKind.TypeAliasDeclaration:
                add_node_with_recursive_child(node, node.type)
            """
        ),
    ),
)

REMOVE_TYPE_ALIAS_LEAF_CASE = PatchOp(
    search_token=TYPE_ALIAS_CASE_TOKEN,
    line_offset=0,
    removed_line_count=2,
)

NUMBERED_ITEMS_CASE = PatchOp(
    search_token=ADD_CHILDREN_TOKEN,
    line_offset=7,
    inserted_lines=(
        _block(
            """
            case host_api.SyntaxKind.TupleType | host_api.SyntaxKind.ArrayLiteralExpression:
                for index, element in enumerate(node.elements):
                    add_node_with_recursive_child(
                        element,
                        element,
                        host_api.set_text_range(host_api.factory.create_identifier(str(index)), element),
                    )
            """
        ),
    ),
    feature="arrays_tuples_numbered_items",
)

MARKUP_ELEMENT_NAMES = PatchOp(
    search_token=UNKNOWN_NAME_TOKEN,
    line_offset=0,
    inserted_lines=(
        _block(
            """
            if node.kind == host_api.SyntaxKind.JsxElement:
                node = node.opening_element
            if node.kind in (host_api.SyntaxKind.JsxSelfClosingElement, host_api.SyntaxKind.JsxOpeningElement):
                return label_formatter(
                    node.tag_name.get_text(),
                    [
                        (
                            attribute.name.get_text(),
                            attribute.initializer.text
                            if host_api.is_string_literal(attribute.initializer)
                            else attribute.initializer,
                        )
                        for attribute in node.attributes.properties
                        if host_api.is_jsx_attribute(attribute) and attribute.initializer is not None
                    ],
                )
            """
        ),
    ),
)

NAVIGATION_BAR_PATCHES: tuple[PatchOp, ...] = (
    MARKUP_ELEMENT_CASES,
    TYPE_ALIAS_MEMBERS_CASE,
    REMOVE_TYPE_ALIAS_LEAF_CASE,
    NUMBERED_ITEMS_CASE,
    MARKUP_ELEMENT_NAMES,
)

LEGACY_PROFILE = HostVersionProfile(
    kind=ProfileKind.LEGACY,
    anchor=AnchorWindow(
        start_marker="class NavigationBar:",
        end_marker="NavigationBar = _navigation_bar(NavigationBar)",
    ),
    patches=NAVIGATION_BAR_PATCHES,
    export_expression="NavigationBar",
)

REFACTORED_PROFILE = HostVersionProfile(
    kind=ProfileKind.REFACTORED,
    anchor=AnchorWindow(
        start_marker="# src/services/navigation_bar.py",
        end_marker="# src/",
        skip_start_marker=True,
    ),
    patches=NAVIGATION_BAR_PATCHES,
    export_expression='{"get_navigation_tree": get_navigation_tree}',
    needs_free_variable_resolution=True,
)


def host_major_version(version: str) -> int:
    match = _VERSION_RE.match(version or "")
    if match is None:
        raise HostIncompatible(f"unrecognized host version: {version!r}")
    return int(match.group(1))


def select_profile(version: str) -> HostVersionProfile:
    if host_major_version(version) >= REFACTORED_MAJOR_VERSION:
        return REFACTORED_PROFILE
    return LEGACY_PROFILE
