"""
Helpers over the lxml element tree of a PMC article.

The extraction code treats the parsed document as a generic labeled
tree: every element has a kind (its local tag name, lower-cased),
attributes, ordered children and text content.
"""

from __future__ import annotations

from typing import Iterator

from lxml import etree


def node_kind(node) -> str:
    """
    Get the kind of a tree node.

    Comments and processing instructions have no kind and yield an
    empty string.
    """
    if not isinstance(node.tag, str):
        return ""
    return etree.QName(node).localname.lower()


def text_content(node) -> str:
    """Full text content of a node, nested markup included, tail excluded."""
    if not isinstance(node.tag, str):
        return ""
    return "".join(node.itertext())


def element_children(node) -> Iterator:
    """Iterate over the element children of a node, skipping comments."""
    for child in node:
        if isinstance(child.tag, str):
            yield child


def strip_namespaces(root) -> None:
    """
    Drop element namespaces in place so that kinds and XPath queries
    work on namespaced and plain JATS alike. Attribute namespaces such
    as xlink are kept.
    """
    for el in root.iter():
        if isinstance(el.tag, str) and el.tag.startswith("{"):
            el.tag = etree.QName(el).localname
    etree.cleanup_namespaces(root)
