"""XML utilities for WebDAV."""

from __future__ import annotations

import re

from lxml import etree

# lxml escapes "<", ">" and "&" in text itself; quotes are written as
# entity reference nodes so every one of the five characters is escaped.
QUOTE_ENTITIES = {"'": "apos", '"': "quot"}

_QUOTE_RE = re.compile(r"""(['"])""")


def set_escaped_text(element: etree._Element, text: str) -> None:
    """Set the text of ``element`` with quote characters as entity references.

    Args:
        element: Element whose text is replaced
        text: Raw text to store
    """
    for child in list(element):
        if isinstance(child, etree._Entity):
            element.remove(child)

    parts = _QUOTE_RE.split(text)
    element.text = parts[0]
    for i in range(1, len(parts), 2):
        entity = etree.Entity(QUOTE_ENTITIES[parts[i]])
        entity.tail = parts[i + 1]
        element.append(entity)


def format_xml(xml_bytes: bytes | str) -> str:
    """Format XML with proper indentation.

    Args:
        xml_bytes: XML content as bytes or string

    Returns:
        Pretty-formatted XML string, or the input as-is if it does not parse
    """
    if isinstance(xml_bytes, str):
        xml_bytes = xml_bytes.encode("utf-8")

    try:
        parser = etree.XMLParser(remove_blank_text=True)
        root = etree.fromstring(xml_bytes, parser)
    except etree.XMLSyntaxError:
        return xml_bytes.decode("utf-8", errors="replace")
    return etree.tostring(root, pretty_print=True, encoding="unicode")
