"""
Serialization of export graphs to Turtle or JSON-LD.
"""

import logging
from typing import Optional

from rdflib import Graph

from ...constants import ExportDefaults


logger = logging.getLogger(__name__)

_RDFLIB_FORMATS = {
    "turtle": "turtle",
    "json-ld": "json-ld",
}


def normalize_format(fmt: Optional[str] = None) -> str:
    """
    Validate an output format name.

    A missing or blank format selects Turtle; matching is case-insensitive.

    Raises:
        ValueError: If the format is not supported.
    """
    if fmt is None or not fmt.strip():
        return ExportDefaults.DEFAULT_FORMAT
    normalized = fmt.strip().lower()
    if normalized not in ExportDefaults.SUPPORTED_FORMATS:
        raise ValueError("Format must be one of: turtle, json-ld")
    return normalized


def cleanup_prefixes(content: str) -> str:
    """
    Rewrite SPARQL-style ``PREFIX`` directives into Turtle ``@prefix`` form.

    Only the leading block of prefix lines is rewritten; the first other line
    ends the block. Content without any prefix declaration is returned as is.
    """
    if "@prefix" not in content and "PREFIX" not in content:
        return content

    lines = []
    in_prefixes = True
    for line in content.split("\n"):
        if in_prefixes and line.startswith("PREFIX"):
            line = line.replace("PREFIX", "@prefix") + " ."
        else:
            in_prefixes = False
        lines.append(line)
    return "\n".join(lines)


def serialize(graph: Graph, fmt: str = ExportDefaults.DEFAULT_FORMAT) -> str:
    """
    Serialize a graph and apply prefix cleanup.

    Args:
        graph: Graph to serialize.
        fmt: ``turtle`` or ``json-ld``.

    Returns:
        The serialized document.
    """
    normalized = normalize_format(fmt)
    content = graph.serialize(format=_RDFLIB_FORMATS[normalized])
    if isinstance(content, bytes):
        content = content.decode("utf-8")
    logger.debug(f"Serialized {len(graph)} triples as {normalized}")
    return cleanup_prefixes(content)
