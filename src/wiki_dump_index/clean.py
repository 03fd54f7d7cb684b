"""Lossy wikitext cleaning used for the text and abstract fields.

The output is a flat sequence of ASCII letters, digits and spaces meant for
indexing, not for reading. The rewrites are plain regular expressions and do
not understand nesting; the order of the steps matters.
"""

from __future__ import annotations

import re

TAG_OPEN = "<<<<<"
TAG_CLOSE = ">>>>>"

TEMPLATE_RE = re.compile(r"\{\{[^}]*\}\}")
NAMESPACED_LINK_RE = re.compile(r"\[\[[^\]]+:[^\]]+\]\]")
TAG_SPAN_RE = re.compile(TAG_OPEN + r"[^>]*" + TAG_CLOSE)
PIPED_LINK_RE = re.compile(r"\[\[[^\]]+\|([^\]]+)\]\]")
ANCHOR_LINK_RE = re.compile(r"\[\[[^\]]+#([^\]]+)\]\]")
PLAIN_LINK_RE = re.compile(r"\[\[([^\]]*)\]\]")
EXTERNAL_LINK_RE = re.compile(r"\[http[^\]]*\]")
ENTITY_RE = re.compile(r"&[^&]*;")
NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]")

# Encoded references, math blocks and any other encoded tags, in this order.
TAG_MARKERS = (
    ("&lt;ref", TAG_OPEN),
    ("/ref&gt;", TAG_CLOSE),
    ("<math>", TAG_OPEN),
    ("</math>", TAG_CLOSE),
    ("&lt;", TAG_OPEN),
    ("&gt;", TAG_CLOSE),
)

# Longest first so that "'''" is not eaten as "''" plus a stray quote.
FORMATTING_MARKERS = ("=====", "====", "===", "==", "'''''", "''''", "'''", "''")

ENTITY_REPLACEMENTS = (
    ("&quot;", " "),
    ("&amp;", " and "),
    ("&ndash;", "-"),
)


def replace_tag_spans(text: str) -> str:
    """Drop encoded ``<...>`` spans by way of sentinel delimiters."""
    for marker, sentinel in TAG_MARKERS:
        text = text.replace(marker, sentinel)
    return TAG_SPAN_RE.sub(" ", text)


def filter_markup(text: str) -> str:
    """Turn raw wikitext into space-separated alphanumeric tokens."""
    if not text:
        return ""
    cleaned = TEMPLATE_RE.sub(" ", text)
    cleaned = NAMESPACED_LINK_RE.sub(" ", cleaned)
    cleaned = replace_tag_spans(cleaned)

    cleaned = PIPED_LINK_RE.sub(r" \1 ", cleaned)
    cleaned = ANCHOR_LINK_RE.sub(r" \1 ", cleaned)
    cleaned = PLAIN_LINK_RE.sub(r" \1 ", cleaned)
    cleaned = EXTERNAL_LINK_RE.sub(" ", cleaned)

    for marker in FORMATTING_MARKERS:
        cleaned = cleaned.replace(marker, " ")
    for entity, replacement in ENTITY_REPLACEMENTS:
        cleaned = cleaned.replace(entity, replacement)
    cleaned = ENTITY_RE.sub(" ", cleaned)

    return NON_ALNUM_RE.sub(" ", cleaned)
