"""markdown-it token utilities for inspecting content bodies"""

from markdown_it import MarkdownIt


_md = MarkdownIt("commonmark")


def _walk(tokens):
    for tok in tokens:
        yield tok
        if tok.children:
            yield from _walk(tok.children)


def image_sources(body: str) -> list[str]:
    """Return image src attributes in document order, deduplicated."""
    srcs = [
        tok.attrGet("src")
        for tok in _walk(_md.parse(body))
        if tok.type == "image" and tok.attrGet("src")
    ]
    return list(dict.fromkeys(srcs))
