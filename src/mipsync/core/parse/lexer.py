"""Flatten markdown-it tokens into top-level block nodes with their source text"""

from dataclasses import dataclass
from typing import Optional

from markdown_it import MarkdownIt


NODE_TYPE_MAP: dict[str, str] = {
    'heading_open':      'heading',
    'paragraph_open':    'paragraph',
    'bullet_list_open':  'list',
    'ordered_list_open': 'list',
    'fence':             'code',
    'code_block':        'code',
    'table_open':        'table',
    'html_block':        'html',
    'blockquote_open':   'blockquote',
    'hr':                'hr',
}


@dataclass
class Node:
    """One top-level markdown block."""
    type:  str
    raw:   str                      # source lines up to the next block, trailing blank lines included
    text:  str = ''                 # inline content for headings/paragraphs, body for code/html
    depth: Optional[int] = None     # heading level (1-6); None for non-headings

    def is_heading(self, name: str | None = None) -> bool:
        """True for headings, optionally only those titled `name` (case-insensitive)."""
        if self.type != 'heading':
            return False
        return name is None or self.text.strip().rstrip(':').strip().lower() == name.lower()


def make_parser(preset: str = 'gfm-like') -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def heading_level(token) -> int | None:
    """Return the heading level (1-6) for a heading_open token, else None."""
    if token.type == 'heading_open' and token.tag and token.tag[0] == 'h' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def _node_text(tokens: list, i: int, raw: str) -> str:
    tok = tokens[i]
    if tok.type in ('heading_open', 'paragraph_open'):
        inline = tokens[i + 1] if i + 1 < len(tokens) else None
        return inline.content if inline is not None and inline.type == 'inline' else ''
    if tok.type in ('fence', 'code_block', 'html_block'):
        return tok.content
    return raw.strip()


def lex(text: str, parser_config: str = 'gfm-like') -> list[Node]:
    """Tokenize text and return its top-level blocks in document order."""
    tokens = make_parser(parser_config).parse(text)
    lines = text.splitlines(keepends=True)

    starts = [
        (i, tok) for i, tok in enumerate(tokens)
        if tok.level == 0 and tok.nesting != -1 and tok.map and tok.type in NODE_TYPE_MAP
    ]

    nodes: list[Node] = []
    for n, (i, tok) in enumerate(starts):
        begin = tok.map[0]
        end = starts[n + 1][1].map[0] if n + 1 < len(starts) else len(lines)
        raw = ''.join(lines[begin:end])
        nodes.append(Node(
            type=NODE_TYPE_MAP[tok.type],
            raw=raw,
            text=_node_text(tokens, i, raw),
            depth=heading_level(tok),
        ))
    return nodes
