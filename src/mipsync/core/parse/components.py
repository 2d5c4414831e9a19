"""Component Summary handling: summary-aware text reconstruction, isolation and splitting"""

import re

from mipsync.core.models import ComponentSection
from mipsync.core.parse.lexer import Node


COMPONENT_SUMMARY = 'Component Summary'

SUMMARY_HEADING_RE = re.compile(
    r'^(?P<hashes>#{1,6})[ \t]+Component Summary[ \t]*:?[ \t]*#*[ \t]*$', re.MULTILINE | re.IGNORECASE,
)
HEADING_RE = re.compile(r'^(?P<hashes>#{1,6})[ \t]+\S', re.MULTILINE)
COMPONENT_LABEL_RE = re.compile(
    r'^[ \t]*(?:[-*+][ \t]+|#{1,6}[ \t]+)?\*{0,2}(?P<label>MIP\d+[ac]\d+)\*{0,2}[ \t]*:[ \t]*(?P<title>.*?)[ \t]*$',
    re.MULTILINE,
)
LABEL_SECTION_LEVEL = 2     # level assumed for a summary found by its first label


def render_node(node: Node, on_component_summary: bool) -> str:
    """Render a node back to markdown.

    Headings are rebuilt from depth and text; other nodes keep their source,
    followed by one blank line outside the summary and untouched inside it.
    """
    if node.type == 'heading':
        return f"{'#' * (node.depth or 1)} {node.text}\n\n"
    if not on_component_summary:
        return f"{node.raw.rstrip()}\n\n"
    return node.raw


class ComponentSummaryWalker:
    """Two-state machine over a node sequence: outside or inside the Component Summary.

    Entering happens on the Component Summary heading; leaving happens on the
    next heading at or above that heading's level.
    """

    def __init__(self):
        self.inside = False
        self.level: int | None = None

    def step(self, node: Node) -> bool:
        """Advance over node and return whether it is rendered as part of the summary."""
        if node.is_heading(COMPONENT_SUMMARY):
            self.inside, self.level = True, node.depth
        elif self.inside and node.is_heading() and (node.depth or 1) <= self.level:
            self.inside, self.level = False, None
        return self.inside

    def render(self, nodes: list[Node]) -> str:
        """Reconstruct the full markdown text of nodes."""
        return ''.join(render_node(node, self.step(node)) for node in nodes)


def get_components_section(text: str) -> str:
    """Return the Component Summary body of text, or '' when it has none.

    The section starts after the Component Summary heading (or, lacking one, at
    the first component label) and ends before the next heading at the same or
    a higher level. Without such a heading the rest of the text is returned as is.
    """
    heading = SUMMARY_HEADING_RE.search(text)
    if heading:
        level, start, search_from = len(heading['hashes']), heading.end(), heading.end()
    else:
        label = COMPONENT_LABEL_RE.search(text)
        if not label:
            return ''
        level, start, search_from = LABEL_SECTION_LEVEL, label.start(), label.end()

    for h in HEADING_RE.finditer(text, search_from):
        if len(h['hashes']) <= level:
            return text[start:h.start()].strip('\n')
    return text[start:].lstrip('\n')


def split_components(section: str) -> list[ComponentSection]:
    """Split a Component Summary body into one ComponentSection per label."""
    matches = list(COMPONENT_LABEL_RE.finditer(section))
    components = []
    for n, m in enumerate(matches):
        end = matches[n + 1].start() if n + 1 < len(matches) else len(section)
        components.append(ComponentSection(
            label=m['label'],
            title=m['title'].strip('*').strip(),
            text=section[m.end():end].strip(),
        ))
    return components
