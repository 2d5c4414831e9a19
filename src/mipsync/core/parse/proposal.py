"""Parse a proposal's markdown into a structured Proposal"""

from mipsync.core.hierarchy import FatherRule, RegexFatherRule
from mipsync.core.models import GitFile, Proposal
from mipsync.core.parse.components import ComponentSummaryWalker, get_components_section, split_components
from mipsync.core.parse.lexer import Node, lex
from mipsync.core.parse.preamble import parse_preamble


def section_nodes(nodes: list[Node], name: str) -> list[Node]:
    """Return the nodes under the first heading titled name, up to the next heading at or above it."""
    for i, node in enumerate(nodes):
        if node.is_heading(name):
            body = []
            for following in nodes[i + 1:]:
                if following.is_heading() and (following.depth or 1) <= (node.depth or 1):
                    break
                body.append(following)
            return body
    return []


def section_text(nodes: list[Node], name: str) -> str | None:
    """Return the source text of the non-heading nodes under heading name, or None."""
    parts = [n.raw.strip() for n in section_nodes(nodes, name) if not n.is_heading()]
    text = '\n\n'.join(p for p in parts if p)
    return text or None


class ProposalParser:
    """Turn raw proposal markdown plus its GitFile descriptor into a Proposal.

    Never raises on content: missing sections leave the matching fields unset.
    """

    def __init__(self, parser_config: str = 'gfm-like', father_rule: FatherRule | None = None):
        self.parser_config = parser_config
        self.father_rule = father_rule or RegexFatherRule()

    def parse(self, raw_text: str, item: GitFile) -> Proposal:
        nodes = lex(raw_text, self.parser_config)

        preamble_block = next((n for n in section_nodes(nodes, 'Preamble') if not n.is_heading()), None)
        preamble = parse_preamble(preamble_block.text if preamble_block else None)

        components_text = ComponentSummaryWalker().render(nodes)
        components = split_components(get_components_section(components_text))

        title = next((n.text for n in nodes if n.is_heading() and n.depth == 1), None)
        if preamble.subproposal:
            mip_name = preamble.subproposal
        elif preamble.mip is not None:
            mip_name = f"MIP{preamble.mip}"
        else:
            mip_name = None

        proposal = Proposal(
            filename=item.filename,
            hash=item.hash,
            language=item.language,
            file=raw_text,
            title=title,
            mip_name=mip_name,
            sentence_summary=section_text(nodes, 'Sentence Summary'),
            paragraph_summary=section_text(nodes, 'Paragraph Summary'),
            components=components,
            **preamble.model_dump(exclude_none=True),
        )
        proposal.proposal = self.father_rule(proposal)
        return proposal
