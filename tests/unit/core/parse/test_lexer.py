"""Unit tests for core/parse/lexer.py"""

from mipsync.core.parse.lexer import Node, heading_level, lex, make_parser


def test_lex_node_types(mip_md):
    nodes = lex(mip_md)
    assert nodes[0].type == "heading"
    assert nodes[0].depth == 1
    assert nodes[0].text == "MIP0: The Maker Improvement Proposal Framework"
    assert [n.type for n in nodes[1:3]] == ["heading", "code"]
    assert nodes[-1].type == "list"


def test_lex_code_text_is_fence_body(mip_md):
    fence = next(n for n in lex(mip_md) if n.type == "code")
    assert fence.text.startswith("MIP#: 0\n")
    assert "```" not in fence.text


def test_lex_raw_keeps_trailing_blank_lines():
    nodes = lex("Para one.\n\nPara two.\n")
    assert [n.raw for n in nodes] == ["Para one.\n\n", "Para two.\n"]


def test_lex_skips_nested_blocks():
    """List items and their paragraphs are not separate top-level nodes."""
    nodes = lex("- a\n- b\n\n> quoted\n")
    assert [n.type for n in nodes] == ["list", "blockquote"]


def test_lex_empty_text():
    assert lex("") == []


def test_heading_level_non_heading():
    tokens = make_parser().parse("text\n")
    assert heading_level(tokens[0]) is None


def test_is_heading_by_name_ignores_case_and_colon():
    node = Node(type="heading", raw="## Component summary:\n", text="Component summary:", depth=2)
    assert node.is_heading()
    assert node.is_heading("Component Summary")
    assert not node.is_heading("Preamble")


def test_is_heading_false_for_paragraph():
    assert not Node(type="paragraph", raw="Preamble\n", text="Preamble").is_heading("Preamble")
