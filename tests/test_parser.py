from __future__ import annotations

import pytest

from snail_markup.config import SnailConfig
from snail_markup.constants import TOC_PLACEHOLDER
from snail_markup.models import RenderState
from snail_markup.parser import BlockParser, advance_section_number, box_style

TOGGLE = " onclick=\"this.parentElement.classList.toggle('snail-collapsed')\""


def _numbers(depths: list[int]) -> list[str]:
    state = RenderState()
    return [advance_section_number(state, depth) for depth in depths]


def test_section_numbers_follow_depth():
    assert _numbers([1, 2, 2, 1, 2]) == ["1.", "1.1.", "1.2.", "2.", "2.1."]


def test_section_numbers_relative_to_first_header():
    assert _numbers([2, 3, 1, 2]) == ["1.", "1.1.", "", "1."]


def test_skipped_depth_numbers_with_zero():
    assert _numbers([1, 3]) == ["1.", "1.0.1."]


def test_header_section():
    html = BlockParser().parse_block(["[Intro]", "text", "]END["])

    assert html == (
        '<div class="snail-section snail-level-1">'
        f'<h1 class="snail-header" id="snail-section-1"{TOGGLE}>'
        '<span class="snail-number">1.</span> Intro</h1>'
        '<div class="snail-content"><p>text</p></div></div>'
    )


def test_header_title_is_inline_formatted():
    html = BlockParser().parse_block(["[!!Bold!! title]"])

    assert "<span class=\"snail-number\">1.</span> <b>Bold</b> title</h1>" in html


def test_deep_headers_use_div():
    parser = BlockParser()
    html = parser.parse_block(["[" * 7 + "Deep"])

    assert '<div class="snail-header snail-h7" id="snail-section-1"' in html
    assert "<h7" not in html
    assert parser.state.toc[0].depth == 7


def test_shallower_header_closes_section():
    parser = BlockParser()
    html = parser.parse_block(["[A]", "a", "[B]", "b"])

    assert html.count('<div class="snail-section snail-level-1">') == 2
    assert [entry.number for entry in parser.state.toc] == ["1.", "2."]


def test_nested_sections_need_their_own_terminators():
    parser = BlockParser()
    html = parser.parse_block(["[A]", "[[B]]", "inner", "]END[", "after", "]END[", "tail"])

    assert "<p>inner</p></div></div><p>after</p></div></div><p>tail</p>" in html
    assert [entry.title for entry in parser.state.toc] == ["A", "B"]


def test_terminator_keeps_leading_text():
    html = BlockParser().parse_block(["[A]", "last words]END[", "after"])

    assert "<p>last words</p></div></div><p>after</p>" in html


def test_raw_block_hides_section_boundaries():
    parser = BlockParser()
    html = parser.parse_block(
        ["[A]", "{|", "[B] not a header", "]END[ not an end", "|}", "]END["]
    )

    assert len(parser.state.toc) == 1
    assert "<div>[B] not a header<br>]END[ not an end<br></div>" in html


def test_unterminated_section_closes_at_end():
    html = BlockParser().parse_block(["[A]", "text"])

    assert html.endswith("<p>text</p></div></div>")


def test_collapse_hook_can_be_disabled():
    html = BlockParser(config=SnailConfig(collapsible=False)).parse_block(["[A]"])

    assert "onclick" not in html


def test_anchor_prefix_from_config():
    html = BlockParser(config=SnailConfig(anchor_prefix="sec")).parse_block(["[A]"])

    assert 'id="sec1"' in html


def test_multi_line_box():
    html = BlockParser().parse_block(["%%[200,auto]{right}%%", "inside", "%%END%%", "after"])

    assert html == (
        '<div style="width: 200px; height: auto; overflow: auto; border: 1px solid #ccc; '
        'padding: 10px; float: right; margin-left: 10px;" class="snail-box">'
        "<p>inside</p></div><p>after</p>"
    )


def test_single_line_box():
    html = BlockParser().parse_block(["%%[auto,auto]%%hello%%END%%", "next"])

    assert html == (
        '<div style="width: auto; height: auto; overflow: auto; border: 1px solid #ccc; '
        'padding: 10px; float: left; margin-right: 10px;" class="snail-box">'
        "<p>hello</p></div><p>next</p>"
    )


def test_nested_boxes():
    html = BlockParser().parse_block(
        ["%%[300,300]%%", "%%[100,100]{center}%%", "deep", "%%END%%", "outer", "%%END%%", "after"]
    )

    assert html.count('class="snail-box"') == 2
    assert "margin: 0 auto;" in html
    assert html.index("<p>deep</p>") < html.index("<p>outer</p>")
    assert html.endswith("</div><p>after</p>")


def test_single_line_box_inside_box():
    html = BlockParser().parse_block(["%%[10,10]%%", "%%[5,5]%%x%%END%%", "y", "%%END%%"])

    assert html.count('class="snail-box"') == 2
    assert html.endswith("<p>y</p></div>")


@pytest.mark.parametrize(
    ("position", "suffix"),
    [
        ("left", "float: left; margin-right: 10px;"),
        ("right", "float: right; margin-left: 10px;"),
        ("center", "margin: 0 auto;"),
        ("middle", "float: left; margin-right: 10px;"),
    ],
)
def test_box_style(position: str, suffix: str):
    assert box_style("10", "auto", position).endswith(suffix)


def test_html_block_is_verbatim():
    html = BlockParser().parse_block(["<<html>>", "<b>raw</b>", ">>END<<", "x"])

    assert html == "<b>raw</b>\n<p>x</p>"


def test_quote():
    assert BlockParser().parse_block(['""', "!!q!!", '""']) == (
        "<blockquote><p><b>q</b></p></blockquote>"
    )


def test_raw_blocks():
    parser = BlockParser()

    assert parser.parse_block(["{|!!not bold!!|}"]) == "<div>!!not bold!!</div>"
    assert parser.parse_block(["{|", "!!a!! <b>", "line2|}"]) == (
        "<div>!!a!! &lt;b&gt;<br>line2</div>"
    )


def test_rules():
    parser = BlockParser()

    assert parser.parse_block(["----"]) == "<hr>"
    assert parser.parse_block(["--[red]--"]) == '<hr style="border-color: red;">'
    assert parser.parse_block(['--["x]--']) == '<hr style="border-color: &quot;x;">'


def test_blank_line_and_paragraph():
    assert BlockParser().parse_block(["", "  indented"]) == "<br><p>  indented</p>"


def test_metadata_forms():
    html = BlockParser().parse_block(["*|*Doc*|*", "?!|Guides|!?", "*!!|Read me|!!*"])

    assert html == (
        '<h1 class="snail-doc-title">Doc</h1>'
        '<div class="snail-category">Guides</div>'
        '<div class="snail-big-box">Read me</div>'
    )


def test_lists_and_tables_consume_runs():
    html = BlockParser().parse_block(["- a", "- b", "[{x}]", "[{y}]", "end"])

    assert html == (
        "<ul><li>a</li><li>b</li></ul>"
        '<div class="snail-table-wrapper"><table class="snail-table">'
        "<tr><td>x</td></tr><tr><td>y</td></tr></table></div>"
        "<p>end</p>"
    )


def test_root_emits_toc_placeholder_after_metadata():
    parser = BlockParser()
    html = parser.parse_block(["*|*T*|*", "", "text"], is_root=True)

    assert html == f'<h1 class="snail-doc-title">T</h1><br>{TOC_PLACEHOLDER}<p>text</p>'
    assert parser.state.toc_inserted


def test_nested_calls_do_not_emit_placeholder():
    html = BlockParser().parse_block(["text"])

    assert TOC_PLACEHOLDER not in html


def test_excessive_nesting_falls_back_to_raw_text():
    lines = ["%%[1,1]%%"] * 70 + ["x"] + ["%%END%%"] * 70

    html = BlockParser().parse_block(lines)

    assert 'class="snail-box"' in html
    assert "%%[1,1]%%" in html
