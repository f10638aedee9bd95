"""Style sheet for the classes emitted by the renderer.

The renderer emits only class names and inline styles; a host injects this
sheet once per page.
"""

from __future__ import annotations

import html

STYLE_ELEMENT_ID = "snail-engine-styles"

STYLE_SHEET = """\
.snail-header { margin-top: 1em; margin-bottom: 0.5em; font-weight: bold; cursor: pointer; user-select: none; }
.snail-header::before { content: '▼'; display: inline-block; margin-right: 8px; font-size: 0.8em; transition: transform 0.2s; color: #007BFF; }
.snail-number { color: #005BDD; margin-right: 5px; }
.snail-collapsed > .snail-header::before { transform: rotate(-90deg); }
.snail-collapsed > .snail-content { display: none; }
.snail-level-1 > .snail-header { font-size: 2em; border-bottom: 2px solid #005BDD; }
.snail-level-2 > .snail-header { font-size: 1.75em; border-bottom: 1px solid #005BDD; }
.snail-level-3 > .snail-header { font-size: 1.5em; border-bottom: 1px solid #005BDD; }
.snail-level-4 > .snail-header { font-size: 1.25em; border-bottom: 1px solid #005BDD; }
.snail-level-5 > .snail-header { font-size: 1.1em; border-bottom: 1px solid #005BDD; }
.snail-level-6 > .snail-header { font-size: 1em; border-bottom: 1px solid #005BDD; }
.snail-h7, .snail-h8, .snail-h9 { font-size: 0.95em; }
.snail-h10, .snail-h11, .snail-h12 { font-size: 0.9em; }
.snail-section { margin-left: 20px; border-left: 1px solid #eee; padding-left: 10px; }
.snail-level-1 { margin-left: 0; border-left: none; padding-left: 0; }
.snail-box { background: #f9f9f9; }
.snail-hidden { opacity: 0; transition: opacity 0.2s; cursor: help; }
.snail-hidden:hover { opacity: 1; }
.snail-table { border-collapse: collapse; margin: 10px 0; }
.snail-table-wrapper { display: table; margin: 10px 0; }
.snail-table-wrapper .snail-table { display: table; width: 100%; margin: 0; }
.snail-table-wrapper .snail-table + .snail-table { margin-top: -1px; }
.snail-table td { border: 1px solid #ccc; padding: 5px; vertical-align: top; }
.snail-split-cell { display: flex; flex-direction: row; margin: -5px; }
.snail-split-cell > div { flex: 1; padding: 5px; border-right: 1px solid #ccc; }
.snail-split-cell > div:last-child { border-right: none; }
.snail-table.nested { margin: 0; }
.snail-doc-title { text-align: center; font-size: 3em; margin-bottom: 10px; color: #005BDD; }
.snail-category { text-align: center; color: #666; margin-bottom: 20px; font-style: italic; }
.snail-big-box { border: 2px solid #333; padding: 20px; font-size: 2em; text-align: center; background: #eee; margin: 20px 0; font-weight: bold; }
blockquote { border-left: 4px solid #005BDD; margin: 10px 0; padding-left: 10px; color: #555; }
kbd { border: 1px solid #ccc; padding: 2px 4px; border-radius: 3px; background: #f5f5f5; font-family: monospace; }
code { background: #f5f5f5; padding: 2px 4px; border-radius: 3px; font-family: monospace; }
.snail-toc { background: #f9f9f9; border: 1px solid #ddd; padding: 15px; margin-bottom: 20px; display: inline-block; min-width: 200px; }
.snail-toc h3 { margin-top: 0; font-size: 1.2em; border-bottom: 1px solid #ddd; padding-bottom: 5px; }
.snail-toc ul { padding-left: 20px; margin: 0; }
.snail-toc li { list-style-type: none; margin: 5px 0; }
.snail-toc a { text-decoration: none; color: #333; }
.snail-toc a:hover { text-decoration: underline; color: #000; }
.snail-tooltip { position: relative; display: inline-block; }
.snail-tooltip-trigger { cursor: help; color: #555; font-size: 0.8em; vertical-align: super; }
.snail-tooltip-content { visibility: hidden; width: 200px; background-color: #f5f5f5; border: 1px solid #005BDD; color: #000; text-align: center; padding: 5px; position: absolute; z-index: 1; bottom: 125%; left: 50%; margin-left: -100px; opacity: 0; transition: opacity 0.3s; font-size: 0.9rem; font-weight: normal; }
.snail-tooltip:hover .snail-tooltip-content { visibility: visible; opacity: 1; }
p { margin: 0.3em 0; }
br { display: block; content: ""; margin: 0.2em 0; }
"""


def build_standalone_document(body: str, title: str = "") -> str:
    """Wrap rendered markup in a complete HTML page carrying the style sheet.

    Args:
        body: HTML produced by `render`.
        title: Text for the page ``<title>``; escaped before insertion.

    Returns:
        str: A full HTML document with the style sheet injected once.

    Examples:
        build_standalone_document(render("*|*Notes*|*"), title="Notes")
    """
    return (
        "<!DOCTYPE html>\n"
        '<html>\n<head>\n<meta charset="utf-8">\n'
        f"<title>{html.escape(title)}</title>\n"
        f'<style id="{STYLE_ELEMENT_ID}">\n{STYLE_SHEET}</style>\n'
        "</head>\n<body>\n"
        f"{body}\n"
        "</body>\n</html>\n"
    )
