from __future__ import annotations

import html
import re
from urllib.parse import quote

import markdown

from .content import Document
from .neighbors import NO_NEIGHBORS, NeighborPair

MARKDOWN_EXTENSIONS = ["fenced_code", "tables"]
PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")

PRE_TAG = '<pre class="bg-gray-700 text-green-300 p-4 rounded mb-4 overflow-x-auto">'
CODE_TAG = '<code class="inline-block">'

# Applied top to bottom. The last rule matches text produced by the <pre> and
# <code> rules, so it has to stay after both.
TAG_REWRITES: tuple[tuple[str, str], ...] = (
    ("<h1>", '<h1 class="text-3xl font-bold">'),
    ("<h2>", '<h2 class="text-2xl font-bold mb-2">'),
    ("<p>", '<p class="text-gray-400 mb-4">'),
    ("<pre>", PRE_TAG),
    ("<code>", CODE_TAG),
    (PRE_TAG + CODE_TAG, PRE_TAG + '<code class="block">'),
)

BUTTON_CLASS = "bg-green-500 hover:bg-green-600 text-white font-bold py-2 px-4 rounded"
TAILWIND_HEAD = """<script src="https://cdn.tailwindcss.com"></script>
    <style>
        /* Additional styles can be added here if needed */
    </style>"""

HEADER_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{title}}</title>
    {{stylesheet}}
</head>
<body class="bg-gray-800 text-white">
    <div class="container mx-auto px-4 py-8">
        <div class="flex justify-between items-center mb-6">
            {{prev_button}}
            <h1 class="text-3xl font-bold">{{title}}</h1>
            {{next_button}}
        </div>
        <article>
"""

FOOTER = """</article>
    </div>

</body>

</html>"""


def render_template(template: str, **context: str) -> str:
    # One pass, so substituted values are never scanned for placeholders.
    def repl(match: re.Match) -> str:
        return context.get(match.group(1), match.group(0))

    return PLACEHOLDER_RE.sub(repl, template)


def markdown_to_html(body: str) -> str:
    md = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS)
    return md.convert(body)


def apply_tag_rewrites(fragment: str, rewrites: tuple[tuple[str, str], ...] = TAG_REWRITES) -> str:
    for match, replacement in rewrites:
        fragment = fragment.replace(match, replacement)
    return fragment


def page_href(document: Document) -> str:
    return document.source_path.with_suffix(".html").name


def nav_button(document: Document, label: str, rel: str) -> str:
    href = html.escape(quote(page_href(document)))
    title = html.escape(document.metadata.title)
    return f'<a class="{BUTTON_CLASS}" href="{href}" rel="{rel}" title="{title}"><span>{label}</span></a>'


def stylesheet_html(stylesheet: str) -> str:
    if stylesheet:
        return f'<link rel="stylesheet" href="{html.escape(stylesheet)}">'
    return TAILWIND_HEAD


def build_header(title: str, neighbors: NeighborPair = NO_NEIGHBORS, stylesheet: str = "") -> str:
    prev_button = nav_button(neighbors.previous, "&larr; Back", "prev") if neighbors.previous else ""
    next_button = nav_button(neighbors.next, "Next &rarr;", "next") if neighbors.next else ""
    return render_template(
        HEADER_TEMPLATE,
        title=html.escape(title),
        stylesheet=stylesheet_html(stylesheet),
        prev_button=prev_button,
        next_button=next_button,
    )


def render_page(document: Document, neighbors: NeighborPair = NO_NEIGHBORS, stylesheet: str = "") -> str:
    """Render ``document`` to a complete HTML page."""
    fragment = apply_tag_rewrites(markdown_to_html(document.body))
    header = build_header(document.metadata.title, neighbors, stylesheet)
    return f"{header}{fragment}{FOOTER}"
