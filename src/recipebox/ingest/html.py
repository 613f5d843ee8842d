"""Plain-text rendering of HTML pages for the recipe text parser."""

import re

from bs4 import BeautifulSoup

# Tags whose end starts a new line of text
BLOCK_TAGS = [
    "p", "div", "li", "tr", "section", "article", "header", "footer",
    "h1", "h2", "h3", "h4", "h5", "h6", "ul", "ol", "table", "blockquote",
]
DROPPED_TAGS = ["script", "style", "noscript", "template"]

_SPACES_RE = re.compile(r"[ \t\u00a0]+")
_SPACE_AROUND_NEWLINE_RE = re.compile(r" *\n *")
_BLANK_LINES_RE = re.compile(r"\n{3,}")


def html_to_text(html: str) -> str:
    """Strip markup, keeping one line per block element and ``<br>``.

    Only the ``<body>`` is rendered when the document has one.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    root = soup.body or soup
    for tag in soup(DROPPED_TAGS):
        tag.decompose()
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for tag in soup.find_all(BLOCK_TAGS):
        tag.append("\n")

    text = root.get_text()
    text = _SPACES_RE.sub(" ", text)
    text = _SPACE_AROUND_NEWLINE_RE.sub("\n", text)
    return _BLANK_LINES_RE.sub("\n\n", text).strip()


def extract_title(html: str) -> str:
    """Return the page's ``<title>``, whitespace collapsed."""
    soup = BeautifulSoup(html or "", "html.parser")
    if soup.title is None:
        return ""
    return " ".join(soup.title.get_text().split())
