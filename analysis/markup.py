"""
Sanitizer for stored analysis markup.

Analysis results are stored exactly as the generation backend returned them.
Before rendering, anything outside the small tag set the prompt allows is
unwrapped to its text, every attribute is dropped, and comments, CDATA
sections, declarations and processing instructions are removed.
"""
import re

from bs4 import BeautifulSoup
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction

from .prompts import ALLOWED_TAGS

DROPPED_TAGS = ("script", "style")
SPECIAL_STRINGS = (Comment, CData, Declaration, Doctype, ProcessingInstruction)
CODE_FENCE_RE = re.compile(r"^\s*```[a-zA-Z]*\s*$", re.MULTILINE)


def strip_code_fences(text: str) -> str:
    return CODE_FENCE_RE.sub("", text or "").strip()


def sanitize_analysis_markup(text: str) -> str:
    """
    Return ``text`` reduced to h4, p, ul, li and strong elements without attributes.
    """
    soup = BeautifulSoup(strip_code_fences(text), "html.parser")

    # bs4 writes these nodes back out verbatim
    for node in soup.find_all(string=lambda s: isinstance(s, SPECIAL_STRINGS)):
        node.extract()

    for tag in soup.find_all(list(DROPPED_TAGS)):
        tag.decompose()

    for tag in soup.find_all(True):
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
        else:
            tag.attrs = {}

    return str(soup).strip()
