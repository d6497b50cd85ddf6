from __future__ import annotations
import os
from typing import Iterable
from urllib.parse import quote

from jinja2 import Environment, FileSystemLoader

from core.store import Comment

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), "templates")

# KNOWN DEFECT (stored XSS): the default environment renders user content raw.
raw_env = Environment(loader=FileSystemLoader(TEMPLATES_DIR), autoescape=False)
escaped_env = Environment(loader=FileSystemLoader(TEMPLATES_DIR), autoescape=True)


def page_url(page_id: str) -> str:
    """URL path of a page, with the id percent-encoded as one segment."""
    return "/pages/" + quote(page_id, safe="")


def render_page(page_id: str, comments: Iterable[Comment], escape: bool = False) -> str:
    """
    Build the HTML document for one page: every comment in order, then the form.

    With escape=False the page id, user and body are embedded as raw markup.
    Pass escape=True for the hardened output.
    """
    env = escaped_env if escape else raw_env
    template = env.get_template("page.html")
    return template.render(page_id=page_id, page_path=page_url(page_id), comments=list(comments))
