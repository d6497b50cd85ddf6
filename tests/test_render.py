"""
Page renderer tests.

Run with:
    pytest tests/test_render.py -v
"""

from __future__ import annotations

from core.render import escaped_env, page_url, raw_env, render_page
from core.store import Comment


def _count_blocks(html: str) -> int:
    return html.count('class="comment"')


class TestRenderPage:
    """Document layout: comment blocks in order, then the form."""

    def test_empty_page_has_form_and_no_comments(self):
        html = render_page("demo", [])
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>demo</title>" in html
        assert 'action="/pages/demo/comments"' in html
        assert _count_blocks(html) == 0

    def test_comment_blocks_in_order(self):
        comments = [Comment(user="alice", body="hi"), Comment(user="bob", body="yo")]
        html = render_page("demo", comments)
        assert _count_blocks(html) == 2
        assert 'id="page-demo-comment-0"' in html
        assert 'id="page-demo-comment-1"' in html
        assert html.index("alice: ") < html.index("bob: ")
        assert html.index("bob: ") < html.index('id="comment-form"')

    def test_form_constraints_are_advisory_attributes(self):
        html = render_page("demo", [])
        assert 'maxlength="50"' in html
        assert 'pattern="[A-Za-z0-9]+"' in html
        assert 'maxlength="1000"' in html

    def test_pure_function(self):
        comments = [Comment(user="a", body="b")]
        assert render_page("p", comments) == render_page("p", comments)


class TestRawMarkup:
    """Known stored-XSS defect stays in place unless escaping is requested."""

    def test_user_markup_is_not_escaped(self):
        html = render_page("p", [Comment(user="<b>x</b>", body="y")])
        assert "<b>x</b>" in html
        assert "&lt;b&gt;" not in html

    def test_body_script_is_not_escaped(self):
        html = render_page("p", [Comment(user="u", body="<script>alert(1)</script>")])
        assert "<script>alert(1)</script>" in html

    def test_escape_mode_hardens_output(self):
        html = render_page("<i>p</i>", [Comment(user="<b>x</b>", body='"y"')], escape=True)
        assert "<b>x</b>" not in html
        assert "&lt;b&gt;x&lt;/b&gt;" in html
        assert "&#34;y&#34;" in html
        assert "<title>&lt;i&gt;p&lt;/i&gt;</title>" in html


class TestTemplateEnvironments:
    """One template, two jinja2 environments."""

    def test_autoescape_settings(self):
        assert raw_env.autoescape is False
        assert escaped_env.autoescape is True
        assert raw_env.get_template("page.html").filename.endswith("page.html")

    def test_form_action_is_percent_encoded(self):
        html = render_page("a/b c", [])
        assert 'action="/pages/a%2Fb%20c/comments"' in html
        assert "<title>a/b c</title>" in html

    def test_page_url(self):
        assert page_url("demo") == "/pages/demo"
        assert page_url("") == "/pages/"
        assert page_url("x/comments") == "/pages/x%2Fcomments"
