import html

from somosdev.models import Post
from somosdev.templates import (
    base_layout,
    outline_button,
    posts_page,
    theme_switcher_script,
)


def test_base_layout_wraps_children():
    page = base_layout("<p>inner</p>")
    assert page.startswith("<!doctype html>")
    assert page.endswith("<p>inner</p></body></html>")
    assert '<link href="/assets/css/output.css" rel="stylesheet">' in page


def test_base_layout_includes_theme_script():
    page = base_layout("", "n1")
    assert theme_switcher_script("n1") in page
    assert page.index("<script nonce=") < page.index("</head>")


def test_theme_script_escapes_nonce():
    script = theme_switcher_script('a"b<c')
    assert 'a"b<c' not in script
    assert 'a"b<c' in html.unescape(script)
    assert "Alpine.data('themeHandler'" in script


def test_outline_button_escapes_go_style():
    button = outline_button("Tom & Jerry's", "/x", "_blank")
    assert "Tom &amp; Jerry&#39;s" in button
    assert 'target="_blank"' in button
    assert button.startswith('<a href="/x"')


def test_outline_button_without_target():
    button = outline_button("text", "/y", "")
    assert "target=" not in button
    assert html.unescape(button).endswith(">text</a>")


def test_posts_page_renders_each_post_in_order():
    posts = [Post(1, "first", "t1"), Post(2, "second", "t2")]
    page = posts_page(posts)
    assert page.count('target="_blank"') == len(posts)
    assert page.index("first") < page.index("second")


def test_posts_page_escapes_content():
    page = posts_page([Post(1, "<b>bold</b>", "t")])
    assert "<b>bold</b>" not in page
    assert "<b>bold</b>" in html.unescape(page)


def test_posts_page_null_content_is_empty_button():
    page = posts_page([Post(1, None, "t")])
    assert page.count("></a>") == 1
    assert "None" not in page


def test_posts_page_empty_is_plain_layout():
    assert posts_page([], "n") == base_layout("", "n")