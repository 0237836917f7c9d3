"""HTML rendering for the layout and pages."""

from __future__ import annotations

from collections.abc import Iterable

from somosdev.models import Post

ALPINE_SRC = "https://cdn.jsdelivr.net/npm/alpinejs@3.x.x/dist/cdn.min.js"
POST_LINK = "https://example.com"

_ESCAPES = str.maketrans(
    {"&": "&amp;", "'": "&#39;", "<": "&lt;", ">": "&gt;", '"': "&#34;"}
)

_THEME_SCRIPT_BODY = """
\t\t\t// Initial theme setup
\t\t\tdocument.documentElement.classList.toggle('dark', localStorage.getItem('appTheme') === 'dark');

\t\t\tdocument.addEventListener('alpine:init', () => {
\t\t\t\tAlpine.data('themeHandler', () => ({
\t\t\t\t\tisDark: localStorage.getItem('appTheme') === 'dark',
\t\t\t\t\tthemeClasses() {
\t\t\t\t\t\treturn this.isDark ? 'text-white' : 'bg-white text-black'
\t\t\t\t\t},
\t\t\t\t\ttoggleTheme() {
\t\t\t\t\t\tthis.isDark = !this.isDark;
\t\t\t\t\t\tlocalStorage.setItem('appTheme', this.isDark ? 'dark' : 'light');
\t\t\t\t\t\tdocument.documentElement.classList.toggle('dark', this.isDark);
\t\t\t\t\t}
\t\t\t\t}))
\t\t\t})
\t\t"""

_OUTLINE_CLASSES = (
    "inline-flex items-center justify-center rounded-md text-sm font-medium "
    "transition-colors focus-visible:outline-none focus-visible:ring-2 "
    "h-10 px-4 py-2 border border-input bg-background "
    "hover:bg-accent hover:text-accent-foreground"
)


def _escape(text: str) -> str:
    return text.translate(_ESCAPES)


def theme_switcher_script(nonce: str = "") -> str:
    """Render the script that keeps the light/dark theme in local storage."""
    return f'<script nonce="{_escape(nonce)}">{_THEME_SCRIPT_BODY}</script>'


def base_layout(children: str = "", nonce: str = "") -> str:
    """Wrap already-rendered ``children`` HTML in the site's document shell."""
    return (
        '<!doctype html><html lang="en" class="h-full dark"><head>'
        '<meta charset="UTF-8">'
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">'
        "<!-- Tailwind CSS (output) -->"
        '<link href="/assets/css/output.css" rel="stylesheet">'
        "<!-- Alpine.js -->"
        f'<script defer src="{ALPINE_SRC}"></script>'
        "<!-- Theme switcher script -->"
        f"{theme_switcher_script(nonce)}"
        '</head><body x-data="themeHandler" x-bind:class="themeClasses">'
        f"{children}"
        "</body></html>"
    )


def outline_button(content: str, href: str, target: str = "") -> str:
    """Render an outlined link button whose text is ``content``."""
    target_attr = f' target="{_escape(target)}"' if target else ""
    return (
        f'<a href="{_escape(href)}"{target_attr} class="{_OUTLINE_CLASSES}">'
        f"{_escape(content)}</a>"
    )


def posts_page(posts: Iterable[Post], nonce: str = "") -> str:
    """Render the page listing every post as a button."""
    buttons = "".join(
        outline_button(post.content or "", POST_LINK, "_blank") for post in posts
    )
    return base_layout(buttons, nonce)