"""Minimal HTML host page for a DOM component bundle."""

from __future__ import annotations

from typing import Optional

from .templating import render_template


def build_shell(src: Optional[str] = None, *, title: Optional[str] = None) -> str:
    """Return the HTML document that boots a DOM component bundle.

    Without ``src`` the page renders an empty root; without ``title`` the
    ``<title>`` element is omitted.
    """
    # General React DOM page; nothing here is tuned for react-native-web.
    return render_template("dom_component.html.j2", src=src, title=title)


__all__ = ["build_shell"]
