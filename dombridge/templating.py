"""Jinja environment for the HTML shell and generated JavaScript modules."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

TEMPLATES_DIR = Path(__file__).with_name("templates")


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    loader = FileSystemLoader(str(TEMPLATES_DIR))
    return Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def render_template(name: str, **context: object) -> str:
    return get_environment().get_template(name).render(**context)


__all__ = ["TEMPLATES_DIR", "get_environment", "render_template"]
