"""Compile-time handling of the ``"use dom"`` directive."""

from .errors import DomTransformError, code_frame
from .use_dom import (
    USE_DOM_DIRECTIVE,
    has_use_dom_directive,
    resolve_source_uri,
    transform_module,
)

__all__ = [
    "DomTransformError",
    "USE_DOM_DIRECTIVE",
    "code_frame",
    "has_use_dom_directive",
    "resolve_source_uri",
    "transform_module",
]
