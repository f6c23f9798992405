"""Bridge native component trees to browser-rendered DOM components."""

from .config import DomBridgeConfig, load_config
from .entry import VirtualEntryGenerator, render_entry_module
from .identity import content_hash, to_file_url
from .models import SourceReference, TransformContext, TransformResult
from .shell import build_shell
from .transform import DomTransformError, transform_module

__all__ = [
    "DomBridgeConfig",
    "DomTransformError",
    "SourceReference",
    "TransformContext",
    "TransformResult",
    "VirtualEntryGenerator",
    "build_shell",
    "content_hash",
    "load_config",
    "render_entry_module",
    "to_file_url",
    "transform_module",
]
