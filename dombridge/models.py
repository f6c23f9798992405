"""Core data models shared by the directive transform and the dev middleware."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import (
    BUILD_MODES,
    DEFAULT_HOST_MODULE,
    DOM_COMPONENT_REFERENCE_KEY,
    MODE_DEVELOPMENT,
    MODE_PRODUCTION,
    PLATFORM_ANDROID,
    PLATFORM_IOS,
    PLATFORM_WEB,
    PLATFORMS,
)
from .identity import absolute_path, file_url_to_path, to_file_url


@dataclass(frozen=True)
class SourceReference:
    """Absolute file path paired with its canonical ``file://`` URL.

    Equality and hashing only consider ``url``.
    """

    url: str
    path: Path = field(compare=False)

    @classmethod
    def from_path(cls, path: str | Path) -> "SourceReference":
        resolved = absolute_path(path)
        return cls(url=to_file_url(resolved), path=resolved)

    @classmethod
    def from_url(cls, url: str) -> "SourceReference":
        return cls.from_path(file_url_to_path(url))


@dataclass
class VirtualEntryModule:
    """Generated bundler entry for a DOM component."""

    path: Path
    contents: str


@dataclass
class TransformContext:
    """Per-file compile state handed to the directive transform."""

    filename: Optional[str]
    platform: str
    mode: str = MODE_DEVELOPMENT
    host_module: str = DEFAULT_HOST_MODULE

    @property
    def is_production(self) -> bool:
        return self.mode == MODE_PRODUCTION


@dataclass
class TransformResult:
    """Output of a single module transform."""

    code: str
    transformed: bool
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def dom_component_reference(self) -> Optional[str]:
        value = self.metadata.get(DOM_COMPONENT_REFERENCE_KEY)
        return value if isinstance(value, str) else None


__all__ = [
    "BUILD_MODES",
    "DEFAULT_HOST_MODULE",
    "DOM_COMPONENT_REFERENCE_KEY",
    "MODE_DEVELOPMENT",
    "MODE_PRODUCTION",
    "PLATFORMS",
    "PLATFORM_ANDROID",
    "PLATFORM_IOS",
    "PLATFORM_WEB",
    "SourceReference",
    "TransformContext",
    "TransformResult",
    "VirtualEntryModule",
]
