"""On-disk virtual entry modules for DOM components."""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Awaitable, Callable

from .identity import content_hash
from .logging import get_logger
from .models import DEFAULT_HOST_MODULE, SourceReference, VirtualEntryModule
from .templating import render_template

SettleStrategy = Callable[[Path], Awaitable[None]]

DEFAULT_SETTLE_DELAY = 1.0


def sleep_settle(delay: float = DEFAULT_SETTLE_DELAY) -> SettleStrategy:
    """Return a settle strategy that waits a fixed interval.

    A file-watching bundler needs time to index a freshly created file before
    it can serve a bundle for it. The fixed sleep stands in for a real
    "file is visible" signal.
    """

    async def _settle(_: Path) -> None:
        await asyncio.sleep(delay)

    return _settle


def entry_path_for(source: SourceReference, entry_dir: Path) -> Path:
    return entry_dir / f"{content_hash(source.url)}.js"


def render_entry_module(
    generated_path: Path,
    file_path: Path,
    *,
    host_module: str = DEFAULT_HOST_MODULE,
) -> VirtualEntryModule:
    """Render the entry module that lazily imports ``file_path``."""
    relative = os.path.relpath(file_path, generated_path.parent).replace(os.sep, "/")
    if not relative.startswith("."):
        relative = "./" + relative

    # The bundler transform cache keys on file contents, so any change here must
    # also change the generated text.
    contents = render_template(
        "entry.js.j2",
        host_module=json.dumps(host_module),
        import_path=json.dumps(relative),
    )
    return VirtualEntryModule(path=generated_path, contents=contents)


class VirtualEntryGenerator:
    """Writes one entry module per DOM component into ``entry_dir``."""

    def __init__(
        self,
        entry_dir: Path,
        *,
        host_module: str = DEFAULT_HOST_MODULE,
        settle: SettleStrategy | None = None,
    ) -> None:
        self.entry_dir = Path(entry_dir)
        self.host_module = host_module
        self._settle = settle or sleep_settle()
        self._logger = get_logger("entry")

    async def ensure_entry(self, source: SourceReference) -> Path:
        """Write the entry for ``source`` and return its path.

        The file is always overwritten. When it did not exist before, the call
        waits for the settle strategy so the bundler can pick it up. The target
        source file is not checked; resolution errors surface in the bundler.
        """
        generated_path = entry_path_for(source, self.entry_dir)
        module = render_entry_module(
            generated_path, source.path, host_module=self.host_module
        )

        loop = asyncio.get_running_loop()
        existed = await loop.run_in_executor(None, _write_entry, module)
        self._logger.debug(
            "Wrote DOM component entry %s for %s (new=%s)",
            module.path,
            source.url,
            not existed,
        )

        if not existed:
            await self._settle(module.path)
        return module.path


def _write_entry(module: VirtualEntryModule) -> bool:
    module.path.parent.mkdir(parents=True, exist_ok=True)
    existed = module.path.exists()
    module.path.write_text(module.contents, encoding="utf-8")
    return existed


__all__ = [
    "DEFAULT_SETTLE_DELAY",
    "SettleStrategy",
    "VirtualEntryGenerator",
    "entry_path_for",
    "render_entry_module",
    "sleep_settle",
]
