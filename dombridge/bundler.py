"""Bundle URL construction understood by the dev bundler."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple
from urllib.parse import quote, urlencode, urljoin

from .config import BundlerConfig
from .models import MODE_DEVELOPMENT, MODE_PRODUCTION

# Characters left intact by JavaScript's encodeURI.
_ENCODE_URI_SAFE = "/;,?:@&=+$-_.!~*'()#"
_JS_SUFFIX = re.compile(r"\.js$")


@dataclass(frozen=True)
class BundleOptions:
    """Options serialised into a bundle request."""

    main_module_name: Optional[str] = None
    platform: Optional[str] = None
    mode: str = MODE_DEVELOPMENT
    engine: Optional[str] = None
    bytecode: bool = False
    is_dom: bool = False
    lazy: bool = False
    minify: bool = False
    is_exporting: bool = False
    environment: Optional[str] = None
    base_url: Optional[str] = None

    @classmethod
    def from_config(cls, config: BundlerConfig) -> "BundleOptions":
        return cls(
            mode=config.mode,
            engine=config.engine,
            minify=config.minify,
            environment=config.environment,
            base_url=config.base_url,
        )


def create_bundle_url_path(options: BundleOptions) -> str:
    """Return ``/<module>.bundle?<query>`` for the given options."""
    if not options.main_module_name:
        raise ValueError("main_module_name is required to build a bundle URL")
    if not options.platform:
        raise ValueError("platform is required to build a bundle URL")

    module = _JS_SUFFIX.sub("", options.main_module_name.replace("\\", "/"))
    path = "/" + quote(module.lstrip("/"), safe=_ENCODE_URI_SAFE) + ".bundle"

    params: List[Tuple[str, str]] = [
        ("platform", options.platform),
        ("dev", _flag(options.mode != MODE_PRODUCTION)),
        ("hot", "false"),
    ]
    if options.lazy:
        params.append(("lazy", "true"))
    if options.minify:
        params.append(("minify", "true"))
    if options.engine:
        params.append(("transform.engine", options.engine))
    params.append(("transform.bytecode", "1" if options.bytecode else "0"))
    if options.is_dom:
        params.append(("transform.dom", "true"))
    if options.is_exporting:
        params.append(("resolver.exporting", "true"))
    if options.environment:
        params.append(("resolver.environment", options.environment))
        params.append(("transform.environment", options.environment))
    if options.base_url:
        params.append(("transform.baseUrl", options.base_url))

    return f"{path}?{urlencode(params)}"


def create_bundle_url(options: BundleOptions, dev_server_url: str) -> str:
    """Return an absolute bundle URL rooted at the dev server."""
    return urljoin(dev_server_url, create_bundle_url_path(options))


def _flag(value: bool) -> str:
    return "true" if value else "false"


__all__ = ["BundleOptions", "create_bundle_url", "create_bundle_url_path"]
