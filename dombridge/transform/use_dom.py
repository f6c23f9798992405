"""Rewrites ``"use dom"`` modules into proxies that render an embedded browser.

A directive-bearing module keeps its identity (the canonical file URL) but its
body is replaced by a component that forwards props and ref to the host
``WebView`` and points it at either a packaged HTML asset (production) or the
dev-server route served by :mod:`dombridge.middleware` (development).
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urljoin

from ..identity import dev_component_path, production_asset_parts, to_file_url
from ..logging import get_logger
from ..models import DOM_COMPONENT_REFERENCE_KEY, PLATFORM_WEB, TransformContext, TransformResult
from ..templating import render_template
from .errors import DomTransformError
from .parser import (
    EXPORT_DEFAULT,
    EXPORT_NAMED,
    first_error_position,
    language_for_file,
    module_directives,
    parse_module,
    top_level_exports,
)

USE_DOM_DIRECTIVE = "use dom"

_DEV_SERVER_BASE_EXPRESSION = 'require("react-native/Libraries/Core/Devtools/getDevServer")().url'

_logger = get_logger("transform")


def has_use_dom_directive(source: str, filename: Optional[str] = None) -> bool:
    tree = parse_module(source, language_for_file(filename))
    return USE_DOM_DIRECTIVE in module_directives(tree.root_node)


def transform_module(
    source: str,
    context: TransformContext,
    metadata: Optional[Mapping[str, Any]] = None,
) -> TransformResult:
    """Return the compiled form of ``source``.

    Modules without the directive, and every module compiled for web, come
    back unchanged. The returned metadata is a copy of ``metadata`` with the
    component reference added when the module was rewritten.
    """
    result_metadata = _copy_metadata(metadata)

    # Native only feature.
    if context.platform == PLATFORM_WEB:
        return TransformResult(code=source, transformed=False, metadata=result_metadata)

    tree = parse_module(source, language_for_file(context.filename))
    root = tree.root_node
    if USE_DOM_DIRECTIVE not in module_directives(root):
        return TransformResult(code=source, transformed=False, metadata=result_metadata)

    filename = context.filename
    if not filename:
        raise DomTransformError("Expected a filename to be set in the compile state")

    error_position = first_error_position(root)
    if error_position is not None:
        line, column = error_position
        raise DomTransformError(
            "Unable to parse module",
            filename=filename,
            line=line,
            column=column,
            source=source,
        )

    has_default_export = False
    for export in top_level_exports(root):
        if export.kind == EXPORT_NAMED:
            raise DomTransformError(
                'Modules with the "use dom" directive only support a single default export.',
                filename=filename,
                line=export.line,
                column=export.column,
                source=source,
            )
        if export.kind == EXPORT_DEFAULT:
            has_default_export = True

    if not has_default_export:
        raise DomTransformError(
            'The "use dom" directive requires a default export to be present in the file.',
            filename=filename,
            line=1,
            column=0,
            source=source,
        )

    output_key = to_file_url(filename)
    code = render_template(
        "proxy.js.j2",
        host_module=json.dumps(context.host_module),
        uri_expression=_source_uri_expression(context, filename, output_key),
    )
    result_metadata[DOM_COMPONENT_REFERENCE_KEY] = output_key
    _logger.debug("Rewrote DOM component %s (%s, %s)", filename, context.platform, context.mode)
    return TransformResult(code=code, transformed=True, metadata=result_metadata)


def resolve_source_uri(
    context: TransformContext,
    dev_server_url: Optional[str] = None,
) -> str:
    """Return the string the proxy's ``source.uri`` evaluates to.

    Development URIs depend on the running dev server, so ``dev_server_url``
    is required outside production.
    """
    if not context.filename:
        raise DomTransformError("Expected a filename to be set in the compile state")
    output_key = to_file_url(context.filename)
    if context.is_production:
        prefix, asset = _production_parts(context, output_key)
        return prefix + asset
    if not dev_server_url:
        raise ValueError("dev_server_url is required to resolve a development URI")
    return urljoin(dev_server_url, dev_component_path(context.filename, output_key))


def _source_uri_expression(context: TransformContext, filename: str, output_key: str) -> str:
    if context.is_production:
        # Must match the asset layout written by the export step.
        prefix, asset = _production_parts(context, output_key)
        if prefix:
            return f"{json.dumps(prefix)} + {json.dumps(asset)}"
        return json.dumps(asset)
    path = dev_component_path(filename, output_key)
    return f"new URL({json.dumps(path)}, {_DEV_SERVER_BASE_EXPRESSION}).toString()"


def _production_parts(context: TransformContext, output_key: str) -> tuple[str, str]:
    try:
        return production_asset_parts(context.platform, output_key)
    except ValueError as exc:
        raise DomTransformError(str(exc), filename=context.filename) from exc


def _copy_metadata(metadata: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    if metadata is None:
        return {}
    if not isinstance(metadata, Mapping):
        raise TypeError("Expected compile metadata to be a mapping")
    return dict(metadata)


__all__ = [
    "USE_DOM_DIRECTIVE",
    "has_use_dom_directive",
    "resolve_source_uri",
    "transform_module",
]
