"""CLI entrypoints for dombridge commands."""

from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

from .bundler import BundleOptions
from .config import ConfigError, DomBridgeConfig, load_config
from .entry import VirtualEntryGenerator, sleep_settle
from .logging import configure_logging
from .middleware import DomComponentsMiddleware
from .models import BUILD_MODES, MODE_DEVELOPMENT, MODE_PRODUCTION, PLATFORMS, SourceReference, TransformContext
from .transform import DomTransformError, resolve_source_uri, transform_module


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dombridge",
        description="Compile \"use dom\" modules and serve DOM component pages in development.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .dombridge.yml or the directory containing it (defaults to current directory).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write logs to this file (overrides log_file from the config).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the dev server that answers /_expo/@dom requests.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default=None, help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to bind.")

    transform_parser = subparsers.add_parser(
        "transform",
        help="Compile a single module and print the result.",
    )
    _add_verbose_option(transform_parser, suppress_default=True)
    transform_parser.add_argument("file", help="Source module to compile.")
    transform_parser.add_argument(
        "--platform",
        choices=PLATFORMS,
        required=True,
        help="Target platform of the native build.",
    )
    transform_parser.add_argument(
        "--mode",
        choices=BUILD_MODES,
        default=None,
        help="Build mode (defaults to the bundler mode from the config).",
    )
    transform_parser.add_argument(
        "--production",
        dest="mode",
        action="store_const",
        const=MODE_PRODUCTION,
        help="Shorthand for --mode production.",
    )
    transform_parser.add_argument(
        "--dev-server-url",
        default=None,
        help="Also print the URI the proxy resolves to against this dev server.",
    )
    transform_parser.add_argument(
        "--metadata",
        action="store_true",
        help="Print the compile metadata as JSON instead of the code.",
    )

    entry_parser = subparsers.add_parser(
        "entry",
        help="Generate the virtual entry module for a DOM component.",
    )
    _add_verbose_option(entry_parser, suppress_default=True)
    entry_parser.add_argument("file", help="DOM component source file.")
    entry_parser.add_argument(
        "--no-settle",
        action="store_true",
        help="Return immediately instead of waiting for the bundler to index a new entry.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for dombridge commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    log_file = Path(args.log_file) if args.log_file else config.log_file
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    if args.command == "serve":
        from .service import run_service

        run_service(config, host=args.host, port=args.port)
    elif args.command == "transform":
        _run_transform(parser, config, args)
    elif args.command == "entry":
        _run_entry(parser, config, args)


def _run_transform(
    parser: argparse.ArgumentParser, config: DomBridgeConfig, args: argparse.Namespace
) -> None:
    path = Path(args.file)
    try:
        source = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")

    context = TransformContext(
        filename=str(path.resolve()),
        platform=args.platform,
        mode=args.mode or config.bundler.mode or MODE_DEVELOPMENT,
        host_module=config.host_module,
    )
    try:
        result = transform_module(source, context)
        uri = None
        if result.transformed and (context.is_production or args.dev_server_url):
            uri = resolve_source_uri(context, args.dev_server_url)
    except DomTransformError as exc:
        parser.exit(1, f"{exc}\n")

    if args.metadata:
        print(json.dumps(result.metadata, indent=2, sort_keys=True))
    else:
        print(result.code, end="" if result.code.endswith("\n") else "\n")
    if uri is not None:
        print(f"// source.uri: {uri}")


def _run_entry(
    parser: argparse.ArgumentParser, config: DomBridgeConfig, args: argparse.Namespace
) -> None:
    path = Path(args.file)
    if not path.exists():
        parser.exit(1, f"No such file: {path}\n")

    generator = VirtualEntryGenerator(
        config.dom_entry_dir,
        host_module=config.host_module,
        settle=sleep_settle(0 if args.no_settle else config.settle_delay),
    )
    middleware = DomComponentsMiddleware(
        generator,
        server_root=config.server_root or config.project_root,
        get_dev_server_url=lambda: config.dev_server_url,
        base_options=BundleOptions.from_config(config.bundler),
    )
    generated = asyncio.run(generator.ensure_entry(SourceReference.from_path(path)))
    print(generated)
    print(middleware.bundle_url_for(generated))


if __name__ == "__main__":  # pragma: no cover
    main()
