#!/usr/bin/env python3
"""
figma-rn CLI — Figma → React Native

  figma-rn generate --url "https://www.figma.com/design/KEY/App?node-id=1-2"
  figma-rn generate --input node.json --theme theme.json --output ./src/screens
  figma-rn preview --input node.json       # classified IR tree
  figma-rn tokens --input node.json        # extracted tokens and mappings
  figma-rn watch --input node.json         # regenerate on change
"""

import argparse
import asyncio
import json
import logging
import os
import threading
import time
from pathlib import Path
from typing import Optional

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from . import __version__
from .config import ConfigValidationError, generation_options_from_config, load_config, DEFAULT_CONFIG_PATH
from .figma_reader import FigmaAPIClient, FigmaAPIError, parse_figma_url
from .naming import preview_ir_tree, to_pascal_case
from .normalizer import DEFAULT_IGNORE_PATTERNS, NormalizeOptions
from .pipeline import PipelineOptions, PipelineResult, generate_screen, transform_to_screen_ir
from .screen import save_ir
from .theme import load_project_tokens
from .token_matcher import match_tokens
from .transformer import InvalidDocumentError, unwrap_nodes_response


def _pipeline_options(config: dict) -> PipelineOptions:
    extra = config.get("normalize", {}).get("ignorePatterns", [])
    return PipelineOptions(normalize=NormalizeOptions(ignore_patterns=list(DEFAULT_IGNORE_PATTERNS) + extra))


def load_raw_node(args, config: dict) -> dict:
    """Raw node document from --input, or from the Figma API."""
    if getattr(args, "input", None):
        with open(args.input, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if isinstance(raw, dict) and "nodes" in raw:
            node_id = args.node_id or next(iter(raw["nodes"]), "")
            return unwrap_nodes_response(raw, node_id)
        return raw

    figma_cfg = config.get("figma", {})
    token = figma_cfg.get("personalAccessToken") or os.environ.get("FIGMA_TOKEN")
    file_key, node_id = args.file_key or figma_cfg.get("fileKey"), args.node_id
    if args.url:
        file_key, url_node = parse_figma_url(args.url)
        node_id = node_id or url_node
    if not token:
        raise FigmaAPIError("Set FIGMA_TOKEN or figma.personalAccessToken in the config.",
                            code="INVALID_TOKEN")
    if not file_key or not node_id:
        raise FigmaAPIError("Pass --url, or --file-key with --node-id.", code="NODE_NOT_FOUND")

    print(f"📥 Fetching {file_key} node {node_id}")
    return FigmaAPIClient(token).fetch_node(file_key, node_id)


def _theme_path(args, config: dict) -> Optional[str]:
    return getattr(args, "theme", None) or config.get("theme", {}).get("location")


def run_generate(raw: dict, args, config: dict) -> Optional[PipelineResult]:
    """Generate and write one component; None when there is nothing to generate."""
    theme_path = _theme_path(args, config)
    tokens = load_project_tokens(theme_path) if theme_path else None
    has_theme = tokens is not None and not tokens.is_empty()
    name = args.name or to_pascal_case(raw.get("name", "Screen"))
    generation = generation_options_from_config(config, has_project_theme=has_theme, component_name=name)

    result = generate_screen(raw, tokens, generation, _pipeline_options(config))
    if result is None:
        print("⚠️  Nothing to generate: the root node was filtered out.")
        return None

    output_dir = Path(args.output or config.get("output", {}).get("dir") or "./generated")
    output_dir.mkdir(parents=True, exist_ok=True)
    out_file = output_dir / f"{generation.component_name}.tsx"
    out_file.write_text(result.code, encoding="utf-8")
    print(f"✅ Wrote {out_file} ({len(result.output.style_names)} styles)")
    if getattr(args, "dump_ir", False):
        ir_file = output_dir / f"{generation.component_name}.ir.json"
        save_ir(result.screen, ir_file)
        print(f"   IR → {ir_file}")
    for category, values in result.output.unmapped.items():
        print(f"   ⚠️  {len(values)} unmapped {category}: {', '.join(values[:5])}")
    return result


def cmd_generate(args, config: dict) -> int:
    try:
        raw = load_raw_node(args, config)
        run_generate(raw, args, config)
    except FigmaAPIError as e:
        if e.code == "INVALID_TOKEN":
            print(f"❌ Figma token rejected or missing: {e}")
        elif e.code == "NODE_NOT_FOUND":
            print(f"❌ Node not found: {e}")
        elif e.code == "RATE_LIMITED":
            print("❌ Figma API rate limit hit, try again in a minute.")
        else:
            print(f"❌ Figma API error: {e}")
        return 1
    except (InvalidDocumentError, ValueError) as e:
        print(f"❌ Generate failed: {e}")
        return 1
    return 0


def cmd_preview(args, config: dict) -> int:
    """Print the classified IR tree."""
    try:
        raw = load_raw_node(args, config)
    except (FigmaAPIError, ValueError) as e:
        print(f"❌ {e}")
        return 1
    screen = transform_to_screen_ir(raw, _pipeline_options(config))
    if screen is None:
        print("⚠️  Nothing to generate: the root node was filtered out.")
        return 0
    print(f"👁️  {screen.name}")
    print(preview_ir_tree(screen.root.to_dict(), bindings=screen.props.bindings))
    print(f"\nTotal nodes: {sum(1 for _ in screen.root.walk())}")
    return 0


def cmd_tokens(args, config: dict) -> int:
    """Print extracted tokens and how they map onto the project theme."""
    try:
        raw = load_raw_node(args, config)
    except (FigmaAPIError, ValueError) as e:
        print(f"❌ {e}")
        return 1
    screen = transform_to_screen_ir(raw, _pipeline_options(config))
    if screen is None:
        print("⚠️  Nothing to generate: the root node was filtered out.")
        return 0
    theme_path = _theme_path(args, config)
    tokens = load_project_tokens(theme_path) if theme_path else None
    mappings = match_tokens(screen.tokens, tokens)
    print(json.dumps({"tokens": screen.tokens.to_dict(), "mappings": mappings.to_dict()},
                     indent=2, ensure_ascii=False))
    return 0


class ChangeHandler(FileSystemEventHandler):
    """Debounced file change handler for a fixed set of paths."""

    def __init__(self, callback, loop: asyncio.AbstractEventLoop, paths, debounce: float = 1.0):
        self.callback = callback
        self.loop = loop
        self.paths = {str(Path(p).resolve()) for p in paths}
        self.last_trigger = 0.0
        self.debounce_seconds = debounce

    def on_modified(self, event):
        if event.is_directory:
            return
        if str(Path(event.src_path).resolve()) not in self.paths:
            return
        current_time = time.time()
        if current_time - self.last_trigger < self.debounce_seconds:
            return
        self.last_trigger = current_time
        print(f"\n🔄 File changed: {event.src_path}")
        asyncio.run_coroutine_threadsafe(self.callback(), self.loop)


def cmd_watch(args, config: dict) -> int:
    """Regenerate whenever the input node JSON or the theme file changes."""
    watched = [args.input]
    theme_path = _theme_path(args, config)
    if theme_path:
        watched.append(theme_path)
    print(f"👀 Watching {', '.join(watched)}")
    print("   Press Ctrl+C to stop.")

    loop = asyncio.new_event_loop()

    async def regenerate():
        try:
            run_generate(load_raw_node(args, config), args, config)
        except (InvalidDocumentError, ValueError) as e:
            print(f"❌ Generate failed: {e}")

    def run_loop():
        asyncio.set_event_loop(loop)
        loop.run_forever()

    loop_thread = threading.Thread(target=run_loop, daemon=True)
    loop_thread.start()
    asyncio.run_coroutine_threadsafe(regenerate(), loop).result(timeout=60)

    handler = ChangeHandler(regenerate, loop, watched)
    observer = Observer()
    for directory in {str(Path(p).resolve().parent) for p in watched}:
        observer.schedule(handler, path=directory, recursive=False)
    observer.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        observer.stop()
    observer.join()
    loop.call_soon_threadsafe(loop.stop)
    loop_thread.join(timeout=2)
    return 0


def _add_source_args(parser):
    parser.add_argument("--input", "-i", help="Raw node JSON (document or 'nodes' response)")
    parser.add_argument("--url", help="Figma URL with ?node-id=")
    parser.add_argument("--file-key", help="Figma file key")
    parser.add_argument("--node-id", help="Node id, e.g. 1:2")
    parser.add_argument("--theme", help="Project theme JSON")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="figma-rn: Figma → React Native components",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Config path")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", "-v", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command")

    gen_p = sub.add_parser("generate", help="Generate a component",
        epilog="Examples:\n  figma-rn generate --input node.json --name Home\n"
               "  figma-rn generate --file-key ABC123 --node-id 1:2 --theme theme.json",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    _add_source_args(gen_p)
    gen_p.add_argument("--output", "-o", help="Output directory")
    gen_p.add_argument("--name", help="Component name")
    gen_p.add_argument("--dump-ir", action="store_true", help="Also write the ScreenIR JSON")

    preview_p = sub.add_parser("preview", help="Print the classified IR tree")
    _add_source_args(preview_p)

    tokens_p = sub.add_parser("tokens", help="Print extracted tokens and theme mappings")
    _add_source_args(tokens_p)

    watch_p = sub.add_parser("watch", help="Regenerate when the input or theme changes",
        epilog="Examples:\n  figma-rn watch --input node.json --theme theme.json",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    _add_source_args(watch_p)
    watch_p.add_argument("--output", "-o", help="Output directory")
    watch_p.add_argument("--name", help="Component name")
    watch_p.add_argument("--dump-ir", action="store_true", help="Also write the ScreenIR JSON")

    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_config(args.config)
    except ConfigValidationError as e:
        print(f"❌ {e}")
        return 1

    if args.command == "generate":
        return cmd_generate(args, config)
    if args.command == "preview":
        return cmd_preview(args, config)
    if args.command == "tokens":
        return cmd_tokens(args, config)
    if args.command == "watch":
        if not args.input:
            print("❌ watch needs --input")
            return 1
        return cmd_watch(args, config)
    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
