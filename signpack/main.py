"""
Trackmania Signpack Generator — command-line interface

Usage:
  python -m signpack.main generate --end 20 --start-sign --finish-sign --arrows
  python -m signpack.main generate --preset "Neon Cyber" --format 2x1 --include-json --yes
  python -m signpack.main range --from 1 --to 50 --number-format CP001 --file-name-prefix cp_
  python -m signpack.main preview --preset "Classic Racing" --out preview.png
  python -m signpack.main presets list
  python -m signpack.main share --preset "Retro Gaming"
  python -m signpack.main icons
  python -m signpack.main fonts
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.prompt import Confirm
from rich.rule import Rule
from rich.table import Table

from .batch import (
    BatchResult,
    estimate_generation_time,
    estimate_signpack_size,
    generate_pack,
    generate_range,
)
from .compositor import preview_descriptors, render_preview_sheet, render_sign
from .config import (
    APP_NAME,
    APP_VERSION,
    ERROR_MESSAGES,
    FONT_FAMILIES,
    LOG_LEVEL,
    OUTPUT_DIR,
    SHARE_BASE_URL,
    SIGN_FORMATS,
)
from .errors import GenerationCancelled, SignpackEnvironmentError, StorageError, ValidationError
from .fonts import default_resolver, font_stack
from .icons import ICON_CATEGORIES, icon_list
from .presets import PresetStore, export_settings, import_settings
from .settings import Settings, normalize_settings
from .sharing import decode_settings, settings_from_link, share_link
from .signlist import (
    ARROW_DIRECTIONS_8,
    ARROW_MODES,
    NUMBER_FORMATS,
    NUMBER_SUFFIXES,
    PackConfig,
    RangeConfig,
    SignDescriptor,
)
from .validate import validate_image_file

console = Console()
logger = logging.getLogger(__name__)


# ── CLI ───────────────────────────────────────────────────────────────────────

def _add_style_args(parser: argparse.ArgumentParser) -> None:
    """Where the Settings come from, plus per-field overrides."""
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--preset", help="Name of a saved preset")
    source.add_argument("--settings", type=Path, help="Settings JSON file (export or settings.json)")
    source.add_argument("--share", help="Share link or share string")
    parser.add_argument("--format", choices=list(SIGN_FORMATS), help="Sign format (default from settings: 6x1)")
    parser.add_argument(
        "--set", action="append", default=[], metavar="KEY=VALUE",
        help="Override one setting, e.g. --set fontSize=72 --set specialEffect=neon",
    )
    parser.add_argument("--image", type=Path, help="Background image (PNG/JPEG) for backgroundType=image")
    parser.add_argument("--seed", type=int, help="Seed for noise backgrounds")
    parser.add_argument("--presets-file", type=Path, help="Preset store (default from SIGNPACK_PRESET_FILE)")


def _add_output_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--file-prefix", default="", help="Prefix added to every file in the archive")
    parser.add_argument("--pack-name", default="Trackmania-Signs", help="Archive name (before _<format>.zip)")
    parser.add_argument("--include-json", action="store_true", help="Add settings.json to the archive")
    parser.add_argument("--signpack-name", default="Checkpoint Signpack")
    parser.add_argument("--file-naming", default="Checkpoint")
    parser.add_argument("--output", type=Path, default=None, help=f"Output directory (default: {OUTPUT_DIR})")
    parser.add_argument("--yes", "-y", action="store_true", help="Skip the large-batch confirmation")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="signpack",
        description=f"{APP_NAME} — render Trackmania sign images and package them as a ZIP",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log at INFO level")
    sub = parser.add_subparsers(dest="command", required=True)

    # generate
    gen = sub.add_parser("generate", help="Generate a category pack")
    gen.add_argument("--no-checkpoints", action="store_true", help="Leave out numbered checkpoints")
    gen.add_argument("--start", dest="checkpoint_start", default="1", help="First checkpoint number")
    gen.add_argument("--end", dest="checkpoint_end", default="100", help="Last checkpoint number")
    gen.add_argument("--prefix", dest="checkpoint_prefix", default="Checkpoint", help="Checkpoint label prefix")
    gen.add_argument("--start-sign", action="store_true", help="Include the START sign")
    gen.add_argument("--start-text", default="START")
    gen.add_argument("--finish-sign", action="store_true", help="Include the FINISH sign")
    gen.add_argument("--finish-text", default="FINISH")
    gen.add_argument("--arrows", action="store_true", help="Include direction arrows")
    gen.add_argument("--arrow-mode", choices=ARROW_MODES, default="rotated")
    gen.add_argument("--arrow-directions", choices=["4", "8"], default="4")
    gen.add_argument(
        "--arrow", action="append", choices=ARROW_DIRECTIONS_8, dest="arrow_list",
        help="Only these directions (repeatable)",
    )
    gen.add_argument("--arrow-icon", action="append", default=[], help="Arrow icon id (repeatable)")
    gen.add_argument("--race-icon", action="append", default=[], help="Race icon id (repeatable)")
    gen.add_argument("--number-format", choices=NUMBER_FORMATS, default="001", help="Recorded in settings.json")
    _add_style_args(gen)
    _add_output_args(gen)

    # range
    rng = sub.add_parser("range", help="Generate a single numbered range")
    rng.add_argument("--from", dest="range_start", default="1")
    rng.add_argument("--to", dest="range_end", default="10")
    rng.add_argument("--number-format", choices=NUMBER_FORMATS, default="001")
    rng.add_argument("--file-name-prefix", default="", help="Prefix of each PNG name (e.g. cp_)")
    rng.add_argument("--number-suffix", choices=NUMBER_SUFFIXES, default="padded")
    _add_style_args(rng)
    _add_output_args(rng)

    # preview
    prev = sub.add_parser("preview", help="Render the preview sheet or one sign")
    prev.add_argument("--text", help="Render a single sign with this label instead of the sheet")
    prev.add_argument("--rotation", type=int, default=None, help="Rotation for --text (degrees, clockwise)")
    prev.add_argument("--prefix", dest="checkpoint_prefix", default="Checkpoint")
    prev.add_argument("--arrow-mode", choices=ARROW_MODES, default="rotated")
    prev.add_argument("--icon", help="Show this icon (category/id) as the arrow sign")
    prev.add_argument("--out", type=Path, default=Path("preview.png"))
    _add_style_args(prev)

    # presets
    pre = sub.add_parser("presets", help="Manage saved presets")
    pre.add_argument("action", choices=["list", "show", "save", "delete", "export", "import"])
    pre.add_argument("name", nargs="?", help="Preset name")
    pre.add_argument("--file", type=Path, help="Settings file for export/import")
    _add_style_args(pre)

    # share
    sh = sub.add_parser("share", help="Print a share link, or decode one")
    sh.add_argument("--decode", metavar="LINK", help="Decode a share link or share string")
    sh.add_argument("--base-url", default=SHARE_BASE_URL)
    _add_style_args(sh)

    # icons, fonts
    sub.add_parser("icons", help="List available icons")
    sub.add_parser("fonts", help="List font families and the installed file each one renders with")

    return parser.parse_args(argv)


# ── Settings resolution ───────────────────────────────────────────────────────

def _parse_override(item: str) -> tuple:
    if "=" not in item:
        raise ValidationError([f"Invalid --set value {item!r}: expected KEY=VALUE"])
    key, value = item.split("=", 1)
    try:
        parsed: Any = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    return key.strip(), parsed


def _decode_share(value: str) -> Dict[str, Any]:
    raw = settings_from_link(value) if "?" in value else decode_settings(value)
    if raw is None:
        raise ValidationError([ERROR_MESSAGES["INVALID_PRESET_DATA"]], field="share")
    return raw


def resolve_settings(args: argparse.Namespace, store: Optional[PresetStore] = None) -> Settings:
    """Preset / settings file / share string, then CLI overrides on top."""
    store = store or PresetStore(args.presets_file)
    if args.preset:
        base: Any = store.load(args.preset)
    elif args.settings:
        base = import_settings(args.settings)
    elif args.share:
        base = _decode_share(args.share)
    else:
        base = None

    overrides: Dict[str, Any] = dict(_parse_override(item) for item in args.set)
    if args.format:
        overrides["signFormat"] = args.format
    if args.seed is not None:
        overrides["noiseSeed"] = args.seed
    return normalize_settings(base, **overrides)


def _load_image(args: argparse.Namespace, settings: Settings):
    if args.image is None:
        if settings.background_type == "image":
            logger.warning("backgroundType is image but no --image given; drawing the background color")
        return None
    return validate_image_file(args.image)


# ── Commands ──────────────────────────────────────────────────────────────────

def _confirm_large(count: int) -> bool:
    return Confirm.ask(f"  [yellow]⚠ You're generating {count} signs. This may take a while. Continue?[/yellow]")


def _run_batch(args: argparse.Namespace, config, settings: Settings, strategy) -> BatchResult:
    image = _load_image(args, settings)

    with Progress(
        TextColumn("  {task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Initializing signpack generation...", total=100)

        def on_progress(p) -> None:
            progress.update(task, completed=p.percent, description=p.message or "Done")

        return strategy(
            config, settings,
            image=image,
            on_progress=on_progress,
            confirm_large=None if args.yes else _confirm_large,
        )


def _report(result: BatchResult, output_dir: Path, started: float) -> None:
    path = result.write(output_dir)
    if result.skipped:
        console.print(f"  [yellow]⚠ {len(result.skipped)} sign(s) skipped: {', '.join(result.skipped)}[/yellow]")
    console.print(
        Panel(
            f"{result.sign_count} sign(s) in [bold]{time.time() - started:.1f}s[/bold]\n"
            f"Archive: [bold]{path}[/bold] ({result.size_kb} KB, {len(result.entries)} entries)",
            title="[bold green]Signpack ready[/bold green]",
            border_style="green",
        )
    )


def cmd_generate(args: argparse.Namespace) -> int:
    settings = resolve_settings(args)
    config = PackConfig(
        include_checkpoints=not args.no_checkpoints,
        checkpoint_start=args.checkpoint_start,
        checkpoint_end=args.checkpoint_end,
        checkpoint_prefix=args.checkpoint_prefix,
        include_start=args.start_sign,
        start_text=args.start_text,
        include_finish=args.finish_sign,
        finish_text=args.finish_text,
        include_arrows=args.arrows or bool(args.arrow_list),
        arrow_mode=args.arrow_mode,
        arrow_directions=args.arrow_directions,
        arrows=args.arrow_list,
        include_icons=bool(args.arrow_icon or args.race_icon),
        arrow_icons=args.arrow_icon,
        race_icons=args.race_icon,
        file_prefix=args.file_prefix,
        pack_name=args.pack_name,
        include_json=args.include_json,
        signpack_name=args.signpack_name,
        number_format=args.number_format,
        file_naming=args.file_naming,
    )

    console.print(Rule(f"[bold magenta]{APP_NAME}[/bold magenta]"))
    width, height = settings.dimensions
    console.print(f"  Format: [bold]{settings.sign_format}[/bold] ({width}×{height})  |  Pack: [bold]{config.pack_name}[/bold]")

    started = time.time()
    result = _run_batch(args, config, settings, generate_pack)
    _report(result, args.output or OUTPUT_DIR, started)
    return 0


def cmd_range(args: argparse.Namespace) -> int:
    settings = resolve_settings(args)
    config = RangeConfig(
        start=args.range_start,
        end=args.range_end,
        number_format=args.number_format,
        custom_prefix=args.file_name_prefix,
        number_suffix=args.number_suffix,
        file_prefix=args.file_prefix,
        pack_name=args.pack_name,
        include_json=args.include_json,
        signpack_name=args.signpack_name,
        file_naming=args.file_naming,
    )

    console.print(Rule(f"[bold magenta]{APP_NAME}[/bold magenta]"))
    try:
        count = int(args.range_end) - int(args.range_start) + 1
    except ValueError:
        count = 0
    if count > 0:
        console.print(
            f"  {count} sign(s)  |  est. {estimate_signpack_size(count)}, {estimate_generation_time(count)}"
        )

    started = time.time()
    result = _run_batch(args, config, settings, generate_range)
    _report(result, args.output or OUTPUT_DIR, started)
    return 0


def cmd_preview(args: argparse.Namespace) -> int:
    settings = resolve_settings(args)
    image = _load_image(args, settings)

    if args.text is not None:
        img = render_sign(SignDescriptor("checkpoint", args.out.name, text=args.text, rotation=args.rotation), settings, image=image)
    else:
        icon = tuple(args.icon.split("/", 1)) if args.icon and "/" in args.icon else None
        descriptors = preview_descriptors(args.checkpoint_prefix, arrow_mode=args.arrow_mode, icon=icon)
        img = render_preview_sheet(settings, descriptors, image=image)

    args.out.parent.mkdir(parents=True, exist_ok=True)
    img.save(args.out, format="PNG")
    console.print(f"  [green]✓[/green] Preview saved → {args.out} ({img.width}×{img.height})")
    return 0


def cmd_presets(args: argparse.Namespace) -> int:
    store = PresetStore(args.presets_file)

    if args.action == "list":
        table = Table(box=box.SIMPLE, show_header=True, padding=(0, 1))
        table.add_column("Preset", style="bold")
        table.add_column("Font")
        table.add_column("Background")
        table.add_column("Effect")
        for name, s in store.all().items():
            table.add_row(name, f"{s.font_family} {s.font_size}", s.background_type, s.special_effect)
        console.print(table)
        console.print(f"  [dim]{store.path} ({store.storage_used_mb():.2f}MB)[/dim]")
        return 0

    if args.action == "import":
        if not args.file:
            raise ValidationError(["--file is required for import"])
        settings = import_settings(args.file)
        if args.name:
            store.save(args.name, settings)
            console.print(f"  [green]✓[/green] Imported {args.file} as preset \"{args.name.strip()}\"")
        else:
            console.print_json(json.dumps(settings.to_json_dict()))
        return 0

    if not args.name:
        raise ValidationError(["Preset name cannot be empty"])

    if args.action == "show":
        console.print_json(json.dumps(store.load(args.name).to_json_dict()))
    elif args.action == "save":
        store.save(args.name, resolve_settings(args, store))
        console.print(f"  [green]✓[/green] Preset \"{args.name.strip()}\" saved successfully!")
    elif args.action == "delete":
        if store.delete(args.name):
            console.print(f"  [green]✓[/green] Deleted preset \"{args.name}\"")
        else:
            console.print(f"  [yellow]⚠ No preset named \"{args.name}\"[/yellow]")
            return 1
    elif args.action == "export":
        path = export_settings(store.load(args.name), args.file or Path("signpack-settings.json"))
        console.print(f"  [green]✓[/green] Exported → {path}")
    return 0


def cmd_share(args: argparse.Namespace) -> int:
    if args.decode:
        console.print_json(json.dumps(_decode_share(args.decode)))
        return 0
    console.print(share_link(resolve_settings(args), args.base_url), soft_wrap=True)
    return 0


def cmd_icons(args: argparse.Namespace) -> int:
    for category in ICON_CATEGORIES:
        table = Table(box=box.SIMPLE, show_header=False, padding=(0, 1), title=f"[bold]{category}[/bold]")
        table.add_column("Id", style="cyan")
        table.add_column("Name")
        for icon_id, name in icon_list(category):
            table.add_row(icon_id, name)
        console.print(table)
    return 0


def cmd_fonts(args: argparse.Namespace) -> int:
    fonts = default_resolver()
    table = Table(box=box.SIMPLE, show_header=True, padding=(0, 1))
    table.add_column("Family", style="bold")
    table.add_column("Renders with")
    for family in FONT_FAMILIES:
        path = next(
            (p for p in (fonts.find_file(name, bold=False) for name in font_stack(family)) if p is not None),
            None,
        )
        table.add_row(family, path.name if path else "[dim]Pillow default[/dim]")
    console.print(table)
    return 0


COMMANDS = {
    "generate": cmd_generate,
    "range": cmd_range,
    "preview": cmd_preview,
    "presets": cmd_presets,
    "share": cmd_share,
    "icons": cmd_icons,
    "fonts": cmd_fonts,
}


# ── Entry point ───────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        format="%(asctime)s — %(name)s — %(levelname)s — %(message)s",
        level=logging.INFO if args.verbose else getattr(logging, LOG_LEVEL, logging.WARNING),
    )

    try:
        return COMMANDS[args.command](args)
    except ValidationError as e:
        console.print(
            Panel(
                "\n".join(e.errors),
                title="[bold red]Validation Error[/bold red]",
                border_style="red",
            )
        )
        return 2
    except GenerationCancelled as e:
        console.print(f"[yellow]Cancelled:[/yellow] {e}")
        return 1
    except KeyboardInterrupt:
        console.print("[yellow]Cancelled.[/yellow] No archive written.")
        return 130
    except KeyError as e:
        console.print(f"[bold red]Error:[/bold red] {e.args[0] if e.args else e}")
        return 1
    except (SignpackEnvironmentError, StorageError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        return 1
    except Exception as e:
        logger.exception("Generation error")
        console.print(f"[bold red]{ERROR_MESSAGES['GENERATION_FAILED'].format(error=e)}[/bold red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
