"""CLI interface for skill-palette."""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.markup import escape

from . import __version__, config
from .fuzzy import build_display_list
from .host import SkillPalette, get_argument_completions
from .types import Cancel, Entry, Header, Select, SkillSource, Unqueue

_console = None


def _print(msg: str = "") -> None:
    """Print with Rich markup support."""
    global _console
    if _console is None:
        _console = Console(highlight=False)
    _console.print(msg)


def _err(msg: str) -> None:
    Console(stderr=True, highlight=False).print(msg)


def setup_logging(debug: bool) -> None:
    """Send debug logs to the config dir log file when debug is on."""
    if not debug:
        return
    log_path = config.get_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path)
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    root = logging.getLogger("skill_palette")
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


def _emit(palette: SkillPalette, name_only: bool) -> None:
    skill = palette.queued
    if skill is None:
        return
    if name_only:
        print(skill.ref)
        return
    message = palette.consume_queued()
    if message is None:
        _err(f"[red]Failed to load skill:[/red] {escape(skill.name)}")
        sys.exit(1)
    print(message)


def cmd_pick(args, palette: SkillPalette):
    """Open the palette; print the chosen skill."""
    if getattr(args, "queued", None):
        palette.queued = palette.resolve(args.queued)

    action = palette.open_palette()
    if action is None:
        _err("No skills found")
        sys.exit(1)

    if isinstance(action, Select):
        _emit(palette, getattr(args, "name_only", False))
    elif isinstance(action, Unqueue):
        _err(f"Skill unqueued: {escape(action.skill.ref)}")
    elif isinstance(action, Cancel):
        sys.exit(130)


def cmd_use(args, palette: SkillPalette):
    """Pick a skill by reference without opening the palette."""
    skill = palette.resolve(args.ref)
    if skill is None:
        _err(f"[red]Unknown skill:[/red] {escape(args.ref)}")
        sys.exit(1)
    palette.queue_skill(skill)
    _emit(palette, args.name_only)


def cmd_list(args, palette: SkillPalette):
    """List skills grouped by namespace."""
    skills = palette.load_skills()
    if args.namespace:
        ns = args.namespace.lower()
        skills = [s for s in skills if s.namespace.lower().startswith(ns)]

    if not skills:
        _print("No skills found")
        return

    for item in build_display_list(skills, []):
        if isinstance(item, Header):
            _print(f"\n[bold yellow]{escape(item.namespace)}[/bold yellow]")
        elif isinstance(item, Entry):
            skill = item.skill
            badge = " [dim]\\[local][/dim]" if skill.source == SkillSource.LOCAL else ""
            _print(f"  {escape(skill.name)}{badge} [dim]— {escape(skill.description)}[/dim]")


def cmd_recent(args, palette: SkillPalette):
    """Show recently used skills."""
    if not palette.recents:
        _print("No recent skills")
        return
    for record in palette.recents:
        _print(
            f"  {escape(record.namespace)}:{escape(record.name)} [dim]×{record.count}[/dim]"
        )


def cmd_complete(args, palette: SkillPalette):
    """Print argument completions, one per line."""
    for item in get_argument_completions(palette.load_skills(), args.prefix or ""):
        print(item["value"])


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="skill-palette",
        description="Namespace-aware skill picker",
        epilog=(
            "Filtering:\n"
            "  marketing        all skills in a namespace\n"
            "  marketing:ad     skills in namespace, matching 'ad'\n"
            "  ad-cre           fuzzy match across all namespaces"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--debug", action="store_true", help="Write debug log to config dir")
    subparsers = parser.add_subparsers(dest="command")

    pick_p = subparsers.add_parser("pick", help="Open the skill palette (default)")
    pick_p.add_argument("--name-only", action="store_true", help="Print namespace:name only")
    pick_p.add_argument("--queued", help="Skill currently queued (enter on it unqueues)")
    pick_p.set_defaults(func=cmd_pick)

    use_p = subparsers.add_parser("use", help="Use a skill directly by reference")
    use_p.add_argument("ref", help="namespace:name or name")
    use_p.add_argument("--name-only", action="store_true", help="Print namespace:name only")
    use_p.set_defaults(func=cmd_use)

    list_p = subparsers.add_parser("list", help="List skills grouped by namespace")
    list_p.add_argument("--namespace", "-n", help="Only namespaces starting with this")
    list_p.set_defaults(func=cmd_list)

    recent_p = subparsers.add_parser("recent", help="Show recently used skills")
    recent_p.set_defaults(func=cmd_recent)

    complete_p = subparsers.add_parser("complete", help="Complete a namespace:skill argument")
    complete_p.add_argument("prefix", nargs="?", default="")
    complete_p.set_defaults(func=cmd_complete)

    return parser


def main(argv: list[str] | None = None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    cfg = config.load_config()
    setup_logging(args.debug or config.is_debug_enabled(cfg))

    func = getattr(args, "func", cmd_pick)
    # The palette draws on stderr so stdout stays pipeable
    palette = SkillPalette(cfg, console=Console(stderr=True, highlight=False))
    try:
        func(args, palette)
    except KeyboardInterrupt:
        print()
        sys.exit(130)
    finally:
        palette.close()


if __name__ == "__main__":
    main()
