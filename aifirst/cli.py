"""Command-line entry point.

Usage::

    aifirst create-app my-app
    aifirst g component UserProfile --antd true --styled false
    aifirst g store UserStore --api true
    aifirst g service UserService --zod true
    aifirst g page UsersPage --store true --service true
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from aifirst.config import ScaffoldConfig
from aifirst.scaffolder import (
    ArtifactGenerator,
    ArtifactKind,
    GenerationRequest,
    GenerationResult,
    PatchStatus,
    ScaffoldError,
    TemplateRenderer,
)
from aifirst.scaffolder.models import FlagValue
from aifirst.scaffolder.naming import to_title
from aifirst.utils import (
    console,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
    write_text_file,
)

EPILOG = """\
Generators:
  component <name>   React component with tests (aliases: c)
  store <name>       MobX store with API integration (aliases: s)
  service <name>     API service with Zod validation (aliases: api)
  page <name>        Page with store wiring and a registered route (aliases: p)

Options (passed after the name as --key value):
  --description "text"   Custom description
  --antd true/false      Use Ant Design components (component)
  --styled true/false    Use styled-components (component)
  --api true/false       Include API integration (store)
  --zod true/false       Use Zod validation (service)
  --store true/false     Include store integration (page)
  --service true/false   Include service integration (page)
  --route /path          Route path to register (page)

Examples:
  aifirst create-app my-app
  aifirst g component UserProfile --antd true --styled false
  aifirst g page UsersPage --store true --service true
"""


# ---------------------------------------------------------------------------
# Option parsing
# ---------------------------------------------------------------------------


def parse_options(args: list[str]) -> dict[str, FlagValue]:
    """Parse ``--key value`` pairs; the strings ``true``/``false`` become booleans.

    A trailing key without a value is ignored.
    """
    options: dict[str, FlagValue] = {}
    for i in range(0, len(args), 2):
        key = args[i].lstrip("-")
        if not key or i + 1 >= len(args):
            continue
        value = args[i + 1]
        if value == "true":
            options[key] = True
        elif value == "false":
            options[key] = False
        else:
            options[key] = value
    return options


def _add_session_arguments(parser: argparse.ArgumentParser, default: object) -> None:
    parser.add_argument(
        "--root",
        default=default,
        help="Project root to generate into (default: current directory)",
    )
    parser.add_argument(
        "--config",
        default=default,
        help="Path to a saved aifirst.json configuration",
    )
    parser.add_argument(
        "--no-format", action="store_true", default=default, help="Skip the formatter"
    )
    parser.add_argument(
        "--no-overwrite",
        action="store_true",
        default=default,
        help="Keep existing files instead of regenerating them",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aifirst",
        allow_abbrev=False,
        description="AI-First React scaffolder -- generate components, stores, services and pages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )
    _add_session_arguments(parser, None)

    # Session flags are also accepted after the subcommand without
    # clobbering values given before it.
    session = argparse.ArgumentParser(add_help=False, allow_abbrev=False)
    _add_session_arguments(session, argparse.SUPPRESS)

    sub = parser.add_subparsers(dest="command")

    create = sub.add_parser(
        "create-app", help="Create a new application", parents=[session], allow_abbrev=False
    )
    create.add_argument("name", help="Application directory name")
    create.add_argument("--skip-install", action="store_true", help="Do not run npm install")

    # Generator options are free-form --key value pairs collected as extras.
    for command in ("generate", "g"):
        gen = sub.add_parser(
            command, help="Generate code artifacts", parents=[session], allow_abbrev=False
        )
        gen.add_argument("type", help="component, store, service or page")
        gen.add_argument("name", help="Base name, e.g. User or UserPage")
        gen.add_argument("--dry-run", action="store_true", help="Render without writing files")

    sub.add_parser("help", help="Show this help message")
    return parser


def load_config(args: argparse.Namespace) -> ScaffoldConfig:
    """Build the session config from file/env, then apply CLI overrides."""
    if args.config:
        config = ScaffoldConfig.load(Path(args.config))
    else:
        config = ScaffoldConfig.from_env()
    updates: dict[str, object] = {}
    if args.root:
        updates["project_root"] = Path(args.root)
    if args.no_format:
        updates["format_output"] = False
    if args.no_overwrite:
        updates["overwrite"] = False
    return config.model_copy(update=updates) if updates else config


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_generate(
    config: ScaffoldConfig,
    kind_name: str,
    name: str,
    options: list[str],
    dry_run: bool = False,
) -> int:
    kind = ArtifactKind.parse(kind_name)
    request = GenerationRequest(
        base_name=name,
        artifact_kind=kind,
        flags=parse_options(options),
        output_root=config.project_root,
    )
    generator = ArtifactGenerator(config)

    if dry_run:
        for artifact in generator.plan(request):
            print_info(f"would write {request.output_root / artifact.relative_path}")
        return 0

    result = generator.generate(request)
    _report(result)

    changed = result.changed_files
    if changed:
        if asyncio.run(generator.format_files(changed, cwd=config.project_root)):
            print_success("Files formatted")
    return 0


def cmd_create_app(config: ScaffoldConfig, name: str, skip_install: bool = False) -> int:
    app_dir = config.project_root / name
    if app_dir.exists():
        raise ScaffoldError(f"Directory {name} already exists")

    console.print(f"[bold cyan]Creating AI-First React application: {name}[/bold cyan]")
    renderer = TemplateRenderer(config.templates_dir)
    context = {
        "app_name": name,
        "description": f"{to_title(name)} application",
        "pages_alias": config.pages_alias,
    }
    for relative, content in renderer.render_tree("app", context).items():
        write_text_file(app_dir / relative, content)

    if not skip_install:
        print_info("Installing dependencies...")
        _soft_run(["npm", "install"], app_dir, "npm install", capture=False)
    if config.format_output:
        print_info("Running initial format...")
        _soft_run(["npm", "run", "format"], app_dir, "Formatting")

    print_success(f"Successfully created {name}")
    console.print(f"Next steps:\n  cd {name}\n  npm start")
    return 0


def _soft_run(cmd: list[str], cwd: Path, label: str, capture: bool = True) -> None:
    try:
        returncode, _, stderr = asyncio.run(
            run_command(cmd, cwd=cwd, timeout=600, capture=capture)
        )
    except OSError as exc:
        print_warning(f"{label} skipped: {exc}")
        return
    if returncode != 0:
        print_warning(f"{label} failed: {stderr or f'exit code {returncode}'}")


def _report(result: GenerationResult) -> None:
    ids = result.identifiers
    print_success(f"Generated {result.artifact_kind.value}: {ids.pascal_name}")
    rows = {str(path): "written" for path in result.written}
    rows.update({str(path): "skipped (exists)" for path in result.skipped})
    if result.registry is not None:
        registry = result.registry
        rows[str(registry.path)] = registry.status.value.replace("_", " ")
    print_summary_table(rows, title="Files")

    if result.registry is None:
        return
    if result.registry.status is PatchStatus.SKIPPED:
        print_warning(
            f"Artifacts were written but route registration was skipped: {result.registry.reason}"
        )
    elif result.registry.status is PatchStatus.ALREADY_EXISTS:
        print_warning(result.registry.reason)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``aifirst``."""
    parser = build_parser()
    args, extras = parser.parse_known_args(argv)

    if args.command in (None, "help"):
        parser.print_help()
        return 0
    if extras and args.command not in ("generate", "g"):
        parser.error(f"unrecognized arguments: {' '.join(extras)}")

    try:
        config = load_config(args)
        if args.command == "create-app":
            return cmd_create_app(config, args.name, args.skip_install)
        return cmd_generate(config, args.type, args.name, extras, args.dry_run)
    except ScaffoldError as exc:
        print_error(f"Error: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
