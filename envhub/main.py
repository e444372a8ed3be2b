"""
envhub — CLI entrypoint.

Usage:
    envhub --help
    envhub list
    envhub activate
    eval "$(envhub export)"
    envhub use cuda
    envhub config check
"""

from __future__ import annotations

import json
import os
import sys
import warnings
from pathlib import Path

import click

from envhub import __version__
from envhub.core.errors import EnvHubError, UnknownProfileWarning
from envhub.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="envhub")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to envhub.yml (default: auto-detect, else built-in catalog).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """envhub — declarative multi-profile development environments."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
    )


def _load(ctx: click.Context):
    """Load configuration or exit 1 with the error."""
    from envhub.core.config.loader import load_config

    try:
        return load_config(ctx.obj.get("config_path"))
    except EnvHubError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


def _flags_label(flags) -> str:
    return f" [{', '.join(sorted(flags))}]" if flags else ""


# ── list ────────────────────────────────────────────────────────


@cli.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_profiles(ctx: click.Context, as_json: bool) -> None:
    """List profiles, marking the default and the selected one."""
    from envhub.core.services.selector import Selector
    from envhub.core.use_cases.activate import override_source_for

    loaded = _load(ctx)
    default = loaded.default_profile

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UnknownProfileWarning)
        selected = Selector(loaded.registry).select_name(override_source_for(loaded), default)

    if as_json:
        click.echo(json.dumps({
            "default": default,
            "selected": selected,
            "builtin": loaded.builtin,
            "profiles": [
                {
                    "name": p.name,
                    "description": p.description,
                    "flags": sorted(p.flags),
                    "packages": list(p.packages),
                    "overlays": list(p.overlays),
                }
                for p in loaded.registry.profiles()
            ],
        }, indent=2))
        return

    source = "built-in catalog" if loaded.builtin else str(loaded.path)
    click.secho(f"\n📦 Profiles ({source})", fg="cyan", bold=True)
    for profile in loaded.registry.profiles():
        markers = ""
        if profile.name == default:
            markers += " (default)"
        if profile.name == selected:
            markers += " ← selected"
        click.echo(f"   • {profile.name}{_flags_label(profile.flags)}{markers}")
        if profile.description and not ctx.obj.get("quiet"):
            click.echo(f"       {profile.description}")
    click.echo()


# ── show ────────────────────────────────────────────────────────


@cli.command()
@click.argument("name")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def show(ctx: click.Context, name: str, as_json: bool) -> None:
    """Resolve one profile and show its packages."""
    from envhub.core.services.resolver import Resolver

    loaded = _load(ctx)
    try:
        env = Resolver(loaded.registry, loaded.config.settings.store_root).resolve(name)
    except EnvHubError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(env.to_dict(), indent=2, default=str))
        return

    click.secho(f"\n🧩 {env.profile}{_flags_label(env.flags)}", fg="cyan", bold=True)
    click.echo(f"   Shell: {env.shell_name}")
    click.echo(f"   Packages: {len(env.packages)}")
    for pkg in env.packages:
        overlay_label = f"  + {', '.join(pkg.overlays)}" if pkg.overlays else ""
        click.echo(f"     • {pkg.label}{overlay_label}")
        if pkg.python_packages:
            click.echo(f"       python: {', '.join(pkg.python_packages)}")
        if ctx.obj.get("verbose"):
            click.echo(f"       {pkg.prefix(env.store_root)}")
    if ctx.obj.get("verbose"):
        click.echo()
        click.secho("   Variables:", fg="white", bold=True)
        for key, value in sorted(env.variables.items()):
            click.echo(f"     {key}={value}")
    click.echo()


# ── activate ────────────────────────────────────────────────────


@cli.command()
@click.option("--profile", "-p", default=None, help="Profile to activate (skips the override file).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--no-diagnostics", is_flag=True, help="Skip tool version probes.")
@click.pass_context
def activate(ctx: click.Context, profile: str | None, as_json: bool, no_diagnostics: bool) -> None:
    """Select, resolve and materialize the active profile.

    Exits 0 when an unknown override falls back to the default
    (warning only), 1 on configuration or resolution errors.

    Examples:

        envhub activate

        envhub activate --profile cuda --json
    """
    from envhub.core.use_cases.activate import activate as run_activate

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UnknownProfileWarning)
        result = run_activate(
            config_path=ctx.obj.get("config_path"),
            profile=profile,
            diagnostics=not no_diagnostics,
        )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
        sys.exit(0 if result.ok else 1)

    if not result.ok:
        click.secho(f"❌ {result.error}", fg="red")
        click.secho("   No environment was activated.", fg="red")
        sys.exit(1)

    activation = result.activation
    assert activation is not None

    for warn in result.warnings:
        click.secho(f"⚠️  {warn}", fg="yellow")

    click.secho(f"\n⚡ {activation.profile} ({activation.shell_name})", fg="cyan", bold=True)
    click.echo(f"   Source: {result.selection.source}")
    click.echo(f"   PATH entries: {len(activation.path)}")
    if ctx.obj.get("verbose"):
        for entry in activation.path:
            click.echo(f"     │ {entry}")
    for line in activation.diagnostics:
        click.echo(f"   {line}")
    click.echo()


# ── export ──────────────────────────────────────────────────────


@cli.command("export")
@click.option("--profile", "-p", default=None, help="Profile to export (skips the override file).")
@click.option(
    "--shell",
    "shell_name",
    type=click.Choice(["bash", "zsh", "fish"]),
    default="bash",
    show_default=True,
    help="Shell syntax to emit.",
)
@click.option("--diagnostics", is_flag=True, help="Also print diagnostic lines to stderr.")
@click.pass_context
def export(ctx: click.Context, profile: str | None, shell_name: str, diagnostics: bool) -> None:
    """Print shell statements for `eval "$(envhub export)"`."""
    from envhub.core.services.shell_export import render_exports
    from envhub.core.use_cases.activate import activate as run_activate

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UnknownProfileWarning)
        result = run_activate(
            config_path=ctx.obj.get("config_path"),
            profile=profile,
            diagnostics=diagnostics,
        )

    if not result.ok:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    for warn in result.warnings:
        click.secho(f"⚠️  {warn}", fg="yellow", err=True)

    activation = result.activation
    assert activation is not None
    click.echo(render_exports(activation, shell=shell_name), nl=False)
    for line in activation.diagnostics:
        click.echo(line, err=True)


# ── use ─────────────────────────────────────────────────────────


@cli.command()
@click.argument("name", required=False)
@click.option("--clear", is_flag=True, help="Remove the local override.")
@click.pass_context
def use(ctx: click.Context, name: str | None, clear: bool) -> None:
    """Select a profile for this project (writes the local override file)."""
    from envhub.core.use_cases.activate import override_source_for

    loaded = _load(ctx)
    source = override_source_for(loaded)

    try:
        if clear:
            removed = source.clear()
            msg = "Override removed" if removed else "No override was set"
            click.secho(f"✅ {msg}; using default '{loaded.default_profile}'", fg="green")
            return

        if not name:
            raise click.UsageError("Give a profile name or --clear.")

        if name not in loaded.registry:
            click.secho(f"❌ Unknown profile '{name}'", fg="red")
            click.echo(f"   Known: {', '.join(loaded.registry.names())}")
            sys.exit(1)

        path = source.write(name)
    except EnvHubError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    click.secho(f"✅ Using profile '{name}'", fg="green")
    if not ctx.obj.get("quiet"):
        click.echo(f"   Saved to {path}")


# ── init ────────────────────────────────────────────────────────


@cli.command()
@click.option("--force", is_flag=True, help="Overwrite an existing .envrc.")
@click.pass_context
def init(ctx: click.Context, force: bool) -> None:
    """Write a .envrc hook and git-ignore the override file."""
    from envhub.core.services.shell_export import render_envrc

    loaded = _load(ctx)
    root = loaded.project_root
    override_file = loaded.config.settings.override_file

    envrc = root / ".envrc"
    if envrc.exists() and not force:
        click.secho(f"❌ {envrc} already exists (use --force to overwrite)", fg="red")
        sys.exit(1)
    envrc.write_text(render_envrc(override_file), encoding="utf-8")
    click.secho(f"✅ Wrote {envrc}", fg="green")

    gitignore = root / ".gitignore"
    existing = gitignore.read_text(encoding="utf-8") if gitignore.is_file() else ""
    if override_file not in existing.splitlines():
        prefix = "" if not existing or existing.endswith("\n") else "\n"
        with gitignore.open("a", encoding="utf-8") as fh:
            fh.write(f"{prefix}{override_file}\n")
        click.secho(f"✅ Added {override_file} to {gitignore}", fg="green")


# ── config ──────────────────────────────────────────────────────


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate envhub.yml and dry-resolve every profile."""
    from envhub.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.loaded is not None  # guaranteed when valid
        source = "built-in catalog" if result.loaded.builtin else str(result.config_path)
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Source: {source}")
        click.echo(f"   Profiles: {len(result.loaded.registry)}")
        click.echo(f"   Default: {result.loaded.default_profile}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


if __name__ == "__main__":
    cli()
