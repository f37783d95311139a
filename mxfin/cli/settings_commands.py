"""Settings CLI commands for mx-fin.

Manages settings.json (profile location) and the profile.yaml 'plan'
section holding emergency fund, long-term savings and retirement inputs.
"""

import click
import yaml
from pathlib import Path
from pydantic import ValidationError

from mxfin.sdk import (
    get_settings_path,
    get_profile_path,
    load_settings,
    load_profile,
    get_profile_value,
    set_profile_value,
    set_setting,
    load_plan_settings,
)
from mxfin.sdk.schemas import PlanSettings


@click.group()
def settings():
    """Manage settings (settings.json) and plan values (profile.yaml).

    Plan keys use dot notation, e.g. plan.retirement_current_age.
    """
    pass


@settings.command("show")
def settings_show():
    """Show settings, profile location and effective plan values."""
    settings_path = get_settings_path()
    profile_path = get_profile_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"Profile file: {profile_path}")
    click.echo(f"Profile exists: {profile_path.exists()}")
    click.echo()

    if current:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")
        click.echo()

    try:
        plan = load_plan_settings()
    except ValidationError as e:
        raise click.ClickException(f"Invalid plan settings in {profile_path}:\n{e}")

    configured = load_profile(require_exists=False).get("plan") or {}
    click.echo("Plan values:")
    for key, value in plan.model_dump().items():
        marker = "" if key in configured else " (default)"
        click.echo(f"  plan.{key}: {value}{marker}")


@settings.command("set")
@click.argument("key")
@click.argument("value")
def settings_set(key, value):
    """Set a plan value in profile.yaml.

    VALUE is parsed as YAML, so numbers stay numbers.

    \b
    Examples:
        mx-fin settings set plan.emergency_monthly_expenses 15000
        mx-fin settings set plan.retirement_current_age 35
    """
    section, _, field = key.partition(".")
    if section != "plan" or field not in PlanSettings.model_fields:
        valid = ", ".join(f"plan.{name}" for name in PlanSettings.model_fields)
        raise click.BadParameter(f"Unknown key '{key}'. Valid keys: {valid}", param_hint="KEY")

    parsed = yaml.safe_load(value)

    # Validate the merged plan before writing anything
    plan = dict(get_profile_value("plan", {}) or {})
    plan[field] = parsed
    try:
        PlanSettings.model_validate(plan)
    except ValidationError as e:
        raise click.ClickException(f"Invalid value for {key}:\n{e}")

    path = set_profile_value(key, parsed)
    click.echo(f"Set {key}: {parsed}")
    click.echo(f"Saved to: {path}")


@settings.command("profile")
@click.argument("path", type=click.Path(dir_okay=False))
def settings_profile(path):
    """Point settings.json at a profile.yaml in another location."""
    profile_path = Path(path).expanduser().resolve()
    if profile_path.suffix not in (".yaml", ".yml"):
        raise click.ClickException(f"Profile must be a YAML file: {profile_path}")

    set_setting("profile", str(profile_path))
    click.echo(f"Set profile: {profile_path}")
    if not profile_path.exists():
        click.echo("Profile does not exist yet; it will be created on the first 'settings set'.")
    click.echo(f"Saved to: {get_settings_path()}")
