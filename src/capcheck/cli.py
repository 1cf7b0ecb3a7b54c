"""Capcheck CLI entry point."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
import yaml

from capcheck import __version__

if TYPE_CHECKING:
    from typing import TextIO

    from capcheck.rules.model import RuleSet

DEFAULT_RULES_PATH = Path(".capcheck") / "rules.yml"


@click.group()
@click.version_option(version=__version__, prog_name="capcheck")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool) -> None:
    """Capcheck - validate capability applications against a rule set."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _rules_path(rules: Path | None, project: Path | None) -> Path:
    """Resolve the rules file: explicit flag or env var, else the project default."""
    if rules is not None:
        return rules
    return (project or Path.cwd()) / DEFAULT_RULES_PATH


def _load_rule_set(rules: Path | None, project: Path | None) -> RuleSet:
    from capcheck.errors import RuleConfigError
    from capcheck.rules.loader import load_rules

    path = _rules_path(rules, project)
    if not path.is_file():
        click.echo(f"Error: rules file not found: {path}", err=True)
        sys.exit(2)
    try:
        return load_rules(path)
    except RuleConfigError as exc:
        click.echo(f"Error: Invalid rules configuration: {exc}", err=True)
        sys.exit(2)


_rules_option = click.option(
    "--rules",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    envvar="CAPCHECK_RULES",
    help="Rules file (default: $CAPCHECK_RULES or .capcheck/rules.yml).",
)
_project_option = click.option(
    "--project",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: current directory).",
)


@main.command()
@click.argument("request_file", type=click.File("r", encoding="utf-8"))
@_rules_option
@_project_option
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["rich", "json", "porcelain"]),
    default=None,
    help="Output format (default: rich if TTY, porcelain if piped).",
)
@click.pass_context
def validate(
    ctx: click.Context,
    *,
    request_file: TextIO,
    rules: Path | None,
    project: Path | None,
    fmt: str | None,
) -> None:
    """Validate an application (JSON or YAML file, '-' for stdin).

    Exit codes: 0 = accepted, 1 = rejected, 2 = configuration error.
    """
    from capcheck.errors import RuleConfigError, ValidationError
    from capcheck.report import format_json, format_porcelain, format_rich
    from capcheck.service import ApplicationRequest, CapabilityValidator, ValidationResult

    # Resolve output format: explicit flag > TTY detection.
    if fmt is None:
        fmt = "rich" if sys.stdout.isatty() else "porcelain"

    rule_set = _load_rule_set(rules, project)
    try:
        validator = CapabilityValidator(rule_set)
    except RuleConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    try:
        body = yaml.safe_load(request_file)
    except yaml.YAMLError as exc:
        click.echo(f"Error: cannot parse application: {exc}", err=True)
        sys.exit(2)

    capabilities: tuple[str, ...] = ()
    try:
        request = ApplicationRequest.from_dict(body)
    except ValidationError as exc:
        result = ValidationResult(ok=False, message=exc.message)
    else:
        capabilities = request.capabilities
        result = validator.check(request)

    formatters = {
        "rich": format_rich,
        "json": format_json,
        "porcelain": format_porcelain,
    }
    if not (result.ok and fmt == "rich" and ctx.obj.get("quiet")):
        click.echo(formatters[fmt](result, capabilities))

    if not result.ok:
        sys.exit(1)


@main.command("rules")
@_rules_option
@_project_option
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Exit 1 if rules reference unknown capabilities.",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Output as JSON.")
def rules_cmd(
    *, rules: Path | None, project: Path | None, strict: bool, as_json: bool
) -> None:
    """Show the loaded capability rules and check their references."""
    from capcheck.errors import RuleConfigError
    from capcheck.rules.loader import check_rule_targets
    from capcheck.validators.registry import default_registry, ensure_validators_registered

    rule_set = _load_rule_set(rules, project)
    try:
        ensure_validators_registered(rule_set, default_registry())
    except RuleConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)
    warnings = check_rule_targets(rule_set)

    if as_json:
        payload = {
            "capabilities": [
                {
                    "type": rule.type,
                    "dependencies": list(rule.dependencies),
                    "conditional_dependencies": [
                        {
                            "condition_field": cond.condition_field,
                            "expected_value": cond.expected_value,
                            "required_capabilities": list(cond.required_capabilities),
                        }
                        for cond in rule.conditional_dependencies
                    ],
                    "field_rules": len(rule.field_rules),
                    "custom_validator": rule.custom_validator,
                }
                for rule in rule_set
            ],
            "warnings": warnings,
        }
        click.echo(json.dumps(payload, ensure_ascii=False, indent=2, default=str))
    else:
        click.echo(f"Capabilities: {len(rule_set)} loaded")
        for rule in rule_set:
            deps = ", ".join(rule.dependencies) or "-"
            conditional = sum(1 for r in rule.field_rules if r.is_conditional)
            line = (
                f"  {rule.type}: depends on {deps}; "
                f"{len(rule.field_rules)} field rules ({conditional} conditional)"
            )
            if rule.custom_validator:
                line += f"; validator {rule.custom_validator}"
            click.echo(line)
            for cond in rule.conditional_dependencies:
                click.echo(
                    f"    when {cond.condition_field}={cond.expected_value!r} "
                    f"requires {', '.join(cond.required_capabilities)}"
                )
        for warning in warnings:
            click.echo(f"⚠ {warning}", err=True)

    if strict and warnings:
        sys.exit(1)
