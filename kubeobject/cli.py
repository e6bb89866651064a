"""kubeobject CLI: validate, patch and inspect Object resources offline."""

import sys

import click
from rich.console import Console
from rich.table import Table

from kubeobject import __version__
from kubeobject.config import configure_logging, load_settings
from kubeobject.errors import KubeObjectError

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """kubeobject: references, patches and management policies for Objects.

    Works on YAML files, so manifests can be checked and previewed before
    they reach a cluster.
    """
    configure_logging(verbose=verbose)


# ── Validate ─────────────────────────────────────────────────────────


@main.command()
@click.argument("object_file")
@click.option("--strict", is_flag=True, help="Treat warnings as errors")
def validate(object_file: str, strict: bool):
    """Validate the Objects in OBJECT_FILE (schema + reference semantics)."""
    from kubeobject.api.schema_validator import validate_schema
    from kubeobject.api.semantic_validator import validate_semantics
    from kubeobject.loader import is_object, load_documents

    strict = strict or load_settings().strict

    console.print(f"\n[bold blue]kubeobject[/] — Validating: {object_file}\n")

    documents = _run(load_documents, object_file)
    objects = [d for d in documents if is_object(d)]
    if not objects:
        console.print("[yellow]No Object documents found.[/]")
        sys.exit(1)

    failed = False
    for doc in objects:
        name = (doc.get("metadata") or {}).get("name", "(unnamed)")
        console.print(f"[bold]{name}[/]")

        schema_issues = validate_schema(doc)
        if schema_issues:
            failed = True
            console.print("  [red]Schema validation FAILED:[/]")
            for issue in schema_issues:
                console.print(f"    [red]x[/] {issue}")
            continue
        console.print("  [green]v[/] Schema validation passed")

        result = validate_semantics(doc)
        for issue in result.errors:
            console.print(f"  [red]x[/] [{issue.code}] {issue.path}: {issue.message}")
        for issue in result.warnings:
            console.print(f"  [yellow]![/] [{issue.code}] {issue.path}: {issue.message}")

        if not result.passed or (strict and result.warnings):
            failed = True
        else:
            console.print("  [green]v[/] Semantic validation passed")

    if failed:
        console.print("\n[red]FAIL[/]")
        sys.exit(1)
    console.print("\n[green]Valid![/]")


# ── Patch ────────────────────────────────────────────────────────────


@main.command()
@click.argument("object_file")
@click.option(
    "--source", "-s", "sources", multiple=True, help="YAML file with referenced resources"
)
@click.option("--output", "-o", default=None, help="Write patched YAML here instead of stdout")
def patch(object_file: str, sources: tuple, output: str | None):
    """Apply the references of each Object in OBJECT_FILE.

    Referenced resources are looked up in OBJECT_FILE itself and in every
    --source file.
    """
    import yaml

    from kubeobject.loader import load_documents, load_objects
    from kubeobject.patch import apply_references
    from kubeobject.resolver import LocalResolver

    resolver = LocalResolver(_run(load_documents, object_file))
    for source in sources:
        for doc in _run(load_documents, source):
            resolver.add(doc)

    patched = [_run(apply_references, obj, resolver) for obj in _run(load_objects, object_file)]
    rendered = yaml.safe_dump_all([obj.to_dict() for obj in patched], sort_keys=False)

    if output:
        with open(output, "w") as f:
            f.write(rendered)
        console.print(f"[green]Patched {len(patched)} Object(s) written to:[/] {output}")
    else:
        click.echo(rendered, nl=False)


# ── Policy ───────────────────────────────────────────────────────────


@main.command()
@click.option("--policy", "-p", default=None, help="Management policy to check")
@click.option(
    "--action",
    "-a",
    default=None,
    type=click.Choice(["Create", "Update", "Delete"]),
    help="Action to check",
)
def policy(policy: str | None, action: str | None):
    """Show what each management policy allows.

    With --policy and --action, print a single decision and exit non-zero
    when the action is denied.
    """
    from kubeobject.policy import ManagementPolicy, ObjectAction, decision_table, evaluate

    if policy and action:
        decision = evaluate(policy, action)
        reason = decision.reason
        if decision.policy is ManagementPolicy.UNKNOWN:
            reason = f"unknown policy '{policy}' denies {action}"
        style = "green" if decision.allowed else "red"
        console.print(f"[{style}]{'ALLOW' if decision.allowed else 'DENY'}[/] {reason}")
        if not decision.allowed:
            sys.exit(1)
        return

    rows = [d for d in decision_table() if not policy or d.policy.value == policy]
    if not rows:
        console.print(f"[red]Unknown management policy:[/] {policy} (nothing is allowed)")
        sys.exit(1)

    table = Table(title="Management Policies")
    table.add_column("Policy", style="cyan")
    for a in ObjectAction:
        table.add_column(a.value, justify="center")

    by_policy: dict = {}
    for decision in rows:
        by_policy.setdefault(decision.policy, []).append(decision)
    for p, decisions in by_policy.items():
        cells = ["[green]allow[/]" if d.allowed else "[red]deny[/]" for d in decisions]
        table.add_row(p.value, *cells)

    console.print(table)


# ── Schema ───────────────────────────────────────────────────────────


@main.command(name="schema")
def dump_schema():
    """Print the JSON Schema for Object documents."""
    import json

    from kubeobject.api.schema import get_schema

    click.echo(json.dumps(get_schema(), indent=2))


def _run(fn, *args):
    """Call ``fn`` and turn kubeobject errors into a clean CLI failure."""
    try:
        return fn(*args)
    except KubeObjectError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
