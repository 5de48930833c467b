#!/usr/bin/env python3
"""
Unctico CLI

Command-line interface for client safety checks: contraindication detection,
red-flag tracking, the pre-session safety gate and safety statistics.
"""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

console = Console()


def setup_paths():
    """Add the project root to sys.path for imports."""
    root = Path(__file__).parent
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


setup_paths()

from unctico.models import (  # noqa: E402
    ContraindicationCategory,
    ContraindicationCondition,
    RedFlagSymptom,
    Severity,
)

SEVERITY_STYLES = {
    Severity.ABSOLUTE: "bold red",
    Severity.LOCAL: "yellow",
    Severity.CAUTION: "yellow",
    Severity.MODIFIED: "blue",
}


def _service(ctx: click.Context):
    """Safety service for this invocation, built on first use."""
    obj = ctx.find_root().obj
    if obj.get("service") is None:
        from unctico.service import SafetyService

        obj["service"] = SafetyService.from_config(obj["config"], obj["data_dir"])
    return obj["service"]


class SafetyGroup(click.Group):
    """Command group that reports safety engine errors instead of tracebacks."""

    def invoke(self, ctx: click.Context):
        from unctico.errors import ConfigurationError, SafetyError

        try:
            return super().invoke(ctx)
        except ConfigurationError as e:
            console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
            ctx.exit(1)
        except SafetyError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            ctx.exit(1)


@click.group(cls=SafetyGroup)
@click.version_option(version="0.1.0", prog_name="unctico")
@click.option("--storage", type=click.Choice(["memory", "json", "supabase"]),
              help="Storage backend (overrides UNCTICO_STORAGE)")
@click.option("--data-dir", type=click.Path(file_okay=False), help="Directory for JSON storage")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx: click.Context, storage: Optional[str], data_dir: Optional[str], verbose: bool):
    """
    Unctico - Client Safety Checks

    Detect contraindications from medical history, record red-flag
    symptoms, and check whether a massage session may proceed.
    """
    from unctico.config import SafetyConfig
    from unctico.logging_config import setup_logging

    config = SafetyConfig()
    if storage:
        config.storage = storage
    setup_logging("DEBUG" if verbose else config.log_level)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["data_dir"] = Path(data_dir) if data_dir else None
    ctx.obj["service"] = None


@cli.command()
@click.option("--category", type=click.Choice([c.name.lower() for c in ContraindicationCategory]),
              help="Only show one category")
def conditions(category: Optional[str]):
    """
    List known contraindication conditions.
    """
    table = Table(title="Contraindications")
    table.add_column("Key", style="cyan")
    table.add_column("Condition")
    table.add_column("Category")
    table.add_column("Clearance", justify="center")

    for condition in ContraindicationCondition:
        if category and condition.category.name.lower() != category:
            continue
        style = SEVERITY_STYLES[condition.default_severity]
        table.add_row(
            condition.value,
            condition.display_name,
            f"[{style}]{condition.category.value}[/{style}]",
            "yes" if condition.requires_physician_clearance else "",
        )

    console.print(table)


@cli.command("red-flags")
def red_flags():
    """
    List red-flag symptoms, most urgent first.
    """
    table = Table(title="Red Flag Symptoms")
    table.add_column("Key", style="cyan")
    table.add_column("Symptom")
    table.add_column("Urgency")
    table.add_column("Action")

    for symptom in sorted(RedFlagSymptom, key=lambda s: s.urgency.rank, reverse=True):
        table.add_row(symptom.value, symptom.display_name, symptom.urgency.label, symptom.recommended_action)

    console.print(table)


@cli.command()
@click.argument("client_id")
@click.option("--condition", "-c", "history", multiple=True, help="Medical history line (repeatable)")
@click.option("--medication", "-m", "medications", multiple=True, help="Current medication (repeatable)")
@click.option("--save", is_flag=True, help="Add detected alerts to the client's record")
@click.pass_context
def detect(ctx: click.Context, client_id: str, history: tuple, medications: tuple, save: bool):
    """
    Detect contraindications from medical history.

    Examples:

        unctico detect client-42 -c "type 2 diabetes" -m "aspirin 81mg"

        unctico detect client-42 -c "DVT last month" --save
    """
    alerts = _service(ctx).detect(client_id, history, medications, save=save)

    if not alerts:
        console.print("[green]No contraindications detected[/green]")
        return

    tree = Tree(f"[bold]Detected for {client_id}[/bold]")
    for alert in alerts:
        style = SEVERITY_STYLES[alert.severity]
        branch = tree.add(f"[{style}]{alert.condition.display_name}[/{style}] ({alert.severity.label})")
        branch.add(f"[dim]{alert.notes}[/dim]")
        if save:
            branch.add(f"[dim]id: {alert.id}[/dim]")
    console.print(tree)

    if save:
        console.print(f"[green]✓ Saved {len(alerts)} alert(s)[/green]")


@cli.command()
@click.argument("client_id")
@click.argument("condition", type=click.Choice([c.value for c in ContraindicationCondition]))
@click.option("--severity", type=click.Choice([s.value for s in Severity]),
              help="Override the condition's default severity")
@click.option("--notes", default="", help="Free-text notes")
@click.pass_context
def record(ctx: click.Context, client_id: str, condition: str, severity: Optional[str], notes: str):
    """
    Manually record a contraindication.
    """
    alert = _service(ctx).record_contraindication(
        client_id,
        ContraindicationCondition(condition),
        Severity(severity) if severity else None,
        notes,
    )
    console.print(f"[green]✓ Recorded {alert.condition.display_name} ({alert.severity.label})[/green]")
    console.print(alert.id)


@cli.command()
@click.argument("client_id")
@click.option("--all", "show_all", is_flag=True, help="Include resolved alerts")
@click.pass_context
def alerts(ctx: click.Context, client_id: str, show_all: bool):
    """
    Show a client's contraindications.
    """
    store = _service(ctx).store
    records = store.for_client(client_id) if show_all else store.active_for_client(client_id)

    if not records:
        console.print("[dim]No contraindications on record[/dim]")
        return

    table = Table(title=f"Contraindications for {client_id}")
    table.add_column("Detected")
    table.add_column("Condition")
    table.add_column("Severity")
    table.add_column("Status")
    table.add_column("ID", style="dim", no_wrap=True)

    for alert in sorted(records, key=lambda a: a.detected_date):
        style = SEVERITY_STYLES[alert.severity]
        table.add_row(
            alert.detected_date.strftime("%Y-%m-%d"),
            alert.condition.display_name,
            f"[{style}]{alert.severity.label}[/{style}]",
            "resolved" if alert.is_resolved else "active",
            alert.id,
        )

    console.print(table)


@cli.command()
@click.argument("client_id")
@click.pass_context
def check(ctx: click.Context, client_id: str):
    """
    Check whether treatment may proceed. Exits 2 when blocked.
    """
    clearance = _service(ctx).clearance(client_id)

    if clearance.allowed:
        body = "[bold green]Treatment may proceed[/bold green]"
        border = "green"
    else:
        names = "\n".join(f"• {a.condition.display_name}" for a in clearance.blocking_alerts)
        body = f"[bold red]DO NOT TREAT[/bold red]\n\n{names}"
        border = "red"

    advisory = clearance.advisory_alerts
    if advisory:
        body += "\n\n[bold]Precautions:[/bold]\n" + "\n".join(
            f"• {a.condition.display_name} - {a.severity.description}" for a in advisory
        )
    if clearance.physician_clearance_required:
        body += "\n\n[yellow]Physician clearance required: " + ", ".join(
            c.display_name for c in clearance.physician_clearance_required
        ) + "[/yellow]"

    console.print(Panel(body, title=f"Safety Check: {client_id}", border_style=border))

    if not clearance.allowed:
        ctx.exit(2)


@cli.command()
@click.argument("alert_id")
@click.option("--action", "action_taken", required=True, help="What was done to resolve the alert")
@click.pass_context
def resolve(ctx: click.Context, alert_id: str, action_taken: str):
    """
    Resolve an active contraindication.

    Example:

        unctico resolve 3f2c... --action "cleared by physician"
    """
    from unctico.errors import AlertNotFoundError

    try:
        alert = _service(ctx).resolve(alert_id, action_taken)
    except AlertNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        ctx.exit(1)

    console.print(f"[green]✓ Resolved {alert.condition.display_name}[/green]")


@cli.command()
@click.argument("client_id")
@click.argument("symptom", type=click.Choice([s.value for s in RedFlagSymptom]))
@click.option("--notes", default="", help="Free-text notes")
@click.option("--action", "action_taken", help="Action taken at the time")
@click.option("--referred", is_flag=True, help="Client was referred out")
@click.option("--referral-details", help="Who the client was referred to")
@click.pass_context
def flag(
    ctx: click.Context,
    client_id: str,
    symptom: str,
    notes: str,
    action_taken: Optional[str],
    referred: bool,
    referral_details: Optional[str],
):
    """
    Record a red-flag symptom.
    """
    alert = _service(ctx).record_red_flag(
        client_id,
        RedFlagSymptom(symptom),
        notes=notes,
        action_taken=action_taken,
        was_referred=referred,
        referral_details=referral_details,
    )
    style = "bold red" if alert.urgency.rank >= 3 else "yellow"
    console.print(Panel(
        f"[{style}]{alert.symptom.recommended_action}[/{style}]",
        title=f"{alert.symptom.display_name} ({alert.urgency.label})",
        border_style="red",
    ))
    console.print(alert.id)


@cli.command()
@click.argument("flag_id")
@click.option("--details", help="Who the client was referred to")
@click.pass_context
def refer(ctx: click.Context, flag_id: str, details: Optional[str]):
    """
    Mark a red flag as referred out.
    """
    from unctico.errors import AlertNotFoundError

    try:
        alert = _service(ctx).store.record_referral(flag_id, details)
    except AlertNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        ctx.exit(1)

    console.print(f"[green]✓ Referral recorded for {alert.symptom.display_name}[/green]")


@cli.command()
@click.argument("text")
@click.pass_context
def search(ctx: click.Context, text: str):
    """
    Search alerts by condition, symptom or notes.
    """
    store = _service(ctx).store
    contraindications = store.search(text)
    flags = store.search_red_flags(text)

    if not contraindications and not flags:
        console.print("[dim]No matching alerts[/dim]")
        return

    tree = Tree(f"[bold]Matches for \"{text}\"[/bold]")
    if contraindications:
        branch = tree.add("Contraindications")
        for alert in contraindications:
            status = "resolved" if alert.is_resolved else "active"
            branch.add(f"{alert.client_id}: {alert.condition.display_name} ({status})")
    if flags:
        branch = tree.add("Red flags")
        for f in flags:
            branch.add(f"{f.client_id}: {f.symptom.display_name} ({f.urgency.label})")
    console.print(tree)


@cli.command()
@click.pass_context
def stats(ctx: click.Context):
    """
    Show practice-wide safety statistics.
    """
    service = _service(ctx)
    c_stats = service.contraindication_statistics()
    r_stats = service.red_flag_statistics()

    table = Table(title="Contraindications")
    table.add_column("Measure", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("Total", str(c_stats.total))
    table.add_row("Active", str(c_stats.active))
    table.add_row("Resolved", str(c_stats.resolved))
    for severity, count in c_stats.by_severity.items():
        table.add_row(f"  {severity.label}", str(count))
    console.print(table)

    if c_stats.by_category:
        tree = Tree("[bold]Active by category[/bold]")
        for category, count in sorted(c_stats.by_category.items()):
            tree.add(f"{category}: {count}")
        console.print(tree)

    table = Table(title="Red Flags")
    table.add_column("Measure", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total", str(r_stats.total))
    table.add_row("Emergency", str(r_stats.emergency))
    table.add_row("Urgent", str(r_stats.urgent))
    table.add_row("Prompt", str(r_stats.prompt))
    table.add_row("Referred", str(r_stats.referred))
    table.add_row("Referral rate", f"{r_stats.referral_rate:.1f}%")
    console.print(table)


@cli.command()
@click.argument("client_id")
@click.option("--format", "fmt", type=click.Choice(["markdown", "json"]), default="markdown",
              help="Report format")
@click.option("--output", "-o", type=click.Path(), help="Output file path")
@click.pass_context
def report(ctx: click.Context, client_id: str, fmt: str, output: Optional[str]):
    """
    Write a client safety report.

    Example:

        unctico report client-42 -o ./client-42.md
    """
    from unctico.exporters import export_json, export_markdown

    service = _service(ctx)
    clearance = service.clearance(client_id)
    flags = service.store.red_flags_for_client(client_id)
    out_path = Path(output) if output else None

    if fmt == "json":
        text = export_json(clearance, flags, out_path)
    else:
        text = export_markdown(clearance, flags, out_path)

    if out_path:
        console.print(f"[green]✓ Exported to {out_path}[/green]")
    else:
        click.echo(text)


@cli.command()
def info():
    """
    Show information about Unctico.
    """
    console.print(Panel(
        "[bold]Unctico Safety[/bold]\n\n"
        "Client safety checks for massage-therapy practices:\n"
        "• Contraindication detection from medical history\n"
        "• Red-flag symptom triage and referral tracking\n"
        "• Pre-session safety gate\n\n"
        "[dim]Keyword-based detection; always confirm with the client[/dim]\n"
        "[dim]and their physician where clearance is required.[/dim]",
        title="About",
        border_style="blue",
    ))

    console.print("\n[bold]Quick Start:[/bold]")
    console.print("  unctico detect client-42 -c \"type 2 diabetes\" -m warfarin --save")
    console.print("  unctico check client-42")
    console.print("  unctico stats")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
