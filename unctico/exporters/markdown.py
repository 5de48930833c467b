"""
Markdown exporter for client safety reports.

Produces a one-page pre-session summary: the gate decision, blocking and
advisory contraindications with their recommendations, and red flags.
"""

from __future__ import annotations

from pathlib import Path

from unctico.models import RedFlagAlert, SafetyClearance


def export_markdown(
    clearance: SafetyClearance,
    red_flags: list[RedFlagAlert] | None = None,
    output_path: Path | None = None,
    include_recommendations: bool = True,
) -> str:
    """
    Export a client safety report to Markdown.

    Args:
        clearance: Gate decision for the client
        red_flags: The client's red flags, if any
        output_path: Optional path to write the Markdown file
        include_recommendations: Whether to list per-condition recommendations

    Returns:
        Markdown string
    """
    lines = []
    red_flags = sorted(red_flags or [], key=lambda f: f.urgency.rank, reverse=True)

    lines.append(f"# Safety Report: Client {clearance.client_id}")
    lines.append("")
    if clearance.allowed:
        lines.append("**Decision:** Treatment may proceed")
    else:
        lines.append("**Decision:** DO NOT TREAT")
    lines.append("")

    if clearance.physician_clearance_required:
        names = ", ".join(c.display_name for c in clearance.physician_clearance_required)
        lines.append(f"> Physician clearance required: {names}")
        lines.append("")

    # Blocking
    if clearance.blocking_alerts:
        lines.append("## Absolute Contraindications")
        lines.append("")
        for alert in clearance.blocking_alerts:
            lines.append(f"- **{alert.condition.display_name}** ({alert.detected_date.strftime('%Y-%m-%d')})")
            if alert.notes:
                lines.append(f"  - {alert.notes}")
        lines.append("")

    # Advisory
    advisory = clearance.advisory_alerts
    if advisory:
        lines.append("## Precautions")
        lines.append("")
        for alert in advisory:
            lines.append(f"### {alert.condition.display_name}")
            lines.append("")
            lines.append(f"- **Severity:** {alert.severity.label}")
            lines.append(f"- **Guidance:** {alert.severity.description}")
            if alert.notes:
                lines.append(f"- **Notes:** {alert.notes}")
            if include_recommendations:
                lines.append("")
                for rec in alert.condition.recommendations:
                    lines.append(f"  - {rec}")
            lines.append("")

    if not clearance.active_alerts:
        lines.append("*No active contraindications.*")
        lines.append("")

    # Red flags
    if red_flags:
        lines.append("## Red Flags")
        lines.append("")
        lines.append("| Date | Symptom | Urgency | Action | Referred |")
        lines.append("|------|---------|---------|--------|----------|")
        for flag in red_flags:
            lines.append(
                f"| {flag.detected_date.strftime('%Y-%m-%d')} "
                f"| {flag.symptom.display_name} "
                f"| {flag.urgency.label} "
                f"| {flag.symptom.recommended_action} "
                f"| {'Yes' if flag.was_referred else 'No'} |"
            )
        lines.append("")

    md = "\n".join(lines)

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(md)

    return md
