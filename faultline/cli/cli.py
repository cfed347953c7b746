# faultline/cli/cli.py
import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from typing_extensions import Annotated

from ..core.error_types import ReportedError
from ..services.alerting_service import should_alert
from ..services.error_classification_service import ErrorClassifier

app_cli = typer.Typer(help="faultline error classification command line interface.")
console = Console()

SEVERITY_STYLES = {
    "LOW": "green",
    "MEDIUM": "yellow",
    "HIGH": "red",
    "CRITICAL": "bold red",
}


@app_cli.command()
def classify(
    message: Annotated[str, typer.Argument(help="Error message to classify.")],
    kind: Annotated[Optional[str], typer.Option(help="Error kind name, e.g. ValidationError.")] = None,
    status: Annotated[Optional[int], typer.Option(help="HTTP status attached to the error.")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the classification as JSON.")] = False,
):
    """
    Classifies an error message and shows whether it should raise an alert.
    """
    error = ReportedError(message=message, name=kind or "Error", status=status)
    classification = ErrorClassifier().classify(error)
    alert = should_alert(classification)

    if as_json:
        payload = classification.to_dict()
        payload["should_alert"] = alert
        typer.echo(json.dumps(payload, indent=2))
        return

    severity = classification.severity.value
    table = Table(title="Error Classification")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Category", classification.category.value)
    table.add_row("Severity", f"[{SEVERITY_STYLES[severity]}]{severity}[/{SEVERITY_STYLES[severity]}]")
    table.add_row("Error code", classification.error_code)
    table.add_row("Retryable", str(classification.is_retryable))
    table.add_row("User error", str(classification.is_user_error))
    table.add_row("Requires alert", str(classification.requires_alert))
    table.add_row("User message", classification.user_message)
    if classification.suggested_action:
        table.add_row("Suggested action", classification.suggested_action)
    console.print(table)

    if alert:
        console.print("[bold red]Alert: this failure should be surfaced to an operator.[/bold red]")
    else:
        console.print("[green]No alert: counted towards escalation thresholds only.[/green]")


@app_cli.command()
def patterns():
    """
    Lists the pattern table in evaluation order. The first match wins.
    """
    table = Table(title="Error Patterns")
    table.add_column("#", justify="right")
    table.add_column("Pattern", style="cyan")
    table.add_column("Category")
    table.add_column("Severity")
    table.add_column("Code")
    table.add_column("Retry")
    table.add_column("Alert")

    for position, pattern in enumerate(ErrorClassifier().registry, start=1):
        table.add_row(
            str(position),
            pattern.pattern,
            pattern.category.value,
            pattern.severity.value,
            pattern.error_code,
            "yes" if pattern.is_retryable else "no",
            "yes" if pattern.requires_alert else "no",
        )
    console.print(table)


def main():
    app_cli()


if __name__ == "__main__":
    main()
