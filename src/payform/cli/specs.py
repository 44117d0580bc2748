"""CLI: payform methods|inspect|next-action"""

import json

import click
from rich.console import Console
from rich.table import Table

from payform.decoder import encode_field_spec

console = Console()


def _get_provider(obj):
    from payform.cli.main import _get_provider
    return _get_provider(obj)


@click.command("methods")
@click.option("--json-output", "--json", is_flag=True)
@click.pass_obj
def methods_cmd(obj, json_output):
    """List payment methods with a form spec."""
    provider = _get_provider(obj)
    if json_output:
        click.echo(json.dumps(provider.payment_methods))
        return
    for method in provider.payment_methods:
        console.print(method)


@click.command("inspect")
@click.argument("payment_method")
@click.option("--json-output", "--json", is_flag=True)
@click.pass_obj
def inspect_cmd(obj, payment_method, json_output):
    """Show the decoded fields of a payment method's form."""
    spec = _get_provider(obj).form_spec(payment_method)
    if spec is None:
        console.print(f"[red]No form spec for {payment_method}[/red]")
        raise SystemExit(1)
    if json_output:
        click.echo(json.dumps([encode_field_spec(f) for f in spec.fields], indent=2))
        return
    table = Table(title=f"{spec.type} ({len(spec.fields)} fields)")
    table.add_column("Type", style="bold")
    table.add_column("API path")
    table.add_column("Supported")
    for field in spec.fields:
        api_path = ", ".join(field.api_path.values()) if field.api_path else ""
        table.add_row(field.type, api_path, "no" if field.is_unknown else "yes")
    console.print(table)


@click.command("next-action")
@click.argument("payment_method")
@click.option("--json-output", "--json", is_flag=True)
@click.pass_obj
def next_action_cmd(obj, payment_method, json_output):
    """Show how a payment method is handled after confirmation."""
    spec = _get_provider(obj).next_action_spec(payment_method)
    if json_output:
        click.echo(json.dumps(spec.model_dump(mode="json") if spec else None, indent=2))
        return
    if spec is None:
        console.print(f"[dim]No special next-action handling for {payment_method}.[/dim]")
        return
    table = Table(title=f"{payment_method} next actions")
    table.add_column("Intent status", style="bold")
    table.add_column("On confirm")
    table.add_column("Redirect URL path")
    for status, status_spec in spec.confirm_response_status_specs.items():
        url_path = status_spec.redirect.url_path if status_spec.redirect else ""
        table.add_row(status, status_spec.type, url_path)
    console.print(table)
    for status, handling in (spec.post_confirm_handling_pi_status_specs or {}).items():
        console.print(f"After confirm, [bold]{status}[/bold] -> {handling.type}")
