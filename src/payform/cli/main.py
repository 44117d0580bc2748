"""
payform CLI — `payform` command.

Commands:
  payform methods                  Payment methods in the spec registry
  payform inspect <method>         Decoded fields of a payment method's form
  payform next-action <method>     Next-action handling for a payment method
  payform address <country>        Address fields synthesized for a country
"""

import asyncio
import logging
from typing import Any, Optional

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install payform[cli]")

from payform.address.spec import AddressSpecProvider
from payform.config import Settings, load_settings
from payform.errors import PayFormError
from payform.provider import FormSpecProvider
from payform.transport.http import DEFAULT_BASE_URL, HttpClient

console = Console()


def _run(coro):
    return asyncio.run(coro)


async def _fetch_form_specs(settings: Settings, path: str) -> list[dict[str, Any]]:
    client = HttpClient(base_url=settings.base_url or DEFAULT_BASE_URL, token=settings.api_key)
    try:
        return await client.get_form_specs(path)
    finally:
        await client.close()


def _get_provider(obj: dict[str, Any]) -> FormSpecProvider:
    settings: Settings = obj["settings"]
    specs_path: Optional[str] = obj.get("specs") or settings.form_specs_path
    provider = FormSpecProvider()
    try:
        if specs_path:
            provider.load_file(specs_path)
        else:
            provider.load_bundled()
        if obj.get("path"):
            nodes = _run(_fetch_form_specs(settings, obj["path"]))
            if not provider.update(nodes):
                console.print("[yellow]Server form specs did not decode; using local specs.[/yellow]")
    except PayFormError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    return provider


def _get_address_provider(obj: dict[str, Any]) -> AddressSpecProvider:
    settings: Settings = obj["settings"]
    if settings.address_specs_path:
        return AddressSpecProvider.from_file(settings.address_specs_path)
    return AddressSpecProvider.default()


@click.group()
@click.version_option("0.1.0")
@click.option("--specs", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Form specs JSON file")
@click.option("--fetch", "path", default=None, help="Fetch form spec overrides from this server path")
@click.option("-v", "--verbose", is_flag=True)
@click.pass_context
def main(ctx: click.Context, specs: Optional[str], path: Optional[str], verbose: bool):
    """payform — inspect payment form specs and address fields."""
    settings = load_settings()
    logging.basicConfig(level=logging.DEBUG if verbose else settings.log_level)
    ctx.obj = {"settings": settings, "specs": specs, "path": path}


# Register subcommands from separate modules
from payform.cli.specs import methods_cmd, inspect_cmd, next_action_cmd
from payform.cli.address import address_cmd

main.add_command(methods_cmd)
main.add_command(inspect_cmd)
main.add_command(next_action_cmd)
main.add_command(address_cmd)


if __name__ == "__main__":
    main()
