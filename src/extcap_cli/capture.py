"""CLI command for a live extcap capture."""
import subprocess
from typing import Dict, Optional, Sequence

import click

from extcap import CaptureOptions, InterfaceRegistry, SessionEntry, SessionManager, create_discovery


def _parse_options(values: Sequence[str]) -> Dict[str, Optional[str]]:
    options: Dict[str, Optional[str]] = {}
    for item in values:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not key:
            raise click.BadParameter(f"Invalid option '{item}'", param_hint="--option")
        options[key] = value if sep else None
    return options


@click.command()
@click.argument("interface")
@click.option("-o", "--option", "provider_options", multiple=True,
              help="Provider argument as KEY=VALUE or bare KEY (repeatable)")
@click.option("--duration", "duration", type=float, default=0, show_default=True,
              help="Stop after this many seconds (0 = until the provider exits)")
@click.pass_context
def capture(ctx: click.Context, interface: str, provider_options, duration: float):
    """
    Run a live capture on INTERFACE.

    Prints the pipe path the provider writes to, then waits.

    Example:
      extcap capture example1 --option=--delay=5
    """
    discovery = create_discovery(ctx.obj, registry=InterfaceRegistry())
    discovery.list_interfaces()
    provider_path = discovery.registry.lookup(interface)
    if provider_path is None:
        raise click.ClickException(f"Unknown extcap interface: {interface}")

    entry = SessionEntry(
        name=interface,
        provider_path=provider_path,
        extra_arguments=_parse_options(provider_options),
    )
    options = CaptureOptions(interfaces=[entry])
    manager = SessionManager(config=ctx.obj)

    if not manager.start_sessions(options):
        raise click.ClickException(f"Failed to create capture pipe for {interface}")

    try:
        click.echo(entry.pipe_path)
        if entry.process is None:
            raise click.ClickException(f"Failed to start {provider_path}")
        try:
            entry.process.wait(timeout=duration or None)
        except subprocess.TimeoutExpired:
            pass
        except KeyboardInterrupt:
            click.echo("Interrupted", err=True)
    finally:
        manager.cleanup_sessions(options)
