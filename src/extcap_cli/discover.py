"""CLI commands for provider discovery queries."""
import json

import click

from extcap import ExtcapError, InterfaceRegistry, create_discovery


def _discovery(ctx: click.Context):
    discovery = create_discovery(ctx.obj, registry=InterfaceRegistry())
    found = discovery.list_interfaces()
    return discovery, found


def _emit(payload) -> None:
    click.echo(json.dumps(payload, indent=2))


@click.command()
@click.pass_context
def interfaces(ctx: click.Context):
    """List interfaces advertised by all providers."""
    _, found = _discovery(ctx)
    _emit([iface.to_dict() for iface in found])


@click.command()
@click.argument("interface")
@click.pass_context
def dlts(ctx: click.Context, interface: str):
    """Show the link-layer types of INTERFACE."""
    discovery, _ = _discovery(ctx)
    try:
        caps = discovery.get_capabilities(interface)
    except ExtcapError as e:
        raise click.ClickException(str(e))
    _emit(caps.to_dict())


@click.command()
@click.argument("interface")
@click.pass_context
def config(ctx: click.Context, interface: str):
    """Show the configurable arguments of INTERFACE."""
    discovery, _ = _discovery(ctx)
    if interface not in discovery.registry:
        raise click.ClickException(f"Unknown extcap interface: {interface}")
    try:
        schemas = discovery.get_configuration(interface)
    except ExtcapError as e:
        raise click.ClickException(str(e))
    _emit([[arg.to_dict() for arg in schema] for schema in schemas])
