"""Extcap command line entry point."""
import logging

import click

from extcap.config import load_config_from_env

from .capture import capture
from .discover import config, dlts, interfaces


@click.group()
@click.option("--extcap-dir", "extcap_dir", type=click.Path(file_okay=False),
              help="Provider directory (default: $EXTCAP_DIR)")
@click.option("-v", "--verbose", "verbose", count=True,
              help="Increase log verbosity (-v info, -vv debug)")
@click.pass_context
def cli(ctx: click.Context, extcap_dir, verbose: int):
    """Discover and run extcap capture providers."""
    try:
        settings = load_config_from_env()
    except ValueError as e:
        raise click.UsageError(str(e))
    if extcap_dir:
        settings.extcap_dir = extcap_dir

    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = getattr(logging, settings.log_level)
    logging.basicConfig(level=level,
                        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                        datefmt="%H:%M:%S")

    ctx.obj = settings


cli.add_command(interfaces)
cli.add_command(dlts)
cli.add_command(config)
cli.add_command(capture)


if __name__ == "__main__":
    cli()
