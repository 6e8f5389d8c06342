"""Command-line interface for the boundary and remap core.

Usage:
    mhdcore verify config.json
    mhdcore spectrum --preset driven_loop --t-end 2.0 --samples 9
    mhdcore presets
"""

from __future__ import annotations

import logging
import sys

import click


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """mhdcore — boundary conditions and bz remap for 2D Lagrangian-remap MHD."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_config(config_file: str | None, preset: str | None):
    from mhdcore.config import CoreConfig
    from mhdcore.presets import get_preset

    if config_file:
        return CoreConfig.from_file(config_file)
    if preset:
        return CoreConfig(**get_preset(preset))
    return CoreConfig()


@cli.command()
@click.argument("config_file", type=click.Path(exists=True))
def verify(config_file: str) -> None:
    """Verify a configuration file is valid."""
    from mhdcore.boundary.manager import BoundaryConditionManager
    from mhdcore.config import CoreConfig
    from mhdcore.core.grid import Tile
    from mhdcore.core.halo import SerialHaloExchange

    try:
        config = CoreConfig.from_file(config_file)
        kinds = config.boundaries.as_mapping()
        tile = Tile.from_config(config.grid)
        manager = BoundaryConditionManager(
            tile,
            SerialHaloExchange.from_kinds(tile, kinds),
            driver=config.driver,
            damping=config.damping,
        )
        manager.initialize(kinds)
    except Exception as exc:
        click.echo(f"Configuration error: {exc}", err=True)
        sys.exit(1)

    g = config.grid
    click.echo("Configuration is valid:")
    click.echo(f"  Grid: {g.nx} x {g.ny}")
    click.echo(f"  x: [{g.x_min}, {g.x_max}]  y: [{g.y_min}, {g.y_max}]")
    for edge, kind in kinds.items():
        click.echo(f"  {edge.value}: {kind.value}")
    click.echo(f"  Any open edge: {manager.any_open}")
    click.echo(f"  Driver: {'on' if config.driver.enabled else 'off'}")
    click.echo(f"  Damping: {'on' if config.damping.enabled else 'off'}")


@cli.command()
@click.option("--config", "config_file", type=click.Path(exists=True), default=None,
              help="JSON configuration file.")
@click.option("--preset", type=str, default=None, help="Named preset (ignored with --config).")
@click.option("--t-start", type=float, default=0.0, help="First sample time.")
@click.option("--t-end", type=float, default=1.0, help="Last sample time.")
@click.option("--samples", type=click.IntRange(min=1), default=11, help="Number of samples.")
def spectrum(
    config_file: str | None,
    preset: str | None,
    t_start: float,
    t_end: float,
    samples: int,
) -> None:
    """Print the driven-boundary waveform at evenly spaced times."""
    import numpy as np

    from mhdcore.boundary.spectrum import DrivenBoundarySpectrum

    config = _load_config(config_file, preset)
    d = config.driver
    spec = DrivenBoundarySpectrum.build(
        num_bins=d.num_bins,
        min_omega=d.min_omega,
        max_omega=d.max_omega,
        seed=d.seed,
        amplitude=d.amplitude,
    )
    click.echo(f"{'time':>14} {'vz':>14}")
    for t in np.linspace(t_start, t_end, samples):
        value = spec.evaluate(float(t), d.rise_time)[0]
        click.echo(f"{t:14.6e} {value:14.6e}")


@cli.command()
def presets() -> None:
    """List the named configuration presets."""
    from mhdcore.presets import get_preset_description, get_preset_names

    for name in get_preset_names():
        click.echo(f"  {name:<14} {get_preset_description(name)}")
