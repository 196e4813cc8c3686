"""Typer CLI entrypoint with structured error handling."""

from __future__ import annotations

import sys

import click
import typer

from feeding_kernel.cli.commands.bins import bins
from feeding_kernel.cli.commands.fit import fit
from feeding_kernel.exceptions import (
    ComputationError,
    ConfigError,
    DataError,
    OptimizationError,
)
from feeding_kernel.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Feeding kernel inference CLI")

app.command()(fit)
app.command()(bins)

log = get_logger(__name__, component="cli")


def main() -> int:
    configure_logging(component="cli")
    try:
        app(standalone_mode=False)
    except ConfigError as exc:
        log.error(str(exc))
        return 1
    except DataError as exc:
        log.error(f"Data validation failed: {exc}")
        return 2
    except (ComputationError, OptimizationError) as exc:
        log.error(f"Kernel fitting failed: {exc}")
        return 3
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        return 1
    except KeyboardInterrupt:
        log.info("Shutdown requested")
        return 130
    except Exception:
        log.exception("Unhandled exception")
        return 255
    return 0


if __name__ == "__main__":
    sys.exit(main())
