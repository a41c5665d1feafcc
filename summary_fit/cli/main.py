"""Typer CLI entrypoint with structured error handling."""

from __future__ import annotations

import sys

import typer

from summary_fit.cli.commands.batch import batch
from summary_fit.cli.commands.fit import fit
from summary_fit.exceptions import (
    ComputationFailureError,
    ConfigError,
    EstimatorError,
    InputValidityError,
)
from summary_fit.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Fit a distribution to excerpted summary statistics", pretty_exceptions_enable=False)


app.command()(fit)
app.command()(batch)


log = get_logger(__name__, component="cli")


def main() -> None:
    configure_logging(component="cli")
    try:
        app()
    except ConfigError as exc:
        log.error(str(exc))
        raise SystemExit(1)
    except InputValidityError as exc:
        log.error(f"Input error: {exc}")
        raise SystemExit(2)
    except ComputationFailureError as exc:
        log.error(f"No distribution could be fitted: {exc}")
        raise SystemExit(3)
    except EstimatorError as exc:
        log.error(f"Estimator failure: {exc}")
        raise SystemExit(4)
    except KeyboardInterrupt:
        log.info("Interrupted")
        raise SystemExit(130)
    except Exception:
        log.exception("Unhandled exception")
        raise SystemExit(255)


if __name__ == "__main__":
    # Use sys.exit to ensure proper exit code propagation under raw python invocation
    sys.exit(main())
