#!/usr/bin/env python3
"""Command line runner for the example hybridsim models."""

import argparse
import sys

import numpy as np

from hybridsim import (
    EulerIntegrator,
    HybridSimException,
    Notification,
    NotificationType,
    RKCKIntegrator,
    Simulation,
    config,
)
from hybridsim.logging import configure_logging, get_logger
from models import UnknownModelError, default_registry

logger = get_logger(__name__)

INTEGRATORS = {
    "euler": EulerIntegrator,
    "rkck": RKCKIntegrator,
}


def _plain(value):
    if isinstance(value, np.ndarray):
        return value.tolist()
    return value


def log_output(notification: Notification) -> None:
    """Log a snapshot of every component output."""
    outputs = {}
    for component in notification.simulation:
        for name, port in component.outputs.items():
            outputs[f"{component.name}.{name}"] = _plain(port.value)

    logger.info("simulation.output", time=round(notification.current_time, 6), **outputs)


def log_message(notification: Notification) -> None:
    logger.info("component.message", time=notification.current_time, message=str(notification.message))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run one of the example hybridsim models",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --list
  %(prog)s --model exp_growth --stop 10 --step 1
  %(prog)s --model bouncing_ball --stop 15 --integrator rkck
        """,
    )

    parser.add_argument(
        "--model",
        type=str,
        default="exp_growth",
        help="Name of the model to run (default: exp_growth)",
    )

    parser.add_argument(
        "--list",
        action="store_true",
        help="List the available models and exit",
    )

    parser.add_argument(
        "--start",
        type=float,
        default=config.start_time,
        help=f"Start time (default: {config.start_time})",
    )

    parser.add_argument(
        "--stop",
        type=float,
        default=config.stop_time,
        help=f"Stop time (default: {config.stop_time})",
    )

    parser.add_argument(
        "--step",
        type=float,
        default=config.time_step,
        help=f"Integrator time step, the initial step for rkck (default: {config.time_step})",
    )

    parser.add_argument(
        "--integrator",
        choices=sorted(INTEGRATORS),
        default="euler",
        help="Integration method (default: euler)",
    )

    parser.add_argument(
        "--accuracy",
        type=float,
        default=config.accuracy,
        help=f"State event localization accuracy (default: {config.accuracy})",
    )

    parser.add_argument(
        "--tolerance",
        type=float,
        default=config.tolerance,
        help=f"Error tolerance for rkck (default: {config.tolerance})",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=config.log_level,
        help=f"Logging level (default: {config.log_level})",
    )

    parser.add_argument(
        "--log-format",
        choices=["json", "console"],
        default=config.log_format,
        help=f"Log output format (default: {config.log_format})",
    )

    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if args.list:
        for name in default_registry.names():
            print(name)
        return 0

    configure_logging(args.log_level, args.log_format)

    integrator = INTEGRATORS[args.integrator](time_step=args.step, tolerance=args.tolerance)

    try:
        sim = Simulation(
            start_time=args.start,
            stop_time=args.stop,
            accuracy=args.accuracy,
            integrator=integrator,
            name=args.model,
        )
        default_registry.create(args.model, sim)
    except (UnknownModelError, ValueError) as e:
        logger.error("simulation.setup_failed", model=args.model, error=str(e))
        return 2

    sim.on(NotificationType.OUTPUT, log_output)
    sim.on(NotificationType.LOG, log_message)

    try:
        sim.run()
    except HybridSimException as e:
        logger.error("simulation.run_failed", model=args.model, error=str(e), exc_info=True)
        return 1

    logger.info("simulation.finished", **sim.get_status())
    return 0


if __name__ == "__main__":
    sys.exit(main())
