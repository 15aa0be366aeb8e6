"""Command-line entry point: generate an image containing every color once."""

import argparse
import logging
import sys
from pathlib import Path

from domain.errors import ConfigurationError, InvariantViolation
from domain.profiles import load_profile, parse_overrides
from imaging.export import CheckpointExporter
from services.placement_engine import PlacementEngine
from shared.constants import (
    APP_NAME,
    EXIT_CONFIGURATION_ERROR,
    EXIT_EXPORT_FAILURES,
    EXIT_INVARIANT_VIOLATION,
    EXIT_OK,
    LOG_FORMAT,
)
from shared.diagnostics import log_memory_usage, log_thread_status
from shared.progress import ConsoleProgress

logger = logging.getLogger(__name__)


def setup_logging(log_file: Path | None = None, level: int = logging.INFO) -> None:
    """Configure root logging: stdout plus an optional UTF-8 log file."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(log_file), encoding='utf-8'))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description='Generate an image that contains every quantized color exactly once',
    )
    parser.add_argument(
        'profile',
        nargs='?',
        default=None,
        help='Profile name from the profiles directory or path to a .toml file',
    )
    parser.add_argument(
        '-D',
        '--define',
        dest='overrides',
        action='append',
        default=[],
        metavar='KEY=VALUE',
        help='Override a setting, e.g. -D image.width=512 -D color.depth=64',
    )
    parser.add_argument(
        '--log-file',
        type=Path,
        default=None,
        help='Also write the log to this file',
    )
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Do not draw the console progress bar',
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Log every placement',
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_file, logging.DEBUG if args.debug else logging.INFO)
    logger.info('Starting allrgb')

    try:
        settings = load_profile(args.profile, parse_overrides(args.overrides))
    except FileNotFoundError as e:
        logger.error('%s', e)
        return EXIT_CONFIGURATION_ERROR
    except ConfigurationError as e:
        logger.error('Configuration error: %s', e)
        return EXIT_CONFIGURATION_ERROR
    logger.info('Settings: %s', settings.model_dump())

    log_memory_usage('before placement')
    progress = None if args.quiet else ConsoleProgress(settings.total_colors)
    try:
        with CheckpointExporter(
            settings.image_path, settings.image_prefix, settings.image_format
        ) as exporter:
            engine = PlacementEngine(
                settings,
                on_checkpoint=exporter.submit,
                on_progress=progress.update_to if progress is not None else None,
            )
            log_thread_status('placement start')
            engine.run()
    except ConfigurationError as e:
        logger.error('Configuration error: %s', e)
        return EXIT_CONFIGURATION_ERROR
    except InvariantViolation:
        logger.exception('Placement aborted: invariant violated')
        return EXIT_INVARIANT_VIOLATION
    finally:
        if progress is not None:
            progress.close()
    log_memory_usage('after placement')

    if exporter.failures:
        logger.warning(
            'Finished with %d failed checkpoint(s) of %d',
            len(exporter.failures),
            settings.image_amount,
        )
        return EXIT_EXPORT_FAILURES
    logger.info('Finished: %d checkpoint(s) written', len(exporter.written))
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
