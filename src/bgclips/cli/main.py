#!/usr/bin/env python3
"""
bgclips command line interface
Download a gameplay video and cut it into looping background clips
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import yaml
from pydantic import ValidationError

from bgclips.core.errors import BgClipsError, ConfigurationError, ErrorContext, error_handler
from bgclips.core.logging_system import setup_logging
from bgclips.core.pipeline import ClipPipeline
from bgclips.core.planner import parse_timestamps
from bgclips.core.report import render_report
from bgclips.models.config import SOURCE_PRESETS, AppConfig


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bgclips",
        description="Create rotating background clips for the docs site from a gameplay video",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Default source (YouTube short link), five evenly spaced clips
  bgclips

  # Facebook watch URL
  bgclips facebook

  # Hand-picked start times
  bgclips --timestamps 0:10,0:30,1:00,1:30,2:00

  # Settings from a file, transcodes in parallel
  bgclips --config bgclips.yaml --workers 4
        """
    )

    parser.add_argument('source', nargs='?', choices=sorted(SOURCE_PRESETS),
                        help='Source preset (default: youtube, or the config file source)')
    parser.add_argument('-c', '--config', help='Configuration file (YAML or JSON)')
    parser.add_argument('--url', help='Override the source video URL')
    parser.add_argument('--cache-path', help='Where the downloaded source video is kept')
    parser.add_argument('-o', '--output-dir', help='Directory the clips are written to')
    parser.add_argument('--timestamps', type=parse_timestamps,
                        help='Comma-separated start times (SS, MM:SS or HH:MM:SS); '
                             'disables even spacing')
    parser.add_argument('--workers', type=int, help='Number of concurrent transcodes')
    parser.add_argument('--timeout', type=float,
                        help='Timeout in seconds for each external tool call')
    parser.add_argument('--write-config', metavar='FILE',
                        help='Write the effective configuration to FILE and exit')
    parser.add_argument('--no-progress', action='store_true', help='Hide the progress bar')

    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level')
    parser.add_argument('--log-file', help='Log file path')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    return parser


def create_config_from_args(args: argparse.Namespace) -> AppConfig:
    """Load the config file (if any) and apply command line overrides"""
    app_config = AppConfig.load_from_file(args.config) if args.config else AppConfig()
    data = app_config.model_dump()
    pipeline = data['pipeline']

    if args.source:
        pipeline['source'] = SOURCE_PRESETS[args.source].model_dump()
    if args.url:
        pipeline['source']['url'] = args.url
    if args.cache_path:
        pipeline['source']['cache_path'] = args.cache_path
    if args.output_dir:
        pipeline['output_dir'] = args.output_dir
    if args.timestamps is not None:
        pipeline['plan']['explicit_offsets'] = args.timestamps
    if args.workers is not None:
        pipeline['max_workers'] = args.workers
    if args.timeout is not None:
        pipeline['timeout_seconds'] = args.timeout

    if args.debug:
        data['logging']['level'] = 'DEBUG'
    elif args.log_level:
        data['logging']['level'] = args.log_level
    if args.log_file:
        data['logging']['log_file'] = args.log_file

    config = AppConfig.model_validate(data)
    errors = config.validate_config()
    if errors:
        raise ConfigurationError("; ".join(errors), context=ErrorContext("load_config"))
    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point"""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        config = create_config_from_args(args)
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1
    except (ValueError, yaml.YAMLError) as e:
        print(f"Could not read configuration file: {e}", file=sys.stderr)
        return 1
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        return 1
    except ConfigurationError as e:
        print(f"Invalid configuration: {e.message}", file=sys.stderr)
        return 1

    setup_logging(config.logging)
    logger = logging.getLogger(__name__)

    if args.write_config:
        config.save_to_file(args.write_config)
        logger.info(f"Configuration written to {args.write_config}")
        return 0

    pipeline = ClipPipeline(config.pipeline, show_progress=not args.no_progress)

    try:
        report = pipeline.run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 1
    except BgClipsError as e:
        error_handler.handle_error(e)
        return 1

    print()
    print(render_report(report, Path(config.pipeline.source.cache_path)))
    return 0


if __name__ == '__main__':
    sys.exit(main())
