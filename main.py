#!/usr/bin/env python3
"""
Command-line export of a Titta eye-tracking recording to delimited tables.

Pipeline:
1. Load configuration (YAML, merged over defaults)
2. Load the .mat recording
3. Build the tables (session info, time series, messages, logs)
4. Optionally bracket every gaze sample with the surrounding messages
5. Write one delimited file per table

Usage:
    python main.py --recording path/to/session.mat --output results/
"""

import argparse
import logging
from pathlib import Path
import sys
from typing import Dict

import yaml

from titta_export import PixelGazeExport, TittaExport
from utils.config_loader import get_nested_config, load_config, load_rename_map
from utils.delimited_writer import write_tables
from utils.recording_io import load_recording

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path('configs/export.yaml')


def configure_logging(output_dir: Path, verbose: bool = False) -> None:
    """Log to stdout and to titta2delim.log in the output directory."""
    output_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(output_dir / 'titta2delim.log'),
            logging.StreamHandler(sys.stdout)
        ],
        force=True
    )


def run_export(recording_path: str, config: Dict, output_dir: str, pixel_gaze: bool = False) -> Dict:
    """
    Execute the export.

    Args:
        recording_path: Path to the Titta .mat recording
        config: Configuration dictionary
        output_dir: Directory for output files
        pixel_gaze: Use PixelGazeExport (needs expt.winRect in the recording)

    Returns:
        Dictionary with 'export' (the TittaExport) and 'files' (table id -> path)
    """
    recording = load_recording(recording_path)

    export_class = PixelGazeExport if pixel_gaze else TittaExport
    export = export_class(
        recording,
        rename_map=config.get('rename_map') or None,
        split_messages=bool(get_nested_config(config, 'export.split_messages', False))
    )
    export.main()

    files = write_tables(
        export.tables,
        output_dir,
        delimiter=get_nested_config(config, 'output.delimiter', ','),
        missing_value=str(get_nested_config(config, 'output.missing_value', 'NaN')),
        extension=get_nested_config(config, 'output.extension', '.csv')
    )

    return {'export': export, 'files': files}


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description='Convert a Titta eye-tracking recording (.mat) to delimited tables',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Basic usage
  python main.py --recording session.mat --output results/

  # Custom column names, semicolon-separated output
  python main.py --recording session.mat --rename-map names.yaml --delimiter ";"

  # Add prior/post message columns to the time series
  python main.py --recording session.mat --split-messages
        """
    )

    parser.add_argument(
        '--recording',
        type=str,
        required=True,
        help='Path to Titta recording (.mat)'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help=f'Path to configuration YAML file (default: {DEFAULT_CONFIG_PATH} if present)'
    )

    parser.add_argument(
        '--rename-map',
        type=str,
        default=None,
        help='YAML mapping of default column name -> export name (replaces config rename_map)'
    )

    parser.add_argument(
        '--output',
        type=str,
        default='data/outputs',
        help='Output directory for tables (default: data/outputs)'
    )

    parser.add_argument(
        '--delimiter',
        type=str,
        default=None,
        help='Field delimiter (default: from config, ",")'
    )

    parser.add_argument(
        '--split-messages',
        action='store_true',
        help='Add prior/post message columns to the time series'
    )

    parser.add_argument(
        '--pixel-gaze',
        action='store_true',
        help='Add window size and gaze in pixels (requires expt.winRect)'
    )

    parser.add_argument(
        '--strict',
        action='store_true',
        help='Exit with an error if any column was skipped'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Debug logging'
    )

    args = parser.parse_args(argv)

    output_dir = Path(args.output)
    configure_logging(output_dir, args.verbose)

    # Validate recording path
    recording_path = Path(args.recording)
    if not recording_path.exists():
        logger.error(f"Recording file not found: {recording_path}")
        return 1

    # Load configuration
    config_path = Path(args.config) if args.config else None
    if config_path is None and DEFAULT_CONFIG_PATH.exists():
        config_path = DEFAULT_CONFIG_PATH

    try:
        config = load_config(config_path)
        if args.rename_map:
            config['rename_map'] = load_rename_map(args.rename_map)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        logger.error(str(e))
        return 1

    # Update config with command-line args
    if args.delimiter is not None:
        config['output']['delimiter'] = args.delimiter
    if args.split_messages:
        config['export']['split_messages'] = True

    try:
        result = run_export(
            recording_path=str(recording_path),
            config=config,
            output_dir=str(output_dir),
            pixel_gaze=args.pixel_gaze
        )
    except RuntimeError as e:
        logger.error(f"Export failed: {e}")
        return 1

    export = result['export']
    logger.info(f"Wrote {len(result['files'])} tables to {output_dir}")

    if args.strict and export.skipped_columns:
        for skipped in export.skipped_columns:
            logger.error(f"  {skipped.table_id}.{skipped.column_name}: {skipped.reason}")
        logger.error(f"{len(export.skipped_columns)} columns skipped (--strict)")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
