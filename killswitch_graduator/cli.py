#!/usr/bin/env python3
"""
Kill Switch Graduator CLI - Command-line interface for the graduator

Usage:
    python -m killswitch_graduator find --root ./service                  # List graduated kill switches
    python -m killswitch_graduator find --target-id <id>                  # Look up one kill switch
    python -m killswitch_graduator graduate --threshold 2024-01-01        # Replace calls in memory, report
    python -m killswitch_graduator graduate --output graduation.json      # Write a JSON report
"""

import logging
import sys
from typing import Optional

import click

from killswitch_graduator.config.config_loader import ConfigurationError, load_config
from killswitch_graduator.core import KillSwitchGraduator
from killswitch_graduator.schemas.graduation_schemas_v1 import CoreOptions
from killswitch_graduator.utils.logging_config import setup_basic_logging
from killswitch_graduator.utils.time_utils import default_threshold_date

logger = logging.getLogger(__name__)

_common_options = [
    click.option('--root', default=".", show_default=True,
                 type=click.Path(exists=True, file_okay=False), help="Project root to scan."),
    click.option('--target-id', default=None, help="Graduate exactly this kill switch id (no date check)."),
    click.option('--ks-file', default=None,
                 help="File holding the kill switch declarations, relative to --root (or absolute)."),
    click.option('--threshold', default=None, type=click.DateTime(formats=["%Y-%m-%d"]),
                 help="Graduate kill switches dated before this day (default: now minus threshold_days)."),
    click.option('--config', 'config_path', default=None, type=click.Path(dir_okay=False),
                 help="YAML configuration file."),
    click.option('--verbose', '-v', is_flag=True, help="Enable debug logging."),
    click.option('--log-dir', default=None, type=click.Path(file_okay=False),
                 help="Also write a timestamped log file to this directory."),
]


def common_options(func):
    for option in reversed(_common_options):
        func = option(func)
    return func


def _build(root: str, config_path: Optional[str], verbose: bool, log_dir: Optional[str]) -> KillSwitchGraduator:
    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)
    level = logging.DEBUG if verbose else logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    setup_basic_logging(level=level, log_dir=log_dir or config.log_dir)

    graduator = KillSwitchGraduator(config)
    graduator.load_project(root)
    return graduator


def _options(graduator: KillSwitchGraduator, target_id, ks_file, threshold) -> CoreOptions:
    return CoreOptions(
        target_id=target_id,
        ks_file_path=ks_file,
        threshold_date=threshold or default_threshold_date(graduator.config.threshold_days),
    )


@click.group()
def main():
    """Kill Switch Graduator - retire kill switches that have been off long enough"""
    pass


@main.command()
@common_options
def find(root, target_id, ks_file, threshold, config_path, verbose, log_dir):
    """List kill switch declarations eligible for graduation."""
    graduator = _build(root, config_path, verbose, log_dir)
    options = _options(graduator, target_id, ks_file, threshold)
    result = graduator.find_declarations(options)

    print("🔍 Kill Switch Discovery")
    print("=" * 50)
    print(f"Threshold: {options.threshold_date:%Y-%m-%d}")
    if not result.declarations:
        print("No kill switches ready for graduation.")
        return
    for declaration in result.declarations:
        when = declaration.graduation_date
        when_text = f"{when:%Y-%m-%d}" if when else "n/a"
        location = declaration.source_file.path.relative_to(graduator.project.root)
        print(f"   • {declaration.identifier}  {declaration.name}()  {location}  [{when_text}]")
    print(f"\n📊 Total: {len(result.declarations)}")


@main.command()
@common_options
@click.option('--no-simplify', is_flag=True, help="Keep constant conditions instead of folding them.")
@click.option('--output', default=None, type=click.Path(dir_okay=False), help="Write a JSON report here.")
def graduate(root, target_id, ks_file, threshold, config_path, verbose, log_dir, no_simplify, output):
    """Replace calls of graduated kill switches with constants (in memory) and report."""
    graduator = _build(root, config_path, verbose, log_dir)
    if no_simplify:
        graduator.config.simplify_conditions = False
    report = graduator.graduate(_options(graduator, target_id, ks_file, threshold))

    print("🚀 Kill Switch Graduation")
    print("=" * 50)
    for entry in report.declarations:
        print(f"   • {entry.identifier} ({entry.function_name}): "
              f"{entry.call_sites_replaced} call sites in {len(entry.files_touched)} files")
    print(f"\n📈 Graduated: {len(report.declarations)} kill switches")
    print(f"   Call sites replaced: {report.total_call_sites}")
    print(f"   Files touched: {len(report.touched_files)}")

    if output:
        graduator.write_report(report, output)
        print(f"\n📄 Report written to: {output}")


if __name__ == "__main__":
    main()
