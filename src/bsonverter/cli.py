"""Command-line interface for bsonverter."""

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from . import __version__
from .converter import BSONConverter
from .models import InputBuffer
from .utils.validation import ValidationUtils


@click.group()
@click.version_option(version=__version__)
def main():
    """bsonverter - Convert .db / .bson document files to JSON."""
    pass


@main.command()
@click.argument('files', nargs=-1, required=True,
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--output', '-o', type=click.Path(file_okay=False, path_type=Path),
              help='Output directory (default: next to each input file)')
@click.option('--stdout', 'to_stdout', is_flag=True, help='Print JSON to stdout instead of writing files')
@click.option('--indent', default=2, show_default=True, help='JSON indentation width')
@click.option('--strip-quoted-keys/--no-strip-quoted-keys', default=True, show_default=True,
              help='Remove literal double quotes wrapping object keys')
@click.option('--keep-partial', is_flag=True,
              help='Keep documents located before a corrupt length prefix')
@click.option('--sequential', is_flag=True, help='Convert files one at a time')
@click.option('--any-extension', is_flag=True, help='Accept files without a .db or .bson extension')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def convert(files: Tuple[Path, ...], output: Optional[Path], to_stdout: bool, indent: int,
            strip_quoted_keys: bool, keep_partial: bool, sequential: bool,
            any_extension: bool, verbose: bool):
    """Convert one or more BSON files to JSON."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    if to_stdout and len(files) > 1:
        click.echo("❌ --stdout takes a single file; use --output for several files", err=True)
        sys.exit(2)

    if not any_extension:
        name_check = ValidationUtils.validate_file_names(path.name for path in files)
        if not name_check.is_valid:
            for error in name_check.errors:
                click.echo(f"❌ {error.message}", err=True)
            sys.exit(2)

    buffers = []
    read_failures = []
    for path in files:
        try:
            buffers.append((path, InputBuffer(name=path.name, data=path.read_bytes())))
        except OSError as e:
            read_failures.append(path)
            click.echo(f"❌ {path.name}: could not read file: {e}", err=True)

    converter = BSONConverter(
        enable_parallel_processing=not sequential,
        strip_quoted_keys=strip_quoted_keys,
        indent=indent,
        keep_partial_on_corruption=keep_partial,
    )
    with converter:
        results = converter.convert_all_sync([buffer for _, buffer in buffers])

    failed = len(read_failures)
    written = {}
    for (path, _), result in zip(buffers, results):
        if not result.success:
            failed += 1
            click.echo(f"❌ {result.original_name}: {result.error_message}", err=True)
            continue

        for warning in result.warnings:
            click.echo(f"⚠️  {result.original_name}: {warning}", err=True)

        if to_stdout:
            click.echo(result.output_text)
            continue

        target = (output or path.parent) / result.output_name
        previous = written.get(target.resolve())
        if previous is not None:
            failed += 1
            click.echo(f"❌ {path}: output {target} was already written from {previous}; "
                       f"not overwriting", err=True)
            continue

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(result.output_text, encoding='utf-8')
        except OSError as e:
            failed += 1
            click.echo(f"❌ {result.original_name}: could not write output: {e}", err=True)
            continue
        written[target.resolve()] = path

        noun = "document" if result.document_count == 1 else "documents"
        click.echo(f"✅ {result.original_name} -> {target} ({result.document_count} {noun})")

    if verbose and converter.profiler is not None:
        summary = converter.profiler.get_performance_summary()
        if summary["total_operations"]:
            click.echo(f"📊 {summary['total_buffers_converted']} converted, "
                       f"{summary['total_buffers_failed']} failed, "
                       f"{summary['total_documents_converted']} documents in "
                       f"{summary['total_duration']:.3f}s "
                       f"(peak memory {summary['max_memory_peak_mb']:.1f} MB)", err=True)

    if failed:
        click.echo(f"{failed} of {len(files)} files failed", err=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
