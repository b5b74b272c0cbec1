"""CLI interface for PrivacyPrep -- inspect, clean, prefs subcommands."""

import json
import sys
import time
from pathlib import Path

import click

import privacyprep
from privacyprep.config import Preferences, clear_preferences, default_prefs_path
from privacyprep.errors import UnreadableInputError
from privacyprep.log import (
    cli_bold, cli_dim, cli_error, cli_field, cli_header, cli_separator,
    cli_success, cli_warning, log_error, log_info,
)
from privacyprep.pipeline import OUTPUT_FORMATS, RedactionPipeline
from privacyprep.presets import PRESETS, group_by_category
from privacyprep.projector import default_selection
from privacyprep.redactor import collect_image_files, redact_batch


@click.group()
@click.version_option(version=privacyprep.__version__, prog_name='privacyprep')
def main():
    """PrivacyPrep -- strip private EXIF metadata from photos.

    Inspect the metadata of JPEG, PNG, TIFF and WebP images and write
    cleaned copies that keep only the fields you choose.
    """
    pass


@main.command()
@click.argument('path', type=click.Path(exists=True))
@click.option('--json-out', type=click.Path(), help='Write the field listing as JSON to file.')
def inspect(path, json_out):
    """List the metadata fields of an image.

    PATH can be a single file or a directory to inspect recursively.
    Fields are marked with what a plain `clean` would do to them.
    """
    input_path = Path(path)
    files = collect_image_files(input_path)
    if not files:
        click.echo(f'No image files found in {input_path}')
        return

    prefs = Preferences.load()
    results_json = []
    errors = 0

    for filepath in files:
        pipeline = RedactionPipeline()
        try:
            preview = pipeline.load(filepath.read_bytes(), filepath.name)
        except (UnreadableInputError, OSError) as e:
            errors += 1
            click.echo(cli_error(f'{filepath.name}: {e}'))
            continue

        selection = default_selection(preview.fields, prefs.strip_map)
        click.echo(cli_header(filepath.name))
        click.echo(f'  Format: {preview.source_format}  '
                   f'Size: {preview.width}x{preview.height}  '
                   f'Orientation: {preview.orientation}')
        if not preview.fields:
            click.echo(cli_dim('  No metadata fields'))
        for category, fields in group_by_category(preview.fields).items():
            click.echo(f'  {cli_bold(category)}')
            for f in fields:
                click.echo(cli_field(f.key, f.value.display(), selection[f.key]))
        click.echo(cli_separator())

        if json_out:
            results_json.append({
                'file': str(filepath),
                'format': preview.source_format,
                'width': preview.width,
                'height': preview.height,
                'orientation': preview.orientation,
                'fields': [{'key': f.key, 'type': f.value.kind,
                            'value': f.value.display(),
                            'strip': selection[f.key]} for f in preview.fields],
            })

    if json_out:
        with open(json_out, 'w') as f:
            json.dump(results_json, f, indent=2)
        click.echo(f'Results written to {json_out}')

    if errors:
        sys.exit(1)


@main.command()
@click.argument('path', type=click.Path(exists=True))
@click.option('--output', '-o', type=click.Path(), required=True,
              help='Output directory for cleaned copies.')
@click.option('--keep', 'keep_keys', multiple=True, metavar='KEY',
              help='Keep this field, e.g. "capture:FNumber". Repeatable.')
@click.option('--strip', 'strip_keys', multiple=True, metavar='KEY',
              help='Strip this field. Repeatable.')
@click.option('--preset', type=click.Choice(sorted(PRESETS)),
              help='Start from a preset instead of remembered choices.')
@click.option('--format', 'fmt', type=click.Choice(OUTPUT_FORMATS),
              help='Output format (default: same as input, or remembered).')
@click.option('--quality', '-q', type=click.IntRange(1, 100),
              help='JPEG quality 1-100 (encoded at 70 or above).')
@click.option('--report/--no-report', default=None,
              help='Write a redaction report next to each output.')
@click.option('--pdf', is_flag=True, help='Also write the report as PDF.')
@click.option('--keep-orientation', is_flag=True,
              help='Leave pixels as stored instead of applying the Orientation tag.')
@click.option('--workers', '-w', type=int, default=1,
              help='Number of parallel workers (default: 1, sequential).')
@click.option('--remember', is_flag=True, help='Save these choices as defaults.')
@click.option('--log', type=click.Path(), help='Write log to file.')
def clean(path, output, keep_keys, strip_keys, preset, fmt, quality, report, pdf,
          keep_orientation, workers, remember, log):
    """Write cleaned copies of images.

    PATH can be a single file or a directory to process recursively.
    Every field not explicitly kept is removed.
    """
    input_path = Path(path)
    output_dir = Path(output)

    prefs = Preferences.load()
    output_format = fmt or prefs.output_format
    quality = quality if quality is not None else prefs.quality
    include_report = prefs.include_report if report is None else report

    selection = {} if preset else dict(prefs.strip_map)
    for key in keep_keys:
        selection[key] = False
    for key in strip_keys:
        selection[key] = True

    log_file = open(log, 'w') if log else None

    def log_msg(msg, line=log_info):
        click.echo(msg)
        if log_file:
            log_file.write(line(click.unstyle(msg).strip()) + '\n')
            log_file.flush()

    files = collect_image_files(input_path)
    if not files:
        log_msg(f'No image files found in {input_path}')
        if log_file:
            log_file.close()
        return

    workers_str = f', {workers} workers' if workers > 1 else ''
    log_msg(f'PrivacyPrep v{privacyprep.__version__} -- cleaning{workers_str}')
    log_msg(f'Processing {len(files)} file(s)...\n')

    t0 = time.time()

    def progress(i, total, filepath, result):
        elapsed = time.time() - t0
        rate = i / elapsed if elapsed > 0 else 0

        if result.error:
            status = cli_error(f'ERROR: {result.error}')
        else:
            status = (f'kept {result.fields_kept}, '
                      f'removed {result.fields_removed} field(s)')
            if result.reoriented:
                status += ' [reoriented]'
            status = cli_success(status)

        log_msg(f'  [{i}/{total}] {rate:.1f}/s | {filepath.name} | {status}',
                log_error if result.error else log_info)

    batch_result = redact_batch(
        input_path, output_dir,
        selection=selection, preset=preset,
        output_format=output_format, quality=quality,
        include_report=include_report, pdf_report=pdf,
        reorient=not keep_orientation,
        progress_callback=progress, workers=workers,
    )

    log_msg(f'\nDone in {batch_result.total_time_seconds:.1f}s')
    log_msg(f'  Total:   {batch_result.total_files}')
    log_msg(f'  Cleaned: {batch_result.files_cleaned}')
    log_msg(f'  Errors:  {batch_result.files_errored}')

    if remember:
        prefs.remember = True
        prefs.quality = quality
        prefs.output_format = output_format
        prefs.include_report = include_report
        prefs.strip_map.update(selection)
        saved = prefs.save()
        log_msg(cli_warning(f'\nPreferences saved to {saved}'))

    if log_file:
        log_file.close()

    if batch_result.files_errored > 0:
        sys.exit(1)


@main.command()
@click.option('--reset', is_flag=True, help='Delete stored preferences.')
def prefs(reset):
    """Show or reset stored preferences."""
    path = default_prefs_path()
    if reset:
        if clear_preferences(path):
            click.echo(f'Removed {path}')
        else:
            click.echo('No stored preferences')
        return

    current = Preferences.load(path)
    click.echo(f'File: {path}' + ('' if path.exists() else ' (not saved)'))
    click.echo(f'Quality: {current.quality}')
    click.echo(f'Output format: {current.output_format}')
    click.echo(f'Include report: {current.include_report}')
    click.echo(f'Remember: {current.remember}')
    if current.strip_map:
        click.echo('Fields:')
        for key, strip in sorted(current.strip_map.items()):
            click.echo(f'  {key}: ' + (cli_warning('strip') if strip else cli_success('keep')))


if __name__ == '__main__':
    main()
