"""File-level redaction -- single files and batches.

Supports both sequential and parallel (thread pool) batch processing.
Each file gets its own pipeline; nothing is shared between workers.
"""

import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Dict, List, Optional

from privacyprep.errors import PrivacyPrepError
from privacyprep.models import BatchResult, FileResult
from privacyprep.pipeline import DEFAULT_QUALITY, RedactionPipeline
from privacyprep.presets import apply_preset
from privacyprep.projector import SelectionMap
from privacyprep.report import report_filename, write_report

# File extensions considered for batch processing
IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.tif', '.tiff', '.webp'}

_EXTENSIONS = {'jpeg': 'jpg', 'png': 'png'}


def collect_image_files(path: Path) -> List[Path]:
    """Collect all image files from a path (file or directory)."""
    path = Path(path)
    if path.is_file():
        return [path]

    files = []
    for root, _, filenames in os.walk(path):
        for fname in sorted(filenames):
            if Path(fname).suffix.lower() in IMAGE_EXTENSIONS:
                files.append(Path(root) / fname)
    files.sort()
    return files


def output_name(source: Path, output_format: str) -> str:
    """``IMG_1.HEIC.jpg`` -> ``IMG_1.HEIC.clean.jpg``."""
    return f'{Path(source).stem}.clean.{_EXTENSIONS.get(output_format, "img")}'


def redact_file(
    filepath: Path,
    output_dir: Path,
    selection: Optional[SelectionMap] = None,
    preset: Optional[str] = None,
    output_format: str = 'same',
    quality: int = DEFAULT_QUALITY,
    include_report: bool = False,
    pdf_report: bool = False,
    reorient: bool = True,
) -> FileResult:
    """Redact a single image file into ``output_dir``.

    Args:
        filepath: Source image.
        output_dir: Directory for the cleaned image (and report).
        selection: Map of field key to strip flag. Missing keys are stripped.
        preset: Optional preset name; explicit ``selection`` entries override it.
        output_format: ``same``, ``jpeg`` or ``png``.
        quality: JPEG quality, 1-100.
        include_report: Write ``<stem>.redaction-report.json`` next to the output.
        pdf_report: Also write a PDF version of the report.
        reorient: Bake the EXIF orientation into the pixels.

    Returns:
        FileResult. Failures are recorded in ``error``, not raised.
    """
    filepath = Path(filepath)
    output_dir = Path(output_dir)
    t0 = time.monotonic()
    result = FileResult(source_path=filepath)

    try:
        data = filepath.read_bytes()
        pipeline = RedactionPipeline()
        preview = pipeline.load(data, filepath.name)

        effective: Dict[str, bool] = {}
        if preset:
            effective.update(apply_preset(preset, preview.fields))
        effective.update(selection or {})

        outcome = pipeline.finish(effective, output_format=output_format,
                                  quality=quality, include_report=include_report,
                                  reorient=reorient)

        output_dir.mkdir(parents=True, exist_ok=True)
        out_path = output_dir / output_name(filepath, outcome.output_format)
        out_path.write_bytes(outcome.data)
        result.output_path = out_path
        result.reoriented = outcome.reoriented
        result.fields_kept = len(outcome.fields_after)
        result.fields_removed = len(outcome.fields_before) - len(outcome.fields_after)

        if outcome.report is not None:
            result.report_path = write_report(
                outcome.report, output_dir / report_filename(filepath.name),
                pdf=pdf_report)
    except (PrivacyPrepError, OSError, ValueError) as e:
        result.error = str(e)

    result.redaction_time_ms = (time.monotonic() - t0) * 1000
    return result


def redact_batch(
    input_path: Path,
    output_dir: Path,
    selection: Optional[SelectionMap] = None,
    preset: Optional[str] = None,
    output_format: str = 'same',
    quality: int = DEFAULT_QUALITY,
    include_report: bool = False,
    pdf_report: bool = False,
    reorient: bool = True,
    progress_callback: Optional[Callable] = None,
    workers: int = 1,
) -> BatchResult:
    """Redact every image under ``input_path``.

    Output files mirror the input directory layout under ``output_dir``.
    ``progress_callback`` is called with (index, total, filepath, result)
    after each file. ``workers > 1`` processes files in a thread pool;
    results keep submission order.
    """
    input_path = Path(input_path)
    t0 = time.monotonic()

    files = collect_image_files(input_path)
    total = len(files)
    batch = BatchResult(total_files=total)

    jobs = []
    for filepath in files:
        if input_path.is_dir():
            out = Path(output_dir) / filepath.parent.relative_to(input_path)
        else:
            out = Path(output_dir)
        jobs.append((filepath, out))

    options = dict(selection=selection, preset=preset, output_format=output_format,
                   quality=quality, include_report=include_report,
                   pdf_report=pdf_report, reorient=reorient)

    if workers > 1 and total > 1:
        results = _batch_parallel(jobs, options, workers, progress_callback, batch)
    else:
        results = _batch_sequential(jobs, options, progress_callback, batch)

    batch.results = results
    batch.total_time_seconds = time.monotonic() - t0
    return batch


def _batch_sequential(jobs: List, options: dict,
                      progress_callback: Optional[Callable],
                      batch: BatchResult) -> List[FileResult]:
    results = []
    total = len(jobs)
    for i, (filepath, out) in enumerate(jobs):
        try:
            result = redact_file(filepath, out, **options)
        except Exception as e:
            result = FileResult(source_path=filepath, error=str(e))
        results.append(result)
        _update_batch_stats(batch, result)
        if progress_callback:
            progress_callback(i + 1, total, filepath, result)
    return results


def _batch_parallel(jobs: List, options: dict, workers: int,
                    progress_callback: Optional[Callable],
                    batch: BatchResult) -> List[FileResult]:
    """Process files in a thread pool, collecting results in submission order."""
    total = len(jobs)
    results: List[Optional[FileResult]] = [None] * total
    lock = threading.Lock()
    completed = 0

    def process_one(filepath, out):
        try:
            return redact_file(filepath, out, **options)
        except Exception as e:
            return FileResult(source_path=filepath, error=str(e))

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(process_one, filepath, out): (i, filepath)
            for i, (filepath, out) in enumerate(jobs)
        }
        for future in as_completed(futures):
            index, filepath = futures[future]
            result = future.result()
            results[index] = result
            with lock:
                _update_batch_stats(batch, result)
                completed += 1
                if progress_callback:
                    progress_callback(completed, total, filepath, result)

    return results


def _update_batch_stats(batch: BatchResult, result: FileResult):
    if result.error:
        batch.files_errored += 1
    else:
        batch.files_cleaned += 1

