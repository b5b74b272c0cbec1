"""Redaction report generation (JSON + optional PDF)."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from fpdf import FPDF

import privacyprep
from privacyprep.models import Field, RedactionReport
from privacyprep.projector import SelectionMap, kept_and_removed

REPORT_SUFFIX = '.redaction-report.json'


def build_report(source_file: Optional[str], selection: SelectionMap,
                 fields: Iterable[Field] = (),
                 now: Optional[datetime] = None) -> RedactionReport:
    """Project a selection map into a report.

    The report reflects the user's intent, not what the output format
    could carry: a PNG output still lists kept fields.
    """
    kept, removed = kept_and_removed(selection, fields)
    return RedactionReport(
        source_file=source_file or None,
        kept_fields=kept,
        removed_fields=removed,
        timestamp=now or datetime.now(timezone.utc),
    )


def report_to_json(report: RedactionReport) -> str:
    return json.dumps(report.to_dict(), indent=2)


def report_filename(source_name: str) -> str:
    """``photo.jpg`` -> ``photo.redaction-report.json``."""
    stem = Path(source_name).stem if source_name else 'cleaned-photo'
    return stem + REPORT_SUFFIX


def write_report(report: RedactionReport, output_path: Path,
                 pdf: bool = False) -> Path:
    """Write the report JSON, plus a companion PDF when ``pdf`` is set.

    Returns:
        The JSON path.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(report_to_json(report) + '\n')
    if pdf:
        generate_pdf_report(report, output_path.with_suffix('.pdf'))
    return output_path


# ---------------------------------------------------------------------------
# PDF report generation
# ---------------------------------------------------------------------------

_KEPT_COLOR = (34, 139, 34)      # forest green
_REMOVED_COLOR = (192, 48, 48)   # red


def _sanitize_for_pdf(text: str) -> str:
    """Replace characters the built-in Helvetica font cannot render."""
    return ''.join(c if 0x20 <= ord(c) <= 0x7E else '?' for c in text)


def _pdf_label_value(pdf: FPDF, label: str, value: str):
    pdf.set_font('Helvetica', 'B', 10)
    pdf.cell(35, 6, label, new_x='RIGHT', new_y='TOP')
    pdf.set_font('Helvetica', '', 10)
    pdf.cell(0, 6, _sanitize_for_pdf(value), new_x='LMARGIN', new_y='NEXT')


def _pdf_key_list(pdf: FPDF, title: str, keys: list, color: tuple):
    pdf.set_font('Helvetica', 'B', 11)
    pdf.set_text_color(*color)
    pdf.cell(0, 8, f'{title} ({len(keys)})', new_x='LMARGIN', new_y='NEXT')
    pdf.set_text_color(0, 0, 0)
    pdf.set_font('Helvetica', '', 9)
    if not keys:
        pdf.cell(0, 6, '(none)', new_x='LMARGIN', new_y='NEXT')
    for i, key in enumerate(keys):
        fill = i % 2 == 0
        if fill:
            pdf.set_fill_color(240, 240, 245)
        pdf.cell(0, 6, _sanitize_for_pdf(key), fill=fill,
                 new_x='LMARGIN', new_y='NEXT')
    pdf.ln(3)


def generate_pdf_report(report: RedactionReport, output_path: Path) -> Path:
    """Render a printable version of the report."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    data = report.to_dict()

    pdf = FPDF(orientation='P', unit='mm', format='A4')
    pdf.set_auto_page_break(auto=True, margin=20)
    pdf.add_page()

    pdf.set_font('Helvetica', 'B', 16)
    pdf.cell(0, 10, 'Photo Redaction Report', new_x='LMARGIN', new_y='NEXT')
    pdf.set_font('Helvetica', '', 9)
    pdf.set_text_color(120, 120, 120)
    pdf.cell(0, 5, f'PrivacyPrep v{privacyprep.__version__}',
             new_x='LMARGIN', new_y='NEXT')
    pdf.set_text_color(0, 0, 0)
    pdf.line(10, pdf.get_y() + 1, 200, pdf.get_y() + 1)
    pdf.ln(5)

    _pdf_label_value(pdf, 'Source file:', data['sourceFile'] or '-')
    _pdf_label_value(pdf, 'Generated:', data['time'] or '-')
    pdf.ln(3)

    _pdf_key_list(pdf, 'Kept fields', data['keptFields'], _KEPT_COLOR)
    _pdf_key_list(pdf, 'Removed fields', data['removedFields'], _REMOVED_COLOR)

    pdf.output(str(output_path))
    return output_path
