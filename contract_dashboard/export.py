"""
Export the scan history as CSV, a self-contained HTML report, or PDF.

Every exporter is a pure function of the records and the generation time, so
the same history exported at the same instant yields identical bytes.
"""
import csv
import html
from collections.abc import Sequence
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from io import BytesIO, StringIO

from contract_dashboard.analytics import severity_distribution, success_rate, total_vulnerabilities
from contract_dashboard.classifier import classify_tier
from contract_dashboard.labels import format_timestamp_label
from contract_dashboard.models import ScanRecord, SeverityTier

CSV_HEADER = [
    "Date",
    "Time",
    "Contract",
    "Network",
    "Status",
    "Vulnerabilities",
    "Duration",
    "Lines of Code",
    "Functions",
]
CSV_MEDIA_TYPE = "text/csv;charset=utf-8"
HTML_MEDIA_TYPE = "text/html"
PDF_MEDIA_TYPE = "application/pdf"
MISSING_VALUE = "N/A"


def _utc_date(moment: datetime | None) -> str:
    """ISO date of the moment in UTC; naive moments are taken as UTC already."""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date().isoformat()


def csv_filename(moment: datetime | None = None) -> str:
    return f"scan-history-{_utc_date(moment)}.csv"


def report_filename(moment: datetime | None = None) -> str:
    return f"vulnerability-report-{_utc_date(moment)}.html"


def pdf_report_filename(moment: datetime | None = None) -> str:
    return f"vulnerability-report-{_utc_date(moment)}.pdf"


def _optional(value: int | None) -> str:
    return MISSING_VALUE if value is None else str(value)


def format_success_rate(records: Sequence[ScanRecord]) -> str:
    """Success rate as a percentage with one decimal, e.g. ``85.7%``."""
    if not records:
        return "0.0%"
    percent = Decimal(success_rate(records) * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{percent}%"


def export_to_csv(records: Sequence[ScanRecord]) -> str:
    """Export the history to CSV, one fully quoted row per record."""
    output = StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    output.write(",".join(CSV_HEADER) + "\n")
    for record in records:
        writer.writerow(
            [
                record.date_label,
                record.time_label,
                record.target,
                record.network,
                "Success" if record.succeeded else "Failed",
                str(record.vulnerability_count),
                record.duration_label,
                _optional(record.lines_of_code),
                _optional(record.functions_analyzed),
            ]
        )
    # every row ends with "\n"; drop only the last terminator
    return output.getvalue()[:-1]


def parse_csv(content: str) -> list[dict[str, str]]:
    """Read a CSV export back into one dict per row, keyed by header."""
    return list(csv.DictReader(StringIO(content)))


def export_to_html(records: Sequence[ScanRecord], generated_at: datetime | None = None) -> str:
    """
    Export the history to a standalone HTML report with headline metrics.
    """
    generated_at = generated_at or datetime.now()
    critical_count = severity_distribution(records)[SeverityTier.CRITICAL]

    rows = ""
    for record in records:
        tier = classify_tier(record.vulnerability_count).value
        status = "&#10003; Success" if record.succeeded else "&#10007; Failed"
        rows += f"""
            <tr>
                <td>{html.escape(record.date_label)}</td>
                <td style="font-family: monospace; font-size: 12px;">{html.escape(record.target)}</td>
                <td>{html.escape(record.network)}</td>
                <td>{status}</td>
                <td class="{tier.lower()}">{tier}</td>
                <td>{record.vulnerability_count}</td>
            </tr>"""

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Smart Contract Vulnerability Report</title>
    <style>
        body {{ font-family: Arial, sans-serif; padding: 20px; }}
        h1 {{ color: #333; }}
        .metrics {{ display: grid; grid-template-columns: repeat(4, 1fr); gap: 20px; margin: 20px 0; }}
        .metric-card {{ border: 1px solid #ddd; padding: 15px; border-radius: 8px; }}
        .metric-value {{ font-size: 24px; font-weight: bold; color: #6366f1; }}
        table {{ width: 100%; border-collapse: collapse; margin-top: 20px; }}
        th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
        th {{ background-color: #f3f4f6; }}
        .critical {{ color: #ef4444; font-weight: bold; }}
        .high {{ color: #f97316; font-weight: bold; }}
        .medium {{ color: #eab308; font-weight: bold; }}
        .low {{ color: #22c55e; font-weight: bold; }}
    </style>
</head>
<body>
    <h1>Smart Contract Vulnerability Scanner Report</h1>
    <p>Generated on: {format_timestamp_label(generated_at)}</p>

    <div class="metrics">
        <div class="metric-card">
            <div>Total Scans</div>
            <div class="metric-value">{len(records)}</div>
        </div>
        <div class="metric-card">
            <div>Vulnerabilities Found</div>
            <div class="metric-value">{total_vulnerabilities(records)}</div>
        </div>
        <div class="metric-card">
            <div>Success Rate</div>
            <div class="metric-value">{format_success_rate(records)}</div>
        </div>
        <div class="metric-card">
            <div>Critical Issues</div>
            <div class="metric-value">{critical_count}</div>
        </div>
    </div>

    <h2>Recent Scans</h2>
    <table>
        <thead>
            <tr>
                <th>Date</th>
                <th>Contract</th>
                <th>Network</th>
                <th>Status</th>
                <th>Risk Level</th>
                <th>Vulnerabilities</th>
            </tr>
        </thead>
        <tbody>{rows}
        </tbody>
    </table>
</body>
</html>
"""


def export_report_pdf(records: Sequence[ScanRecord], generated_at: datetime | None = None) -> bytes:
    """
    Export the same report as a PDF document.

    Args:
        records: Scan history, newest first
        generated_at: Timestamp printed in the report header

    Returns:
        PDF file content as bytes
    """
    try:
        from reportlab.lib import colors
        from reportlab.lib.enums import TA_CENTER
        from reportlab.lib.pagesizes import letter
        from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
        from reportlab.lib.units import inch
        from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
    except ImportError:
        raise ImportError("reportlab is required for PDF export. Install with: pip install reportlab")

    generated_at = generated_at or datetime.now()
    critical_count = severity_distribution(records)[SeverityTier.CRITICAL]

    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=letter, invariant=1)
    story = []
    styles = getSampleStyleSheet()

    title_style = ParagraphStyle(
        'ReportTitle',
        parent=styles['Heading1'],
        fontSize=20,
        textColor=colors.HexColor('#6366f1'),
        spaceAfter=20,
        alignment=TA_CENTER
    )

    story.append(Paragraph("Smart Contract Vulnerability Scanner Report", title_style))
    story.append(Paragraph(f"Generated on: {format_timestamp_label(generated_at)}", styles['Normal']))
    story.append(Spacer(1, 0.3 * inch))

    metrics_data = [
        ["Total Scans", "Vulnerabilities Found", "Success Rate", "Critical Issues"],
        [str(len(records)), str(total_vulnerabilities(records)), format_success_rate(records), str(critical_count)],
    ]
    metrics_table = Table(metrics_data, colWidths=[1.6 * inch] * 4)
    metrics_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#f3f4f6')),
        ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
        ('FONTNAME', (0, 1), (-1, 1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 1), (-1, 1), 14),
        ('TEXTCOLOR', (0, 1), (-1, 1), colors.HexColor('#6366f1')),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
    ]))
    story.append(metrics_table)
    story.append(Spacer(1, 0.3 * inch))

    story.append(Paragraph("Recent Scans", styles['Heading2']))
    scan_rows = [["Date", "Contract", "Network", "Status", "Risk Level", "Vulnerabilities"]]
    for record in records:
        scan_rows.append([
            record.date_label,
            Paragraph(html.escape(record.target), styles['Code']),
            record.network,
            "Success" if record.succeeded else "Failed",
            classify_tier(record.vulnerability_count).value,
            str(record.vulnerability_count),
        ])
    scans_table = Table(scan_rows, colWidths=[1.0 * inch, 2.4 * inch, 0.9 * inch, 0.7 * inch, 0.8 * inch, 0.8 * inch])
    scans_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#f3f4f6')),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 8),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
    ]))
    story.append(scans_table)

    doc.build(story)
    pdf_content = buffer.getvalue()
    buffer.close()

    return pdf_content
