"""Render reports into the HTML text body sent to the messaging endpoint."""

from __future__ import annotations

from datetime import date
from html import escape

from dailyreport.models.report import Report, ReportType

NO_REPORT_TEXT = "No report was found for today."


def _numbered(items: list[str], marks: list[bool] | None = None) -> list[str]:
    lines: list[str] = []
    for index, item in enumerate(items, start=1):
        prefix = ""
        if marks is not None and index - 1 < len(marks):
            prefix = "✅ " if marks[index - 1] else "❌ "
        lines.append(f"{index}. {prefix}{escape(item)}")
    return lines


def format_report(report: Report, *, device_name: str, has_voice: bool = False) -> str:
    """Build the message body for ``report``.

    Regular reports list "good" and "bad" items; evaluated custom reports
    prefix each planned item with its evaluation mark.
    """
    day = date.fromisoformat(report.day).strftime("%A, %d %B %Y")
    if report.report_type == ReportType.CUSTOM.value:
        title = f"\U0001F4DD <b>Daily plan - {day}</b>"
    else:
        title = f"\U0001F4C5 <b>Daily report - {day}</b>"
    lines = [title, f"\U0001F4F1 <b>Device: {escape(device_name)}</b>", ""]

    if report.report_type == ReportType.CUSTOM.value:
        marks = report.evaluation_results if report.is_evaluated else None
        if report.good_items:
            lines.append("<b>Plan:</b>")
            lines.extend(_numbered(report.good_items, marks))
            lines.append("")
        if report.is_evaluated and marks:
            done = sum(1 for mark in marks if mark)
            lines.append(f"<i>Completed {done} of {len(marks)}</i>")
    else:
        if report.good_items:
            lines.append("<b>✅ Went well:</b>")
            lines.extend(_numbered(report.good_items))
            lines.append("")
        if report.bad_items:
            lines.append("<b>❌ Went badly:</b>")
            lines.extend(_numbered(report.bad_items))

    text = "\n".join(lines).rstrip("\n")
    if has_voice:
        text += "\n\n\U0001F3A4 <i>Voice note attached</i>"
    return text
