"""
Module: exam.output.report

Purpose:
    Render the screening report to PDF, with the clock drawing
    rasterised into the page.

Key Functions:
    - render_report_pdf(): Create the report PDF
    - rasterize_strokes(): Clock drawing strokes -> PIL image

Dependencies:
    - reportlab: PDF generation
    - PIL: Drawing rasterisation
    - exam.output.summary: Report content
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional, Sequence

from PIL import Image, ImageDraw
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from cogniquest.core.models import Answer, ClockDrawingAnswer, Question, ScoreResult, Stroke

from .summary import ReportError, build_report

logger = logging.getLogger(__name__)

# Constants
A4_WIDTH, A4_HEIGHT = A4
MARGIN = 50
LINE_HEIGHT = 16
BODY_FONT = ("Helvetica", 11)
HEADING_FONT = ("Helvetica-Bold", 13)
TITLE_FONT = ("Helvetica-Bold", 18)
DRAWING_SIZE_PX = 400
DRAWING_SIZE_PT = 160


def rasterize_strokes(
    strokes: Sequence[Stroke],
    size_px: int = DRAWING_SIZE_PX,
) -> Image.Image:
    """
    Draw strokes onto a white square image.

    Strokes are scaled uniformly to fit, keeping a small border. A
    drawing with no points gives a blank image.

    Args:
        strokes: Strokes in canvas coordinates
        size_px: Output width and height

    Returns:
        RGB PIL image
    """
    img = Image.new("RGB", (size_px, size_px), color="white")
    points = [p for s in strokes for p in s.points]
    if not points:
        return img

    min_x = min(x for x, _ in points)
    min_y = min(y for _, y in points)
    span = max(
        max(x for x, _ in points) - min_x,
        max(y for _, y in points) - min_y,
        1.0,
    )
    border = size_px * 0.05
    scale = (size_px - 2 * border) / span

    draw = ImageDraw.Draw(img)
    for stroke in strokes:
        mapped = [((x - min_x) * scale + border, (y - min_y) * scale + border) for x, y in stroke.points]
        width = max(1, round(stroke.line_width * scale))
        if len(mapped) == 1:
            x, y = mapped[0]
            r = width / 2
            draw.ellipse((x - r, y - r, x + r, y + r), fill="black")
        elif mapped:
            draw.line(mapped, fill="black", width=width, joint="curve")
    return img


class _PageWriter:
    """Top-down text flow over canvas pages."""

    def __init__(self, c: canvas.Canvas):
        self.c = c
        self.y = A4_HEIGHT - MARGIN
        self.pages = 1

    def ensure_space(self, height: float) -> None:
        if self.y - height < MARGIN:
            self.c.showPage()
            self.pages += 1
            self.y = A4_HEIGHT - MARGIN

    def text(self, value: str, font: tuple = BODY_FONT, indent: float = 0) -> None:
        name, size = font
        width = A4_WIDTH - 2 * MARGIN - indent
        for line in simpleSplit(value, name, size, width) or [""]:
            self.ensure_space(LINE_HEIGHT)
            self.c.setFont(name, size)
            self.c.drawString(MARGIN + indent, self.y - size, line)
            self.y -= LINE_HEIGHT

    def gap(self, height: float = LINE_HEIGHT / 2) -> None:
        self.y -= height

    def image(self, img: Image.Image, size: float, indent: float = 0) -> None:
        self.ensure_space(size)
        self.c.drawImage(
            ImageReader(img),
            MARGIN + indent,
            self.y - size,
            width=size,
            height=size,
            preserveAspectRatio=True,
        )
        self.y -= size


def render_report_pdf(
    questions: Sequence[Question],
    answers: Mapping[int, Answer],
    result: ScoreResult,
    output_path: Path,
    *,
    has_high_school_education: bool,
    generated_at: Optional[datetime] = None,
) -> Path:
    """
    Render the screening report PDF.

    Layout: title and timestamp, score summary, then one block per
    question with its response and points. The clock drawing, when
    present, is embedded under its question.

    Args:
        questions: Questions in exam order
        answers: Question id -> answer
        result: Score of the same questions and answers
        output_path: PDF to write
        has_high_school_education: Education flag the result was scored with
        generated_at: Report timestamp (defaults to now)

    Returns:
        output_path

    Raises:
        ReportError: If the PDF cannot be written

    Example:
        >>> render_report_pdf(questions, answers, result, Path("out/report.pdf"),
        ...                   has_high_school_education=True)
    """
    report = build_report(
        questions,
        answers,
        result,
        has_high_school_education=has_high_school_education,
        generated_at=generated_at,
    )
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ReportError(f"Failed to write PDF {output_path}: {e}") from e

    c = canvas.Canvas(str(output_path), pagesize=A4)
    c.setTitle(report["title"])
    writer = _PageWriter(c)

    writer.text(report["title"], TITLE_FONT)
    writer.text(f"Generated on: {report['generated_at']}")
    writer.gap()

    score = report["score"]
    writer.text("Summary", HEADING_FONT)
    writer.text(f"Final Score: {score['total']} / {score['max_total']}")
    writer.text(f"Interpretation: {score['interpretation_label']}")
    education = "yes" if report["has_high_school_education"] else "no"
    writer.text(f"High-school education: {education}")
    if score["unscored_question_ids"]:
        ids = ", ".join(str(i) for i in score["unscored_question_ids"])
        writer.text(f"Not scored (region unavailable): {ids}")
    writer.gap()

    writer.text("Detailed Responses", HEADING_FONT)
    for row in report["questions"]:
        writer.gap()
        writer.text(f"Q{row['id']}: {row['question']}", ("Helvetica-Bold", 11))
        writer.text(row["response"], indent=12)
        points = "not scored" if row["unscored"] else f"{row['points']} / {row['max_points']}"
        writer.text(f"Points: {points}", indent=12)

        answer = answers.get(row["id"])
        if isinstance(answer, ClockDrawingAnswer) and answer.strokes:
            writer.image(rasterize_strokes(answer.strokes), DRAWING_SIZE_PT, indent=12)

    try:
        c.save()
    except OSError as e:
        raise ReportError(f"Failed to write PDF {output_path}: {e}") from e
    logger.info(f"Rendered report ({writer.pages} pages) to {output_path}")
    return output_path
