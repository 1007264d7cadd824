import csv
from pathlib import Path
from typing import List, Sequence, Tuple

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

CSV_HEADER = ["step", "from_hook", "to_hook"]
ORIENTATION_NOTE = "Hook 0 is at 3 o'clock, numbers increase clockwise."

TABLE_STYLE = TableStyle([
    ("BACKGROUND", (0, 0), (-1, 0), colors.black),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
    ("ALIGN", (0, 0), (-1, -1), "CENTER"),
    ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
    ("FONTSIZE", (0, 1), (-1, -1), 9),
    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.whitesmoke, colors.lightgrey]),
])


def chord_rows(path: Sequence[int]) -> List[Tuple[int, int, int]]:
    """(step, from_hook, to_hook) for every chord of the path, steps counted from 1."""
    return [(step, a, b) for step, (a, b) in enumerate(zip(path[:-1], path[1:]), start=1)]


def write_lines_csv(path: Sequence[int], csv_path) -> str:
    Path(csv_path).parent.mkdir(parents=True, exist_ok=True)
    with open(csv_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        writer.writerows(chord_rows(path))
    return str(csv_path)


def write_order_txt(path: Sequence[int], txt_path, per_row: int = 25) -> str:
    Path(txt_path).parent.mkdir(parents=True, exist_ok=True)
    with open(txt_path, "w", encoding="utf-8") as f:
        f.write(f"STRING ART THREAD ORDER ({ORIENTATION_NOTE})\n")
        for i in range(0, len(path), per_row):
            f.write(" ".join(str(x) for x in path[i:i + per_row]) + "\n")
    return str(txt_path)


def write_pdf(path: Sequence[int], pdf_file, rows_per_page: int = 0) -> str:
    """Threading table on A4; rows_per_page > 0 splits it over several pages."""
    rows = [[str(v) for v in row] for row in chord_rows(path)]
    if not rows:
        raise ValueError("path has no chords to print")

    Path(pdf_file).parent.mkdir(parents=True, exist_ok=True)
    doc = SimpleDocTemplate(str(pdf_file), pagesize=A4,
                            leftMargin=15 * mm, rightMargin=15 * mm,
                            topMargin=18 * mm, bottomMargin=18 * mm)

    styles = getSampleStyleSheet()
    story = [
        Paragraph("<b>String Art Threading Instructions</b>", styles["Title"]),
        Spacer(1, 6),
        Paragraph(f"{len(rows)} strings. {ORIENTATION_NOTE}", styles["Normal"]),
        Spacer(1, 10),
    ]

    per_page = rows_per_page if rows_per_page > 0 else len(rows)
    header = ["Step", "From Hook", "To Hook"]
    for start in range(0, len(rows), per_page):
        if start:
            story.append(PageBreak())
        table = Table([header] + rows[start:start + per_page],
                      colWidths=[25 * mm, 45 * mm, 45 * mm], repeatRows=1)
        table.setStyle(TABLE_STYLE)
        story.append(table)

    doc.build(story)
    return str(pdf_file)
