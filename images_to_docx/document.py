"""Document assembler: grid rows -> .docx bytes (python-docx)."""
from __future__ import annotations

import io
from typing import Sequence

from docx import Document
from docx.enum.table import WD_CELL_VERTICAL_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Emu

from .errors import AssemblyError
from .models import DocumentArtifact, GridRow

# same px -> EMU factor the browser docx library uses (96 px per inch)
EMU_PER_PIXEL = 9525
TABLE_STYLE = "Table Grid"
DEFAULT_FILENAME = "images.docx"


def px_to_emu(px: int) -> Emu:
    return Emu(int(px) * EMU_PER_PIXEL)


def _set_full_width(table) -> None:
    tbl_pr = table._tbl.tblPr
    tbl_w = tbl_pr.find(qn("w:tblW"))
    if tbl_w is None:
        tbl_w = OxmlElement("w:tblW")
        style = tbl_pr.find(qn("w:tblStyle"))
        tbl_pr.insert(1 if style is not None else 0, tbl_w)
    # pct is expressed in fiftieths of a percent
    tbl_w.set(qn("w:type"), "pct")
    tbl_w.set(qn("w:w"), "5000")


def _check_geometry(rows: Sequence[GridRow]) -> int:
    columns = len(rows[0].cells)
    for idx, row in enumerate(rows, start=1):
        if len(row.cells) != columns:
            raise AssemblyError(f"row {idx} has {len(row.cells)} cells, expected {columns}")
        for cell in row.cells:
            img = cell.image
            if img is not None and (img.display_width <= 0 or img.display_height <= 0):
                raise AssemblyError(
                    f"image {img.name!r} has invalid display size {img.display_width}x{img.display_height}"
                )
    return columns


def build_document(rows: Sequence[GridRow]):
    """Build the python-docx Document: one section, one full-width table."""
    doc = Document()
    if not rows:
        return doc
    columns = _check_geometry(rows)
    table = doc.add_table(rows=0, cols=columns)
    table.style = TABLE_STYLE
    _set_full_width(table)
    for row in rows:
        cells = table.add_row().cells
        for grid_cell, cell in zip(row.cells, cells):
            img = grid_cell.image
            if img is None:
                # new cells already hold one empty paragraph
                continue
            cell.vertical_alignment = WD_CELL_VERTICAL_ALIGNMENT.CENTER
            paragraph = cell.paragraphs[0]
            paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
            paragraph.add_run().add_picture(
                io.BytesIO(img.data),
                width=px_to_emu(img.display_width),
                height=px_to_emu(img.display_height),
            )
    return doc


def assemble(rows: Sequence[GridRow], filename: str = DEFAULT_FILENAME) -> DocumentArtifact:
    try:
        doc = build_document(rows)
        buf = io.BytesIO()
        doc.save(buf)
    except AssemblyError:
        raise
    except Exception as e:
        raise AssemblyError(f"failed to build document: {e}") from e
    return DocumentArtifact(filename=filename, data=buf.getvalue())
