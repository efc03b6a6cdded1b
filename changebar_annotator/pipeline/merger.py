"""
Write the annotation plan into a copy of the PDF with pypdf.

The result goes to a temporary file beside the output and is moved into
place only once fully written, so a failure leaves the original untouched.
"""

import logging
import os
from pathlib import Path

from pypdf import PdfWriter
from pypdf.annotations import FreeText
from pypdf.generic import (
    ArrayObject,
    DictionaryObject,
    Fit,
    FloatObject,
    NameObject,
    NumberObject,
    RectangleObject,
    TextStringObject,
)

from changebar_annotator.errors import MergeError
from changebar_annotator.state import AnnotationPlan, Color, LabelAnnotation, LinkAnnotation

logger = logging.getLogger(__name__)

_CENTERED = 1


def _color_array(color: Color) -> ArrayObject:
    return ArrayObject([FloatObject(c) for c in color])


def _border_style(width: int) -> DictionaryObject:
    return DictionaryObject({NameObject("/W"): NumberObject(width)})


def _view(page_height: float) -> Fit:
    """Upper-left corner of the page at the current zoom."""
    return Fit.xyz(left=0, top=page_height, zoom=0)


def _link(writer: PdfWriter, ann: LinkAnnotation, page_height: float) -> DictionaryObject:
    target = writer.pages[ann.target_page - 1].indirect_reference
    return DictionaryObject({
        NameObject("/Type"): NameObject("/Annot"),
        NameObject("/Subtype"): NameObject("/Link"),
        NameObject("/Rect"): RectangleObject(ann.rect),
        NameObject("/C"): _color_array(ann.color),
        NameObject("/BS"): _border_style(ann.border_width),
        NameObject("/A"): DictionaryObject({
            NameObject("/S"): NameObject("/GoTo"),
            NameObject("/D"): ArrayObject([
                target,
                NameObject("/XYZ"),
                NumberObject(0),
                FloatObject(page_height),
                NumberObject(0),
            ]),
        }),
    })


def _hex_color(color: Color) -> str:
    return "".join(f"{round(c * 255):02x}" for c in color)


def _label(ann: LabelAnnotation) -> FreeText:
    font_color = _hex_color(ann.text_color)
    label = FreeText(text=ann.text, rect=ann.rect, bold=True, font_size=f"{ann.font_size}pt",
                     font_color=font_color, background_color=None)
    # /DS mirrors /DA and /Q
    label[NameObject("/DS")] = TextStringObject(
        f"font: bold Helvetica {ann.font_size}pt;text-align:center;color:#{font_color}"
    )
    r, g, b = ann.text_color
    label[NameObject("/DA")] = TextStringObject(f"{r:g} {g:g} {b:g} rg /{ann.font} {ann.font_size} Tf")
    label[NameObject("/Q")] = NumberObject(_CENTERED)
    label[NameObject("/BS")] = _border_style(ann.border_width)
    return label


def apply_plan(writer: PdfWriter, plan: AnnotationPlan) -> None:
    """Add the outline and annotations to an open writer."""
    view = _view(plan.page_height)
    parent = writer.add_outline_item(plan.outline_title, 0)
    for entry in plan.outline:
        writer.add_outline_item(entry.title, entry.page - 1, parent=parent, fit=view)

    for ann in plan.annotations:
        if isinstance(ann, LinkAnnotation):
            annotation = _link(writer, ann, plan.page_height)
        else:
            annotation = _label(ann)
        writer.add_annotation(page_number=ann.source_page - 1, annotation=annotation)


def write_annotated_pdf(pdf_path: str, output_path: str, plan: AnnotationPlan) -> None:
    output = Path(output_path)
    temp_path = output.with_name(f"{output.stem}_temp{output.suffix}")

    try:
        writer = PdfWriter(clone_from=pdf_path)
        apply_plan(writer, plan)
        with open(temp_path, "wb") as fh:
            writer.write(fh)
    except Exception as exc:
        temp_path.unlink(missing_ok=True)
        raise MergeError(f"Writing annotated PDF failed: {exc}") from exc

    os.replace(temp_path, output)


def merge_annotations(state: dict) -> dict:
    output_path = state["output_path"]
    logger.info("Creating annotated PDF file '%s'...", output_path)
    write_annotated_pdf(state["pdf_path"], output_path, state["plan"])
    return {"written": True}
