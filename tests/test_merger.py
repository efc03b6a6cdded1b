"""
Tests for writing the annotation plan into a PDF.
"""

from pathlib import Path

import pytest
from pypdf import PdfReader

from changebar_annotator.errors import MergeError
from changebar_annotator.pipeline import merger
from changebar_annotator.pipeline.layout import build_annotations, build_outline, OUTLINE_TITLE
from changebar_annotator.pipeline.merger import write_annotated_pdf
from changebar_annotator.pipeline.sectioner import build_sections
from changebar_annotator.state import AnnotationPlan


def _plan(changed_pages, page_height=792.0):
    sections, next_page = build_sections(changed_pages)
    return AnnotationPlan(
        page_height=page_height,
        outline_title=OUTLINE_TITLE,
        outline=tuple(build_outline(sections)),
        annotations=tuple(build_annotations(changed_pages, next_page)),
    )


def _annots(reader, index):
    page = reader.pages[index]
    if "/Annots" not in page:
        return []
    return [a.get_object() for a in page["/Annots"]]


class TestWriteAnnotatedPdf:

    def test_outline(self, make_pdf, tmp_path):
        src = make_pdf(pages=11)
        out = str(tmp_path / "out.pdf")
        write_annotated_pdf(src, out, _plan([3, 5, 6, 7, 10]))

        reader = PdfReader(out)
        outline = reader.outline
        assert outline[0].title == OUTLINE_TITLE
        assert [item.title for item in outline[1]] == ["#1 - p. 3", "#2 - pp. 5-7", "#3 - p. 10"]
        assert [reader.get_destination_page_number(item) for item in outline[1]] == [2, 4, 9]

    def test_links_and_labels(self, make_pdf, tmp_path):
        src = make_pdf(pages=11)
        out = str(tmp_path / "out.pdf")
        write_annotated_pdf(src, out, _plan([3, 5, 6, 7, 10]))

        reader = PdfReader(out)
        first = _annots(reader, 0)
        assert [a["/Subtype"] for a in first] == ["/Link", "/FreeText"]

        link, label = first
        assert [float(v) for v in link["/Rect"]] == [3, 3, 609, 39]
        assert [float(c) for c in link["/C"]] == [1.0, 0.25, 0.25]
        dest = link["/A"]["/D"]
        assert dest[0].idnum == reader.pages[2].indirect_reference.idnum
        assert dest[1] == "/XYZ"
        assert float(dest[3]) == 792.0

        assert label["/Contents"] == "5 pages left\n(Go to first change)"
        assert label["/Q"] == 1
        assert "/HeBo 11 Tf" in label["/DA"]

        assert "text-align:center" in label["/DS"]
        assert "color:#000000" in label["/DS"]

        # page 5 jumps to adjacent page 6: muted gray label
        muted = _annots(reader, 4)[1]
        assert muted["/Contents"] == "3 pages left"
        assert muted["/DA"].startswith("0.7 0.7 0.7 rg")
        assert "color:#b2b2b2" in muted["/DS"]
        assert "text-align:center" in muted["/DS"]

        last_link, last_label = _annots(reader, 9)
        assert last_link["/A"]["/D"][0].idnum == reader.pages[2].indirect_reference.idnum
        assert [float(c) for c in last_link["/C"]] == [0.25, 1.0, 0.25]
        assert last_label["/Contents"] == "Review finished!\n(go to first change)"

        # unchanged pages get nothing
        assert _annots(reader, 1) == []
        assert _annots(reader, 10) == []

    def test_in_place(self, make_pdf):
        src = make_pdf(pages=3)
        write_annotated_pdf(src, src, _plan([2]))
        reader = PdfReader(src)
        assert len(reader.pages) == 3
        assert reader.outline[0].title == OUTLINE_TITLE
        assert not Path(src).with_name("doc_temp.pdf").exists()

    def test_failure_leaves_original_untouched(self, make_pdf, monkeypatch):
        src = make_pdf(pages=3)
        before = Path(src).read_bytes()

        def broken(writer, plan):
            raise RuntimeError("boom")

        monkeypatch.setattr(merger, "apply_plan", broken)
        with pytest.raises(MergeError) as exc_info:
            write_annotated_pdf(src, src, _plan([2]))
        assert "boom" in str(exc_info.value)
        assert Path(src).read_bytes() == before
        assert not Path(src).with_name("doc_temp.pdf").exists()
