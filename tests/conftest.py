"""Shared fixtures: small synthetic PDFs built with pypdf."""

import pytest
from pypdf import PdfWriter


@pytest.fixture
def make_pdf(tmp_path):
    """Factory writing a PDF of blank letter-size pages, returns its path as str."""

    def _make(pages: int = 3, name: str = "doc.pdf", width: float = 612, height: float = 792) -> str:
        writer = PdfWriter()
        for _ in range(pages):
            writer.add_blank_page(width=width, height=height)
        path = tmp_path / name
        with open(path, "wb") as fh:
            writer.write(fh)
        return str(path)

    return _make


@pytest.fixture
def heights_file(tmp_path):
    """Factory writing ImageMagick-style '<scene> <height>' lines."""

    def _make(heights: list[int], name: str = "heights.txt") -> str:
        path = tmp_path / name
        path.write_text("".join(f"{i} {h}\n" for i, h in enumerate(heights)), encoding="utf-8")
        return str(path)

    return _make
