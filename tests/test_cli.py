from __future__ import annotations

from io import BytesIO
from pathlib import Path

import pytest
from click.testing import CliRunner
from pypdf import PdfReader

from pdfdrawx.cli import cli
from pdfdrawx.demos import DEMOS, SAMPLE_TEXT, build_demo
from pdfdrawx.fonts import STANDARD_FONT_NAMES
from pdfdrawx.types import CompressionMode, DocumentOptions


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def test_demos_lists_the_catalogue(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["demos"])

    assert result.exit_code == 0
    for name in ("fonts", "grid", "lines", "shapes", "text", "truetype-fonts"):
        assert name in result.output


@pytest.mark.parametrize("name", ["fonts", "grid", "lines", "shapes", "text"])
def test_demo_writes_pdf_file(runner: CliRunner, tmp_path: Path, name: str) -> None:
    output = tmp_path / f"{name}.pdf"

    result = runner.invoke(cli, ["demo", name, "--output", str(output)])

    assert result.exit_code == 0, result.output
    reader = PdfReader(str(output))
    assert len(reader.pages) == 1


def test_demo_writes_to_stdout(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["demo", "lines", "--compression", "text"])

    assert result.exit_code == 0
    assert result.stdout_bytes.startswith(b"%PDF-")
    reader = PdfReader(BytesIO(result.stdout_bytes))
    assert reader.pages[0]["/Contents"].get_object().get("/Filter") == "/FlateDecode"


def test_truetype_demo_requires_font(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["demo", "truetype-fonts"])

    assert result.exit_code == 1
    assert "--font" in result.output


def test_truetype_demo_with_font(runner: CliRunner, tmp_path: Path, font_file: Path) -> None:
    output = tmp_path / "fonts.pdf"

    result = runner.invoke(cli, ["demo", "truetype-fonts", "--font", str(font_file), "-o", str(output)])

    assert result.exit_code == 0, result.output
    fonts = PdfReader(str(output)).pages[0]["/Resources"]["/Font"]
    assert fonts["/F2"]["/FontDescriptor"]["/FontFile2"] is not None


def test_truetype_demo_without_embedding(runner: CliRunner, tmp_path: Path, font_file: Path) -> None:
    output = tmp_path / "fonts.pdf"

    result = runner.invoke(
        cli, ["demo", "truetype-fonts", "--font", str(font_file), "--no-embed", "-o", str(output)]
    )

    assert result.exit_code == 0, result.output
    fonts = PdfReader(str(output)).pages[0]["/Resources"]["/Font"]
    assert "/FontFile2" not in fonts["/F2"]["/FontDescriptor"]


def test_unknown_demo_is_rejected(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["demo", "nope"])

    assert result.exit_code != 0


def test_truetype_demo_sizes_page_to_text(ttf_bytes: bytes) -> None:
    with build_demo("truetype-fonts", font_data=ttf_bytes) as document:
        page = document.pages[0]
        font = document.fonts[1][1]

        assert document.compression_mode == CompressionMode.ALL
        assert page.width == pytest.approx(font.measure(SAMPLE_TEXT, 30) + 40)
        assert page.height == 210


def test_demo_options_override_compression(ttf_bytes: bytes) -> None:
    options = DocumentOptions(compression_mode=CompressionMode.TEXT)

    with build_demo("truetype-fonts", font_data=ttf_bytes, options=options) as document:
        assert document.compression_mode == CompressionMode.TEXT


def test_every_demo_is_registered_by_name() -> None:
    assert all(name == demo.name for name, demo in DEMOS.items())
    with pytest.raises(ValueError):
        build_demo("truetype-fonts")


def test_fonts_demo_uses_every_standard_font() -> None:
    with build_demo("fonts") as document:
        names = {font.name for _, font in document.fonts}

    assert names == set(STANDARD_FONT_NAMES)


def test_grid_demo_rules_the_whole_page() -> None:
    with build_demo("grid") as document:
        page = document.pages[0]

        assert page.size == (600, 400)
        assert b"600 0 m\n600 400 l\n" in page.content
        assert b"0 400 m\n600 400 l\n" in page.content
        assert b"(550) Tj" in page.content
