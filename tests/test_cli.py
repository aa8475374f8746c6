import re

import pytest
from PIL import Image

from genopic import cli, rasterizer


def test_cli_writes_svg(raw_genotype_file, tmp_path, capsys):
    out = tmp_path / "out.svg"
    cli.main([str(raw_genotype_file), "-o", str(out), "--width", "100", "--height", "100"])
    text = out.read_text(encoding="utf-8")
    assert text.count('style="fill:rgb(0,0,255);"') == 5
    assert "<script" in text
    assert "Done!" in capsys.readouterr().out


def test_cli_category_colors_and_tooltips(raw_genotype_file, tmp_path):
    out = tmp_path / "out.svg"
    swatch = tmp_path / "swatch.png"
    cli.main([
        str(raw_genotype_file), "-o", str(out),
        "--width", "100", "--height", "100",
        "--color-by", "category", "--tooltips", "--swatch", str(swatch),
    ])
    text = out.read_text(encoding="utf-8")
    assert "fill:rgb(0,0,255);" not in text
    assert "<name>rs4477212 (chr1:82154)</name>" in text
    assert swatch.exists()


def test_cli_swatch_matches_svg_colors_past_twelve_categories(tmp_path, capsys):
    genotypes = [f"G{i}" for i in range(18)]
    raw = tmp_path / "many.txt"
    raw.write_text(
        "".join(f"rs{i}\t1\t{i * 10}\t{g}\n" for i, g in enumerate(genotypes + genotypes[:3])),
        encoding="utf-8",
    )
    out = tmp_path / "out.svg"
    swatch = tmp_path / "swatch.png"
    cli.main([
        str(raw), "-o", str(out), "--width", "100", "--height", "100",
        "--color-by", "category", "--swatch", str(swatch),
    ])

    fills = re.findall(r"fill:rgb\((\d+),(\d+),(\d+)\)", out.read_text(encoding="utf-8"))
    svg_colors = list(dict.fromkeys(tuple(int(c) for c in f) for f in fills))
    assert len(svg_colors) == 18

    chip, gap, columns = 64, 8, 12
    with Image.open(swatch) as img:
        chip_colors = [
            img.getpixel((
                gap + (i % columns) * (chip + gap) + chip // 2,
                gap + (i // columns) * (chip + gap) + chip // 2,
            ))[:3]
            for i in range(18)
        ]
    assert chip_colors == svg_colors
    assert "#{:02x}{:02x}{:02x}".format(*svg_colors[17]) in capsys.readouterr().out


def test_cli_print_mode_is_static(raw_genotype_file, tmp_path):
    out = tmp_path / "out.svg"
    cli.main([str(raw_genotype_file), "-o", str(out), "--print", "--fill", "10,20,30"])
    text = out.read_text(encoding="utf-8")
    assert "<script" not in text
    assert text.count("fill:rgb(10,20,30);") == 5


def test_cli_png(raw_genotype_file, tmp_path, monkeypatch, fake_rsvg, png_bytes):
    fake = fake_rsvg(stdout=png_bytes())
    monkeypatch.setattr(rasterizer.shutil, "which", lambda name: "/usr/bin/rsvg-convert")
    monkeypatch.setattr(rasterizer.subprocess, "run", fake)
    out = tmp_path / "out.png"
    cli.main([str(raw_genotype_file), "-o", str(out), "--png", "--scale", "0.5"])
    assert out.read_bytes() == fake.stdout
    assert fake.cmd[fake.cmd.index("-w") + 1] == "2970"


def test_cli_png_tool_failure_exits(raw_genotype_file, tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(rasterizer.shutil, "which", lambda name: None)
    with pytest.raises(SystemExit) as exc:
        cli.main([str(raw_genotype_file), "-o", str(tmp_path / "out.png"), "--png"])
    assert exc.value.code == 1
    assert "rsvg-convert not found" in capsys.readouterr().err


def test_cli_missing_input(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main([str(tmp_path / "missing.txt")])
    assert exc.value.code == 1
    assert "Input file not found" in capsys.readouterr().err


@pytest.mark.filterwarnings("ignore::UserWarning")
def test_cli_empty_input_exits(tmp_path, capsys):
    path = tmp_path / "empty.txt"
    path.write_text("# only a header\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        cli.main([str(path), "-o", str(tmp_path / "out.svg")])
    assert exc.value.code == 1
    assert not (tmp_path / "out.svg").exists()


def test_cli_rejects_bad_fill(raw_genotype_file):
    with pytest.raises(SystemExit) as exc:
        cli.main([str(raw_genotype_file), "--fill", "red"])
    assert exc.value.code == 2
