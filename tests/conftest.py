import io
import subprocess
from pathlib import Path

import pytest
from PIL import Image

RAW_23ANDME = (
    "# This data file generated by 23andMe at: Thu Jan 01 00:00:00 2015\n"
    "#\n"
    "# rsid\tchromosome\tposition\tgenotype\n"
    "rs4477212\t1\t82154\tAA\n"
    "rs3094315\t1\t752566\tAG\n"
    "rs3131972\t1\t752721\tGG\n"
    "i7000001\tMT\t16519\t--\n"
    "rs12124819\t1\t776546\tAG\n"
)


@pytest.fixture
def raw_genotype_file(tmp_path):
    path = tmp_path / "genome.txt"
    path.write_text(RAW_23ANDME, encoding="utf-8")
    return path


def _png_bytes(width=4, height=3) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (0, 0, 255)).save(buf, format="PNG")
    return buf.getvalue()


class FakeRsvg:
    """Stands in for subprocess.run, recording the command and the SVG it saw."""

    def __init__(self, stdout: bytes = b"", error: bytes = None):
        self.stdout = stdout
        self.error = error
        self.cmd = None
        self.svg = None

    def __call__(self, cmd, check=False, capture_output=False):
        self.cmd = cmd
        self.svg = Path(cmd[-1]).read_text(encoding="utf-8")
        if self.error is not None:
            raise subprocess.CalledProcessError(1, cmd, output=b"", stderr=self.error)
        return subprocess.CompletedProcess(cmd, 0, stdout=self.stdout, stderr=b"")


@pytest.fixture
def png_bytes():
    return _png_bytes


@pytest.fixture
def fake_rsvg():
    return FakeRsvg
