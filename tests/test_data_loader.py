import pytest

from genopic.data_loader import GENOTYPE_COLUMNS, read_23andme


def test_read_23andme_skips_comments(raw_genotype_file, capsys):
    dataset = read_23andme(raw_genotype_file)
    assert dataset.n_items == 5
    assert list(dataset.calls.columns) == GENOTYPE_COLUMNS
    assert dataset.genotypes == ["AA", "AG", "GG", "--", "AG"]
    assert dataset.source == str(raw_genotype_file)
    assert "Loaded 5 genotype calls" in capsys.readouterr().out


def test_dataset_labels_and_categories(raw_genotype_file):
    dataset = read_23andme(raw_genotype_file)
    assert dataset.labels[0] == "rs4477212 (chr1:82154)"
    assert dataset.labels[3] == "i7000001 (chrMT:16519)"
    assert dataset.categories == ["AA", "AG", "GG", "--"]
    assert dataset.genotype_counts()["AG"] == 2


def test_read_23andme_strips_line_endings(tmp_path):
    path = tmp_path / "crlf.txt"
    path.write_bytes(b"rs1\t1\t10\tCT\r\nrs2\t2\t20\tTT\r\n")
    assert read_23andme(path).genotypes == ["CT", "TT"]


def test_read_23andme_only_comments(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("# nothing here\n# at all\n", encoding="utf-8")
    dataset = read_23andme(path)
    assert dataset.n_items == 0
    assert dataset.genotypes == []


def test_read_23andme_too_few_columns(tmp_path):
    path = tmp_path / "short.txt"
    path.write_text("rs1\t1\n", encoding="utf-8")
    with pytest.raises(ValueError, match="columns"):
        read_23andme(path)


def test_read_23andme_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_23andme(tmp_path / "nope.txt")


def test_read_23andme_skips_lines_with_inline_hash(tmp_path):
    path = tmp_path / "inline.txt"
    path.write_text(
        "rs1\t1\t10\tAA\n"
        "rs2\t1\t20\tAG # flagged call\n"
        "rs3\t2\t30\tGG\n",
        encoding="utf-8",
    )
    dataset = read_23andme(path)
    assert dataset.genotypes == ["AA", "GG"]
    assert dataset.calls["rsid"].tolist() == ["rs1", "rs3"]
