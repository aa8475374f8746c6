"""
Data loading utilities for raw genotype files.

Reads 23andMe style raw data: tab-delimited lines of
rsid, chromosome, position and genotype, with '#' comment lines.
"""

import io
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

import pandas as pd


GENOTYPE_COLUMNS = ["rsid", "chromosome", "position", "genotype"]


@dataclass
class GenotypeDataset:
    """Ordered genotype calls read from one raw data file."""
    calls: pd.DataFrame
    source: str = ""

    @property
    def n_items(self) -> int:
        return len(self.calls)

    @property
    def genotypes(self) -> List[str]:
        return self.calls["genotype"].tolist()

    @property
    def labels(self) -> List[str]:
        """Tooltip title for each call."""
        return [
            f"{rsid} (chr{chrom}:{pos})"
            for rsid, chrom, pos in zip(
                self.calls["rsid"], self.calls["chromosome"], self.calls["position"]
            )
        ]

    @property
    def categories(self) -> List[str]:
        """Distinct genotypes in order of first appearance."""
        return list(pd.unique(self.calls["genotype"]))

    def genotype_counts(self) -> pd.Series:
        return self.calls["genotype"].value_counts()


def read_23andme(path: Union[str, Path]) -> GenotypeDataset:
    """
    Read a 23andMe raw data file.

    Parameters
    ----------
    path : str or Path
        Path to the tab-delimited raw data file

    Returns
    -------
    GenotypeDataset
        One row per genotype call, in file order
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Genotype file not found: {path}")

    print(f"Loading {path}...")
    # Any line holding a '#' is a comment, wherever the mark sits
    with open(path, encoding="utf-8") as f:
        lines = [line for line in f if "#" not in line]
    if not any(line.strip() for line in lines):
        print("  Warning: no genotype calls found")
        return GenotypeDataset(calls=pd.DataFrame(columns=GENOTYPE_COLUMNS), source=str(path))

    calls = pd.read_csv(
        io.StringIO("".join(lines)),
        sep="\t",
        header=None,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
    )
    if calls.shape[1] < len(GENOTYPE_COLUMNS):
        raise ValueError(
            f"Expected {len(GENOTYPE_COLUMNS)} tab-separated columns in {path}, "
            f"found {calls.shape[1]}"
        )
    calls = calls.iloc[:, : len(GENOTYPE_COLUMNS)]
    calls.columns = GENOTYPE_COLUMNS
    calls["genotype"] = calls["genotype"].str.strip()
    calls = calls.reset_index(drop=True)

    print(f"  Loaded {len(calls):,} genotype calls")
    return GenotypeDataset(calls=calls, source=str(path))
