from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import List, Sequence, Union

import numpy as np

logger = logging.getLogger(__name__)


def write_histogram_csv(path: Path, bins: Union[Sequence[float], np.ndarray]) -> None:
    lines = ["bin,value"]
    for index, value in enumerate(np.asarray(bins, dtype=np.float64)):
        lines.append(f"{index},{float(value)!r}")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    logger.info("Wrote %d bins to %s", len(lines) - 1, path)


def read_histogram_csv(path: Path) -> np.ndarray:
    values: List[float] = []
    with path.open("r", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        for row in reader:
            index = int(row["bin"])
            if index != len(values):
                raise ValueError(f"{path}: expected bin {len(values)}, found {index}")
            values.append(float(row["value"]))
    return np.array(values, dtype=np.float64)
