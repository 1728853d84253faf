from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np


class Gap(Enum):
    """Marks a data point whose value is absent."""

    GAP = "gap"

    def __repr__(self) -> str:
        return "GAP"


GAP = Gap.GAP

Category = float | str


@dataclass(frozen=True)
class DataPoint:
    x: Category
    y: float | Gap = GAP

    @property
    def is_gap(self) -> bool:
        return self.y is GAP


@dataclass(frozen=True)
class ChartSeries:
    x: np.ndarray
    y: np.ndarray
    mask: np.ndarray
    categories: tuple[str, ...] | None = None
    source_name: str | None = None

    def __len__(self) -> int:
        return int(self.x.size)

    @property
    def is_categorical(self) -> bool:
        return self.categories is not None

    def y_at(self, index: int) -> float | Gap:
        if not bool(self.mask[index]):
            return GAP
        return float(self.y[index])

    def points(self) -> list[DataPoint]:
        out: list[DataPoint] = []
        for i in range(len(self)):
            x: Category = self.categories[i] if self.categories is not None else float(self.x[i])
            out.append(DataPoint(x=x, y=self.y_at(i)))
        return out

    def present_y(self) -> np.ndarray:
        return self.y[self.mask]
