#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Типы данных детектора: точка и скалярное поле.

Соглашение об индексации везде одно: поле читается как at(row=y, col=x),
точка хранится как (x, y).
"""

from typing import NamedTuple, Tuple
import numpy as np


class Point2D(NamedTuple):
    """Целочисленная координата пикселя."""
    x: int
    y: int


class ScalarField:
    """
    Плотное 2D поле вещественных значений размером с изображение.
    """

    def __init__(self, values: np.ndarray):
        """
        Args:
            values: 2D массив значений (строка = y, столбец = x)
        """
        values = np.asarray(values, dtype=np.float64)
        if values.ndim != 2:
            raise ValueError(f"ScalarField ожидает 2D массив, получено ndim={values.ndim}")
        self.values = values

    @property
    def height(self) -> int:
        return self.values.shape[0]

    @property
    def width(self) -> int:
        return self.values.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.values.shape

    def at(self, row: int, col: int) -> float:
        """Значение поля в строке row (y) и столбце col (x)."""
        return float(self.values[row, col])

    def at_point(self, point: Point2D) -> float:
        """Значение поля в точке (x, y)."""
        return self.at(row=point.y, col=point.x)

    def max(self) -> float:
        """Глобальный максимум поля (0.0 для пустого поля)."""
        if self.values.size == 0:
            return 0.0
        return float(self.values.max())

    def window(self, center: Point2D, size: int) -> Tuple[np.ndarray, Point2D]:
        """
        Возвращает окно [c - size//2, c + size//2) вокруг center,
        обрезанное по границам поля.

        Args:
            center: Центр окна
            size: Сторона окна

        Returns:
            Кортеж (значения окна, координата левого верхнего угла окна)
        """
        half = size // 2
        x_start = max(0, center.x - half)
        y_start = max(0, center.y - half)
        x_end = min(self.width, center.x + half)
        y_end = min(self.height, center.y + half)
        return self.values[y_start:y_end, x_start:x_end], Point2D(x_start, y_start)

    def __repr__(self) -> str:
        return f"ScalarField(height={self.height}, width={self.width})"
