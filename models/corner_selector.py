#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Выбор углов по полю отклика Харриса.
Относительный порог и подавление немаксимумов (NMS) в окне.
"""

import math
from typing import Any, Iterable, List
import numpy as np
from config.settings import *
from models.errors import InvalidInputError
from models.gradient_field import GradientFieldBuilder, validate_positive_int
from models.scalar_field import Point2D, ScalarField


def threshold_candidates(field: ScalarField, ratio: float = THRESHOLD_RATIO) -> List[Point2D]:
    """
    Отбирает кандидатов: все пиксели с R > ratio * max(R).

    Args:
        field: Поле отклика
        ratio: Доля от глобального максимума

    Returns:
        Кандидаты в порядке построчного обхода (сверху вниз, слева направо)
    """
    ratio = _validate_ratio(ratio)
    max_r = field.max()
    # Нет положительного отклика - нет углов
    if max_r <= 0.0:
        return []

    ys, xs = np.nonzero(field.values > ratio * max_r)
    return [Point2D(int(x), int(y)) for y, x in zip(ys, xs)]


def select_strongest(field: ScalarField, candidates: Iterable[Point2D],
                     win_size: int = NMS_WINDOW_SIZE) -> List[Point2D]:
    """
    Подавление немаксимумов: каждый кандидат заменяется самой сильной точкой
    в окне [-win_size//2, win_size//2) вокруг него.

    Окно обрезается по границам поля. Кандидат остаётся лучшим, пока не найден
    строго больший отклик; при равенстве побеждает первая точка построчного
    обхода окна. Это самое затратное место: O(кандидаты x площадь окна).

    Args:
        field: Поле отклика
        candidates: Кандидаты в порядке обхода
        win_size: Сторона окна NMS

    Returns:
        Уникальные точки в порядке их первого подтверждения
    """
    win_size = validate_positive_int(win_size, "win_size")
    corners: List[Point2D] = []
    seen = set()

    for candidate in candidates:
        best = Point2D(int(candidate.x), int(candidate.y))
        current_value = field.at_point(best)

        window, origin = field.window(best, win_size)
        if window.size > 0:
            flat_index = int(np.argmax(window))
            if window.flat[flat_index] > current_value:
                row, col = np.unravel_index(flat_index, window.shape)
                best = Point2D(origin.x + int(col), origin.y + int(row))

        if best not in seen:
            seen.add(best)
            corners.append(best)

    return corners


class CornerSelector:
    """
    Детектор углов Харриса с подавлением немаксимумов.
    """

    def __init__(self):
        """Инициализация детектора с параметрами по умолчанию."""
        self.params = {
            "nms_window": NMS_WINDOW_SIZE,       # сторона окна NMS
            "threshold_ratio": THRESHOLD_RATIO,  # доля от max R
            "formula": CORNERNESS_FORMULA,       # reference / harris
            "k": HARRIS_K,
        }

    def set_parameter(self, param_name: str, value: Any) -> None:
        """
        Устанавливает параметр детектора.

        Args:
            param_name: Имя параметра
            value: Значение параметра
        """
        if param_name in self.params:
            self.params[param_name] = value

    def get_parameter(self, param_name: str) -> Any:
        """
        Получает значение параметра.

        Args:
            param_name: Имя параметра

        Returns:
            Значение параметра или None
        """
        return self.params.get(param_name, None)

    def compute_cornerness(self, image: np.ndarray, window_radius: int) -> ScalarField:
        """Поле отклика с текущими параметрами формулы."""
        builder = GradientFieldBuilder(formula=self.params["formula"], k=self.params["k"])
        return builder.compute_cornerness(image, window_radius)

    def detect_corners(self, image: np.ndarray, window_radius: int = DEFAULT_WINDOW_RADIUS) -> List[Point2D]:
        """
        Находит углы на изображении.

        Args:
            image: Изображение BGR/BGRA или серое
            window_radius: Сторона окна суммирования моментов

        Returns:
            Список уникальных точек (x, y)
        """
        win_size = validate_positive_int(self.params["nms_window"], "win_size")
        ratio = _validate_ratio(self.params["threshold_ratio"])

        field = self.compute_cornerness(image, window_radius)
        candidates = threshold_candidates(field, ratio)
        return select_strongest(field, candidates, win_size)


def detect_corners(image: np.ndarray, window_radius: int = DEFAULT_WINDOW_RADIUS,
                   win_size: int = NMS_WINDOW_SIZE, threshold_ratio: float = THRESHOLD_RATIO,
                   formula: str = CORNERNESS_FORMULA, k: float = HARRIS_K) -> List[Point2D]:
    """
    Детектирует углы Харриса на изображении.

    Args:
        image: Изображение BGR/BGRA или серое
        window_radius: Сторона окна суммирования моментов
        win_size: Сторона окна NMS
        threshold_ratio: Относительный порог от max R
        formula: Формула отклика ("reference" или "harris")
        k: Коэффициент Харриса

    Returns:
        Список уникальных точек (x, y)
    """
    selector = CornerSelector()
    selector.set_parameter("nms_window", win_size)
    selector.set_parameter("threshold_ratio", threshold_ratio)
    selector.set_parameter("formula", formula)
    selector.set_parameter("k", k)
    return selector.detect_corners(image, window_radius)


def _validate_ratio(ratio) -> float:
    try:
        ratio = float(ratio)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Порог должен быть числом, получено {ratio!r}")
    if not math.isfinite(ratio) or ratio < 0.0:
        raise InvalidInputError(f"Порог должен быть конечным и >= 0, получено {ratio}")
    return ratio
