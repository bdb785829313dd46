#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Построение поля отклика Харриса.
Градиенты, моменты второго порядка и оконное суммирование.
"""

import math
from typing import Tuple
import cv2
import numpy as np
from config.settings import *
from models.errors import InvalidInputError
from models.scalar_field import ScalarField


# Ядро конечной разности [-1, 1] и его транспонированная версия
GRADIENT_KERNEL_X = np.array([[-1.0, 1.0]], dtype=np.float64)
GRADIENT_KERNEL_Y = GRADIENT_KERNEL_X.T


def validate_image(image) -> np.ndarray:
    """
    Проверяет входное изображение.

    Args:
        image: Растровое изображение (H, W) или (H, W, C)

    Returns:
        Изображение как numpy массив

    Raises:
        InvalidInputError: если изображение пустое или формат не поддерживается
    """
    if image is None:
        raise InvalidInputError("Изображение не задано")
    if not isinstance(image, np.ndarray):
        raise InvalidInputError(f"Ожидался numpy.ndarray, получено {type(image).__name__}")
    if image.ndim not in (2, 3):
        raise InvalidInputError(f"Ожидалось 2D или 3D изображение, получено ndim={image.ndim}")
    if image.size == 0 or 0 in image.shape:
        raise InvalidInputError(f"Пустое изображение: shape={image.shape}")
    if image.ndim == 3 and image.shape[2] not in SUPPORTED_CHANNELS:
        raise InvalidInputError(f"Неподдерживаемое число каналов: {image.shape[2]}")
    if not (np.issubdtype(image.dtype, np.number) or image.dtype == np.bool_):
        raise InvalidInputError(f"Неподдерживаемый тип пикселей: {image.dtype}")
    return image


def validate_positive_int(value, name: str) -> int:
    """Проверяет, что value - целое число больше нуля."""
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise InvalidInputError(f"{name} должен быть целым числом, получено {value!r}")
    if value <= 0:
        raise InvalidInputError(f"{name} должен быть > 0, получено {value}")
    return int(value)


def validate_formula(formula: str, k: float) -> Tuple[str, float]:
    """Проверяет имя формулы отклика и коэффициент k."""
    if formula not in FORMULAS:
        raise InvalidInputError(f"Неизвестная формула отклика: {formula!r}, допустимы {FORMULAS}")
    k = float(k)
    if not math.isfinite(k):
        raise InvalidInputError(f"Коэффициент k должен быть конечным, получено {k}")
    return formula, k


class GradientFieldBuilder:
    """
    Вычисляет поле отклика Харриса R для изображения.

    Все промежуточные поля создаются заново при каждом вызове.
    """

    def __init__(self, formula: str = CORNERNESS_FORMULA, k: float = HARRIS_K):
        """
        Args:
            formula: "reference" (det - int(k)*trace) или "harris" (det - k*trace^2)
            k: Коэффициент Харриса
        """
        self.formula, self.k = validate_formula(formula, k)

    def compute_cornerness(self, image: np.ndarray, window_radius: int) -> ScalarField:
        """
        Вычисляет отклик Харриса для каждого пикселя.

        Args:
            image: Изображение BGR/BGRA или серое
            window_radius: Сторона окна суммирования моментов

        Returns:
            Поле отклика того же размера, что и изображение
        """
        image = validate_image(image)
        window_radius = validate_positive_int(window_radius, "window_radius")

        gray = self.to_gray(image)
        grad_x, grad_y = self.compute_gradients(gray)

        # Моменты второго порядка, просуммированные в окне
        sum_xx = self.box_sum(grad_x * grad_x, window_radius)
        sum_yy = self.box_sum(grad_y * grad_y, window_radius)
        sum_xy = self.box_sum(grad_x * grad_y, window_radius)

        return ScalarField(self.response(sum_xx, sum_yy, sum_xy))

    def to_gray(self, image: np.ndarray) -> np.ndarray:
        """
        Конвертирует изображение в серое по весам яркости (cv2.cvtColor).

        Args:
            image: Изображение (H, W), (H, W, 1), (H, W, 3) BGR или (H, W, 4) BGRA

        Returns:
            Серое изображение float64
        """
        if image.ndim == 3 and image.shape[2] == 1:
            image = image[..., 0]
        if image.ndim == 2:
            return image.astype(np.float64)

        # cvtColor работает только с uint8, uint16 и float32
        if image.dtype not in (np.uint8, np.uint16, np.float32):
            image = image.astype(np.float32)
        image = np.ascontiguousarray(image)

        if image.shape[2] == 4:
            gray = cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
        else:
            gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        return gray.astype(np.float64)

    def compute_gradients(self, gray: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Градиенты конечной разностью без предварительного сглаживания.

        Gx[y, x] = I[y, x] - I[y, x-1], Gy[y, x] = I[y, x] - I[y-1, x].
        """
        grad_x = self._correlate(gray, GRADIENT_KERNEL_X, anchor=(0, 1))
        grad_y = self._correlate(gray, GRADIENT_KERNEL_Y, anchor=(1, 0))
        return grad_x, grad_y

    def box_sum(self, field: np.ndarray, size: int) -> np.ndarray:
        """
        Сумма по окну size x size (ядро из единиц, без нормировки).

        Якорь окна в size//2, границы дополняются отражением.
        """
        before = size // 2
        after = size - 1 - before
        padded = np.pad(field, ((before, after), (before, after)), mode='reflect')

        # Интегральное изображение с нулевой первой строкой и столбцом
        integral = np.zeros((padded.shape[0] + 1, padded.shape[1] + 1), dtype=np.float64)
        integral[1:, 1:] = padded.cumsum(axis=0).cumsum(axis=1)

        h, w = field.shape
        return (integral[size:size + h, size:size + w]
                - integral[:h, size:size + w]
                - integral[size:size + h, :w]
                + integral[:h, :w])

    def response(self, sum_xx: np.ndarray, sum_yy: np.ndarray, sum_xy: np.ndarray) -> np.ndarray:
        """
        Отклик по матрице M = [[Sxx, Sxy], [Sxy, Syy]].

        В режиме "reference" k усекается до целого, как в исходной версии
        детектора, и при k = 0.05 отклик сводится к det(M).
        """
        det = sum_xx * sum_yy - sum_xy * sum_xy
        trace = sum_xx + sum_yy
        if self.formula == FORMULA_REFERENCE:
            return det - int(self.k) * trace
        return det - self.k * (trace * trace)

    def _correlate(self, ch: np.ndarray, kernel: np.ndarray, anchor: Tuple[int, int]) -> np.ndarray:
        """Корреляция канала с ядром через окна as_strided и tensordot."""
        kh, kw = kernel.shape
        anchor_y, anchor_x = anchor
        padded = np.pad(ch, ((anchor_y, kh - 1 - anchor_y), (anchor_x, kw - 1 - anchor_x)), mode='reflect')
        h, w = ch.shape

        # Представление всех окон без копирования
        shape = (h, w, kh, kw)
        strides = (padded.strides[0], padded.strides[1], padded.strides[0], padded.strides[1])
        windows = np.lib.stride_tricks.as_strided(padded, shape=shape, strides=strides, writeable=False)

        return np.tensordot(windows, kernel, axes=([2, 3], [0, 1]))


def compute_cornerness(image: np.ndarray, window_radius: int = DEFAULT_WINDOW_RADIUS,
                       formula: str = CORNERNESS_FORMULA, k: float = HARRIS_K) -> ScalarField:
    """Поле отклика Харриса для изображения (см. GradientFieldBuilder)."""
    return GradientFieldBuilder(formula=formula, k=k).compute_cornerness(image, window_radius)
