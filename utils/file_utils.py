#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Утилиты для работы с файлами и выводом результатов.
"""

import os
from typing import List
from config.settings import SUPPORTED_FORMATS, MAX_PRINTED_CORNERS
from models.scalar_field import Point2D


def get_image_path_from_user() -> str:
    """
    Получает путь к изображению от пользователя.

    Returns:
        Путь к файлу изображения
    """
    print(f"Укажите путь к изображению ({get_supported_formats_string()}):")
    return input("> ").strip().strip('"')


def validate_image_path(path: str) -> bool:
    """
    Проверяет, является ли путь валидным файлом изображения.

    Args:
        path: Путь к файлу

    Returns:
        True если файл валиден, False иначе
    """
    if not path or not os.path.isfile(path):
        return False

    _, ext = os.path.splitext(path.lower())
    return ext in SUPPORTED_FORMATS


def get_save_filename(counter: int) -> str:
    """
    Генерирует имя файла для сохранения.

    Args:
        counter: Счетчик сохранений

    Returns:
        Имя файла для сохранения
    """
    return f"corners_{counter}.png"


def get_supported_formats_string() -> str:
    """Возвращает строку с поддерживаемыми форматами."""
    return ", ".join(SUPPORTED_FORMATS)


def format_corners(corners: List[Point2D], limit: int = MAX_PRINTED_CORNERS) -> str:
    """
    Форматирует список углов для вывода в консоль.

    Args:
        corners: Найденные точки
        limit: Максимальное число выводимых строк

    Returns:
        Текст со строками "x y"
    """
    lines = [f"{point.x} {point.y}" for point in corners[:limit]]
    if len(corners) > limit:
        lines.append(f"... и ещё {len(corners) - limit}")
    return "\n".join(lines)
