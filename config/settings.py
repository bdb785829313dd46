#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Конфигурационные настройки детектора углов.
"""

# Параметры детектора Харриса
DEFAULT_WINDOW_RADIUS = 5  # сторона окна суммирования моментов
NMS_WINDOW_SIZE = 20  # окно подавления немаксимумов 20x20
THRESHOLD_RATIO = 0.35  # доля от max R
HARRIS_K = 0.05

# Формулы отклика
# "reference" - det(M) - int(k) * trace(M), k усекается до 0
# "harris"    - det(M) - k * trace(M)^2
FORMULA_REFERENCE = "reference"
FORMULA_HARRIS = "harris"
FORMULAS = (FORMULA_REFERENCE, FORMULA_HARRIS)
CORNERNESS_FORMULA = FORMULA_REFERENCE

# Допустимое число каналов входного изображения
SUPPORTED_CHANNELS = (1, 3, 4)

# Отрисовка углов
COLOR_CORNER = (0, 0, 255)
COLOR_TEXT = (220, 220, 220)
CORNER_MARKER_RADIUS = 4
CORNER_MARKER_THICKNESS = 1

# Названия окон
WINDOW_NAMES = {
    "CORNERS": "Harris corners",
}

# Настройки отображения
GUI_SETTINGS = {
    "update_interval": 15,  # мс
}

# Сколько координат печатать в консоль
MAX_PRINTED_CORNERS = 200

# Поддерживаемые форматы изображений
SUPPORTED_FORMATS = ['.bmp', '.png', '.tiff', '.tif', '.jpg', '.jpeg']
