#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Контроллер для OpenCV интерфейса.
Загружает изображение, запускает детектор и отображает найденные углы.
"""

import cv2
import numpy as np
from typing import List, Optional
from models.corner_selector import CornerSelector
from models.scalar_field import Point2D
from config.settings import *


class OpenCVController:
    """
    Контроллер для детектирования и отображения углов через OpenCV.
    """

    def __init__(self, selector: Optional[CornerSelector] = None):
        """
        Инициализация контроллера.

        Args:
            selector: Детектор углов (по умолчанию с параметрами из settings)
        """
        self.selector = selector if selector is not None else CornerSelector()
        self.window_radius = DEFAULT_WINDOW_RADIUS
        self.original_image = None
        self.annotated_image = None
        self.corners: List[Point2D] = []
        self.save_counter = 1
        self.running = True

    def load_image(self, path: str) -> bool:
        """
        Загружает изображение из файла.

        Args:
            path: Путь к файлу изображения

        Returns:
            True если изображение успешно загружено, False иначе
        """
        img = cv2.imread(path, cv2.IMREAD_UNCHANGED)
        if img is None:
            return False

        if img.ndim == 2:
            # Серое изображение -> в 3 канала
            img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
        elif img.shape[2] == 4:
            # Отбрасываем альфа-канал
            img = img[:, :, :3]

        self.load_array(img)
        return True

    def load_array(self, image: np.ndarray) -> None:
        """Использует уже загруженное изображение."""
        self.original_image = image
        self.annotated_image = None
        self.corners = []

    def detect(self) -> List[Point2D]:
        """
        Запускает детектор на текущем изображении.

        Returns:
            Найденные углы
        """
        if self.original_image is None:
            return []
        self.corners = self.selector.detect_corners(self.original_image, self.window_radius)
        self.annotated_image = self.draw_corners(self.original_image, self.corners)
        return self.corners

    def draw_corners(self, image: np.ndarray, corners: List[Point2D]) -> np.ndarray:
        """
        Рисует окружности в местах углов.

        Args:
            image: Исходное изображение
            corners: Точки (x, y)

        Returns:
            Копия изображения BGR с отмеченными углами
        """
        if image.ndim == 2:
            result = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        else:
            result = image.copy()

        for point in corners:
            cv2.circle(result, (int(point.x), int(point.y)), CORNER_MARKER_RADIUS,
                       COLOR_CORNER, CORNER_MARKER_THICKNESS, cv2.LINE_AA)

        cv2.putText(result, f"corners: {len(corners)}", (5, 15),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, COLOR_TEXT, 1, cv2.LINE_AA)
        return result

    def save(self, path: Optional[str] = None) -> Optional[str]:
        """
        Сохраняет изображение с отмеченными углами.

        Args:
            path: Путь для сохранения (по умолчанию генерируется)

        Returns:
            Имя сохранённого файла или None
        """
        if self.annotated_image is None:
            return None
        if path is None:
            from utils.file_utils import get_save_filename
            path = get_save_filename(self.save_counter)
            self.save_counter += 1
        if not cv2.imwrite(path, self.annotated_image):
            print(f"Ошибка: Не удалось сохранить изображение: {path}")
            return None
        print(f"[OK] Сохранено: {path}")
        return path

    def handle_keyboard_input(self, key: int) -> None:
        """
        Обрабатывает ввод с клавиатуры.

        Args:
            key: Код нажатой клавиши
        """
        if key in (27, ord('q'), ord('Q')):
            self.running = False
        elif key in (ord('s'), ord('S')):
            self.save()

    def show(self) -> None:
        """Показывает результат в окне до нажатия Q/ESC."""
        if self.annotated_image is None:
            return

        window_name = WINDOW_NAMES["CORNERS"]
        cv2.namedWindow(window_name, cv2.WINDOW_AUTOSIZE)
        while self.running:
            cv2.imshow(window_name, self.annotated_image)
            key = cv2.waitKey(GUI_SETTINGS["update_interval"]) & 0xFF
            self.handle_keyboard_input(key)

        cv2.destroyAllWindows()
