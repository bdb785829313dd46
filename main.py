#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Главный файл приложения для поиска углов Харриса.

Загружает изображение, находит углы с подавлением немаксимумов и печатает
их координаты. Результат можно показать в окне OpenCV или сохранить.

Использование:
    python main.py image.png                      # Печать координат углов
    python main.py image.png --show               # Показ углов в окне
    python main.py image.png --save out.png       # Сохранение разметки
    python main.py image.png --formula harris     # Классическая формула Харриса
"""

import sys
import argparse
from controllers.opencv_controller import OpenCVController
from models.corner_selector import CornerSelector
from utils.file_utils import format_corners, get_image_path_from_user, validate_image_path
from config.settings import *


def parse_arguments(argv=None):
    """
    Парсит аргументы командной строки.

    Args:
        argv: Список аргументов (по умолчанию sys.argv)

    Returns:
        Объект с аргументами
    """
    parser = argparse.ArgumentParser(
        description="Детектор углов Харриса с подавлением немаксимумов",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры использования:
  python main.py image.png
  python main.py image.png --radius 5 --win-size 20 --threshold 0.35
  python main.py image.png --formula harris --k 0.05 --show
        """
    )

    parser.add_argument(
        "image_path",
        nargs="?",
        help="Путь к изображению"
    )
    parser.add_argument(
        "--radius",
        type=int,
        default=DEFAULT_WINDOW_RADIUS,
        help=f"Сторона окна суммирования моментов (по умолчанию {DEFAULT_WINDOW_RADIUS})"
    )
    parser.add_argument(
        "--win-size",
        type=int,
        default=NMS_WINDOW_SIZE,
        help=f"Сторона окна подавления немаксимумов (по умолчанию {NMS_WINDOW_SIZE})"
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=THRESHOLD_RATIO,
        help=f"Порог как доля от max R (по умолчанию {THRESHOLD_RATIO})"
    )
    parser.add_argument(
        "--formula",
        choices=FORMULAS,
        default=CORNERNESS_FORMULA,
        help="Формула отклика: reference = det - int(k)*trace, harris = det - k*trace^2"
    )
    parser.add_argument(
        "--k",
        type=float,
        default=HARRIS_K,
        help=f"Коэффициент Харриса (по умолчанию {HARRIS_K})"
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Показать результат в окне OpenCV"
    )
    parser.add_argument(
        "--save",
        metavar="PATH",
        help="Сохранить изображение с отмеченными углами"
    )

    return parser.parse_args(argv)


def build_controller(args) -> OpenCVController:
    """Создает контроллер с параметрами из командной строки."""
    selector = CornerSelector()
    selector.set_parameter("nms_window", args.win_size)
    selector.set_parameter("threshold_ratio", args.threshold)
    selector.set_parameter("formula", args.formula)
    selector.set_parameter("k", args.k)

    controller = OpenCVController(selector)
    controller.window_radius = args.radius
    return controller


def run(args) -> int:
    """
    Запускает поиск углов.

    Args:
        args: Аргументы командной строки

    Returns:
        Код возврата
    """
    image_path = args.image_path or get_image_path_from_user()

    if not validate_image_path(image_path):
        print(f"Ошибка: Неверный формат файла: {image_path}")
        return 1

    controller = build_controller(args)
    if not controller.load_image(image_path):
        print(f"Ошибка: Не удалось загрузить изображение: {image_path}")
        return 1

    print(f"Загружено изображение: {image_path}")
    corners = controller.detect()
    print(f"Найдено углов: {len(corners)}")
    if corners:
        print(format_corners(corners))

    if args.save:
        controller.save(args.save)
    if args.show:
        print("Управление:")
        print("  S - сохранить изображение")
        print("  Q/ESC - выход")
        controller.show()
    return 0


def main(argv=None):
    """Главная функция приложения."""
    try:
        args = parse_arguments(argv)
        sys.exit(run(args))
    except KeyboardInterrupt:
        print("\nПриложение прервано пользователем")
    except Exception as e:
        print(f"Ошибка: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
