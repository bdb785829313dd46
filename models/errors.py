#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Исключения детектора углов.
"""


class InvalidInputError(ValueError):
    """Некорректное изображение или параметры детектора."""
