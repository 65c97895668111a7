"""Базовые примитивы: единицы, типы-идентификаторы, проверки."""
