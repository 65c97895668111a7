"""Физика насосной установки: формулы рукавов, DRV, характеристика насоса,
тепловая модель, пролив гидранта.

Импортируй модули напрямую (pumpsim.physics.formulas и т.д.).
"""
