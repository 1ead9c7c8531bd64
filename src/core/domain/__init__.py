"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos puras (intents, referencias, registros).
- El dominio no conoce HTTP, CLI, ni navegadores: solo conceptos del problema.
"""
