"""Servicios del Core: clasificación, URLs, resolución y navegación."""
