"""Núcleo de flexlink: dominio, contratos y servicios sin I/O de UI."""
