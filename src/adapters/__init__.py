"""Adaptadores de I/O: HTTP (secretos, metadata de Flex), navegador y exportación."""
