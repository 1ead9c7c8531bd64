"""CLI de flexlink (Typer + Rich)."""
