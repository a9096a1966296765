"""Backends for typewriter output generation (Flow, TypeScript)."""

from .declaration_generator import Language, generate_declarations, save_declarations

__all__ = ["Language", "generate_declarations", "save_declarations"]
