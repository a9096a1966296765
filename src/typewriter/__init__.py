"""
typewriter: Go schema to frontend type declarations.

Reads Go struct and type definitions and emits equivalent Flow or
TypeScript type declarations for a frontend type-checker.

ARCHITECTURAL GUARANTEE:
------------------------
The schema model (typewriter.model, typewriter.types) contains ZERO
knowledge of:
    - Go syntax
    - Flow or TypeScript syntax
    - Output file layout

Readers build the model. Backends consume the model unchanged.
"""

__version__ = "0.1.0"
