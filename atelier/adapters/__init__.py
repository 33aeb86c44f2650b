"""Adapter package for external I/O implementations.

Purpose:
    Collect concrete implementations for domain ports (Gemini REST, local
    filesystem, Pillow rendering, and offline doubles) used by use cases.

Dependencies:
    Individual submodules depend on ``requests``, ``Pillow``, filesystem APIs,
    and domain protocol definitions.

Call context:
    Imported by the web runtime (for wiring) and by tests (for mocks and
    transport-level behavior verification).
"""
