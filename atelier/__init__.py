"""Atelier Studio: client-side artifact versioning and interaction engine.

Layers follow MVVM + Hexagonal boundaries:
    - ``atelier.domain``: value objects, history store, ports and errors.
    - ``atelier.adapters``: concrete port implementations (HTTP, filesystem, Pillow).
    - ``atelier.usecases``: orchestration of domain objects through ports.
    - ``atelier.viewmodels``: UI state machines without I/O.
    - ``atelier.web_ui``: NiceGUI runtime and composition root.
"""

__version__ = "0.1.0"
