"""ViewModel package for UI state and command surfaces.

Call context:
    ``atelier/web_ui/runtime.py`` builds concrete viewmodels from this package
    and ``atelier/web_ui/main.py`` binds page events to their commands.

Dependencies:
    Modules in this package depend on domain types only. I/O adapters and
    use-case orchestration remain outside.

Responsibilities:
    - Expose mutable UI state and command intent callbacks.
    - Keep pointer-driven transforms (viewer pan/zoom, canvas layout) local.
    - Keep MVVM boundaries explicit by avoiding transport or persistence logic.
"""
