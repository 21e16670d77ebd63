"""
Top-level package for the indicator browser.

This package exposes the pivot engine and its collaborators (config, views, UI).
Most code should import from submodules such as:
    indicator_browser.core
    indicator_browser.views
    indicator_browser.ui
"""

__all__: list[str] = []
