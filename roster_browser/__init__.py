"""
Top-level package for the student roster browser.

This package exposes the table engine (core), backend access (services)
and the Dash adapter (ui). Most code should import from submodules such as:
    roster_browser.core
    roster_browser.services
    roster_browser.ui
"""

__all__: list[str] = []
