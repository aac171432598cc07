"""
Recipe Box - personal recipe manager.

Packages:
- recipe_import: Pull recipes out of web pages (JSON-LD / microdata)
- tools: Quantity scaling for display
- web: FastAPI application
"""

__version__ = "1.0.0"
