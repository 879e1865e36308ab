"""
Toolgate Applications Package.

Contains:
- core_api: FastAPI application (tool catalog and execution API)
"""

__version__ = "0.1.0"
