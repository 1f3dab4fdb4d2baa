"""OJT attendance package.

Organized by feature modules (attendance, progress, notes, team) with a thin
Flask controller layer over service/repository layers.
"""
from __future__ import annotations

from .container import Container, build_container

__all__ = ["Container", "build_container"]
