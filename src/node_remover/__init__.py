from __future__ import annotations

from .remover import Remover
from .removerconfig import RemoverConfig

__version__ = "0.1.0"

__all__ = [
    "Remover",
    "RemoverConfig",
]
