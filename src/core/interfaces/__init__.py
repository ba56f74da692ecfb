"""Contratos (Protocol) del Core.

El Core depende de `Invoker`; `core.services.invoker.MethodInvoker` es la
implementación sobre httpx.
"""

from core.interfaces.invoker import Invoker

__all__ = ["Invoker"]
