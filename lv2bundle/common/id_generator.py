"""
Label Generator - Thread-safe blank node label allocation.

Blank node identity is scoped to the document that introduced it. When
several documents are merged, or when a bundle is turned back into
statements, every anonymous node needs a fresh label that cannot collide
with labels handed out earlier. This module provides the counters used
for that.

Usage:
    from lv2bundle.common.id_generator import LabelGenerator

    gen = LabelGenerator()
    gen.next_namespace()          # "d0"
    gen.next_label("d0")          # "d0b0"
    gen.next_label("d0")          # "d0b1"
"""

import threading
from typing import Dict


class LabelGenerator:
    """
    Thread-safe generator of blank node labels.

    Each call to ``next_namespace`` reserves a new namespace prefix;
    ``next_label`` hands out sequential labels inside a namespace.

    Example:
        >>> gen = LabelGenerator(namespace_prefix="d")
        >>> gen.next_namespace()
        'd0'
        >>> gen.next_namespace()
        'd1'
        >>> gen.next_label("d1")
        'd1b0'
    """

    def __init__(self, namespace_prefix: str = "d", label_prefix: str = "b"):
        """
        Initialize the generator.

        Args:
            namespace_prefix: Prefix of the namespaces handed out.
            label_prefix: Separator placed between namespace and counter.
        """
        self._namespace_prefix = namespace_prefix
        self._label_prefix = label_prefix
        self._namespaces = 0
        self._counters: Dict[str, int] = {}
        self._lock = threading.Lock()

    def next_namespace(self) -> str:
        """
        Reserve the next namespace.

        Returns:
            Namespace identifier, unique for this generator.

        Thread-safe.
        """
        with self._lock:
            namespace = f"{self._namespace_prefix}{self._namespaces}"
            self._namespaces += 1
            self._counters[namespace] = 0
            return namespace

    def next_label(self, namespace: str) -> str:
        """
        Generate the next label inside a namespace.

        Args:
            namespace: Namespace identifier (need not be reserved first).

        Returns:
            Blank node label such as ``d0b3``.

        Thread-safe.
        """
        with self._lock:
            current = self._counters.get(namespace, 0)
            self._counters[namespace] = current + 1
            return f"{namespace}{self._label_prefix}{current}"

