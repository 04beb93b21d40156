import random
import threading
import typing

from ..exceptions import PreconditionError


class Cluster:
    """
    Gateway hosts (``host:port``) of one deployment.

    Hosts may only be added or removed until the first request walks the
    list; after that the list is read concurrently and stays fixed.
    """

    def __init__(self, nodes: typing.Iterable[str] = ()):
        self._lock = threading.Lock()
        self._nodes: typing.Tuple[str, ...] = ()
        self._sealed = False
        self.last_host: typing.Optional[str] = None
        for node in nodes:
            self.add(node)

    @property
    def nodes(self) -> typing.Tuple[str, ...]:
        return self._nodes

    def add(self, node: str) -> "Cluster":
        with self._lock:
            if self._sealed:
                raise PreconditionError("cannot add hosts to a cluster that is in use")
            self._nodes = self._nodes + (node,)
        return self

    def add_all(self, nodes: typing.Iterable[str]) -> "Cluster":
        for node in nodes:
            self.add(node)
        return self

    def remove(self, node: str) -> "Cluster":
        with self._lock:
            if self._sealed:
                raise PreconditionError("cannot remove hosts from a cluster that is in use")
            self._nodes = tuple(n for n in self._nodes if n != node)
        return self

    def is_empty(self) -> bool:
        return not self._nodes

    def __len__(self):
        return len(self._nodes)

    def iter_failover_order(self) -> typing.Iterator[str]:
        """Every host once, from a uniformly random start, wrapping around."""
        self._sealed = True
        nodes = self._nodes
        if not nodes:
            return
        start = random.randrange(len(nodes))
        for i in range(len(nodes)):
            yield nodes[(start + i) % len(nodes)]

    def __str__(self):
        return f"Cluster{{nodes={list(self._nodes)}, last_host={self.last_host}}}"

    __repr__ = __str__
