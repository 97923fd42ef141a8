from __future__ import annotations

from contextlib import contextmanager
from typing import Any, ContextManager, Iterator, Protocol

from .connection import DatabaseConnection
from .mysql_base import db_cursor


class TransactionManager(Protocol):
    def begin(self) -> ContextManager[Any]:
        """Open a unit of work; repository writes given its handle commit or roll back together."""

        raise NotImplementedError


class MySQLTransactionManager(TransactionManager):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def begin(self) -> Iterator[Any]:
        with db_cursor(self._conn_factory) as (_, cur):
            yield cur
