"""Exceptions raised by the reorder engine and its stores."""


class TabGroupTreeError(Exception):
    """Base class for tabgroup-tree errors."""


class PersistenceError(TabGroupTreeError, RuntimeError):
    """A read or write against the persistence collaborator failed."""


class DragInProgressError(TabGroupTreeError):
    """A gesture or a second commit was attempted while a move is being committed."""
