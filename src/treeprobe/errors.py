"""
Errors raised by treeprobe.

All of them are raised synchronously to the calling test and are never
recovered internally.
"""


class IllegalStateError(RuntimeError):
    """
    An operation was attempted on a Root in a lifecycle state that does not
    permit it. For example reading from an unmounted tree, mounting twice,
    or unmounting twice.
    """


class AmbiguousMatchError(LookupError):
    """A singular lookup found more than one candidate."""


class InvalidArgumentError(ValueError):
    """An argument was of the right type but cannot be used."""
