"""Exceptions raised by the geometry core."""


class TopologyError(RuntimeError):
    """A mesh topology invariant was violated.

    Raised for internal-consistency failures such as a vertex with the wrong
    number of incident triangles, a stalled fan walk or a cell segment with
    no matching neighbor. These indicate a bug in the builders, not bad
    input, and are never recovered from.
    """
