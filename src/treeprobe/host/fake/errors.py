class HostError(RuntimeError):
    """The reference host could not render or update a tree."""
