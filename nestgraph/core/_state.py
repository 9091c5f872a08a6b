class _State:
    """Mutation counter shared by a graph and its cached backend conversions."""

    def __init__(self):
        self.version = 0
        self._backend_cache = {}

    def touch(self):
        self.version += 1

    def dirty_since(self, version: int) -> bool:
        return self.version > version
