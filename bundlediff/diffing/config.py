from ..utils import split_path, star_path


class DiffConfig:
    """Set of options to pass around while diffing"""

    def __init__(self, *, atomic_paths=None):
        # Stored starred, so '/items/3/name' and '/items/*/name' are equivalent
        self.atomic_paths = frozenset(
            star_path(split_path(p)) for p in (atomic_paths or ()))

    def is_atomic(self, path):
        "Return True for paths whose values diff should treat as a single atomic value."
        if not self.atomic_paths:
            return False
        return star_path(split_path(path)) in self.atomic_paths

    def __copy__(self):
        return DiffConfig(atomic_paths=self.atomic_paths)
