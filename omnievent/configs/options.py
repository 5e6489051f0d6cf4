"""
Options store for strategies.

Options is an ordered, deep-mergeable mapping used for both the per-class
default configuration of a strategy and the per-instance configuration that
is built from it. Keys are case-sensitive strings and can be read either as
items or as attributes:

    options = Options(domain="example.com")
    options.domain          # "example.com"
    options.match_name      # None (absent keys are simply missing)
"""

from typing import Any, Iterable, Mapping, Optional, Tuple, Union


class Options(dict):
    """
    Deep-mergeable key/value store.

    Nested mappings are stored as Options so they can be merged and read the
    same way as the top level.
    """

    def __init__(
        self,
        data: Optional[Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]] = None,
        **kwargs: Any,
    ):
        super().__init__()
        if data is not None:
            items = data.items() if isinstance(data, Mapping) else data
            for key, value in items:
                self.set(key, value)
        for key, value in kwargs.items():
            self.set(key, value)

    # ------------------------------------------------------------------
    # Item / attribute access
    # ------------------------------------------------------------------

    def __setitem__(self, key: str, value: Any) -> None:
        super().__setitem__(key, self._wrap(value))

    def __getattr__(self, key: str) -> Any:
        if key.startswith("__"):
            raise AttributeError(key)
        return self.get(key)

    def __setattr__(self, key: str, value: Any) -> None:
        self[key] = value

    def __delattr__(self, key: str) -> None:
        try:
            del self[key]
        except KeyError as e:
            raise AttributeError(key) from e

    def set(self, key: str, value: Any) -> "Options":
        """Store a value under key and return self."""
        self[key] = value
        return self

    def update(self, *args: Any, **kwargs: Any) -> None:
        for key, value in dict(*args, **kwargs).items():
            self[key] = value

    def setdefault(self, key: str, default: Any = None) -> Any:
        if key not in self:
            self[key] = default
        return self[key]

    # ------------------------------------------------------------------
    # Merging / copying
    # ------------------------------------------------------------------

    def deep_merge(self, other: Optional[Mapping[str, Any]]) -> "Options":
        """
        Merge another mapping into this one, in place.

        Mapping values are merged recursively; any other value from other
        replaces the existing one.

        Args:
            other: Mapping to merge in. None is a no-op.

        Returns:
            self
        """
        if not other:
            return self

        for key, value in other.items():
            current = self.get(key)
            if isinstance(current, Options) and isinstance(value, Mapping):
                current.deep_merge(value)
            else:
                self[key] = value
        return self

    def merge(self, other: Optional[Mapping[str, Any]]) -> "Options":
        """Return a deep-merged copy, leaving self untouched."""
        return self.dup().deep_merge(other)

    def dup(self) -> "Options":
        """
        Copy the store.

        Nested Options are copied as well, so changes to the copy never reach
        the original. Leaf values are shared.
        """
        copy = Options()
        for key, value in self.items():
            dict.__setitem__(copy, key, value.dup() if isinstance(value, Options) else value)
        return copy

    def to_dict(self) -> dict:
        """Convert to plain nested dicts."""
        return {
            key: value.to_dict() if isinstance(value, Options) else value
            for key, value in self.items()
        }

    @staticmethod
    def _wrap(value: Any) -> Any:
        # stored Options are never shared with the caller
        if isinstance(value, Options):
            return value.dup()
        if isinstance(value, Mapping):
            return Options(value)
        return value

    def __repr__(self) -> str:
        return f"Options({dict.__repr__(self)})"
