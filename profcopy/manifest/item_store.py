"""Item store protocol.

The host application exposes the named items inside each data file through an
API that this package does not bind to. Anything with these three methods can
be used to generate manifests and to run a pending cleanup.
"""

from typing import Iterable, List, Protocol

from profcopy.models import ManifestItem


class ItemStore(Protocol):
    """Access to the named items of the data files in the loaded profile."""

    def list_items(self, manifest_key: str) -> Iterable[ManifestItem]:
        """Return the items currently stored for ``manifest_key``."""
        ...

    def delete_items(self, manifest_key: str, names: List[str]) -> int:
        """Delete the named items and return how many were removed."""
        ...

    def save(self, manifest_key: str) -> None:
        """Persist pending changes for ``manifest_key``."""
        ...
