"""Cycle guard: remembers every directory identity entered by one listing."""

from __future__ import annotations

from dirlist.entry import FilesystemIdentity


class CycleGuard:
    """Set of visited ``(device, inode)`` identities.

    One guard is created per top-level listing and shared by every level
    below it. Identities are only ever added, so a directory reachable
    through two different symlinks is listed once.
    """

    def __init__(self) -> None:
        self._visited: set[FilesystemIdentity] = set()

    def __contains__(self, identity: object) -> bool:
        return identity in self._visited

    def __len__(self) -> int:
        return len(self._visited)

    def check_and_mark(self, identity: FilesystemIdentity) -> bool:
        """Record *identity* as visited.

        Returns:
            bool: ``True`` if it had already been visited (a cycle),
            ``False`` if this is the first visit.
        """
        if identity in self._visited:
            return True
        self._visited.add(identity)
        return False
