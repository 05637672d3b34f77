"""Cross-cutting infrastructure exceptions."""

from __future__ import annotations


class StorageError(Exception):
    """The persistence layer failed (connectivity, timeout, lock wait...).

    Repositories raise it in place of the driver error so the service and
    API layers never depend on database driver exceptions.  The operation
    that hit it has been rolled back; callers must re-submit.
    """
