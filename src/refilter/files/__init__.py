"""refilter.files — file record domain.

Provides the FileRecord representation and the DataInputs that read a
record's path-like identity for pattern-mode predicates.
"""

from refilter.files._inputs import PathInput, RelativePathInput
from refilter.files._record import FileRecord

__all__ = [
    # Record
    "FileRecord",
    # DataInputs
    "PathInput",
    "RelativePathInput",
]
