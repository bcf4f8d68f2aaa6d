"""Import path lists for generated files."""

from __future__ import annotations

from dataclasses import dataclass

RUNTIME_MODULE = "querygen/runtime"


@dataclass(frozen=True)
class ImportList:
    """An immutable, ordered list of quoted import paths; blank entries separate groups."""

    _paths: tuple[str, ...] = ()

    def add(self, *args: str) -> "ImportList":
        """Return a new list with the given paths appended, quoted, followed by a blank."""
        added: list[str] = []
        for path in args:
            path = path.strip()
            if path == "":
                added.append(path)
                continue
            if not path.endswith('"'):
                path = f'"{path}"'
            if path not in self._paths:
                added.append(path)
        added.append("")
        return ImportList(self._paths + tuple(added))

    def paths(self) -> list[str]:
        """Return the import paths."""
        return list(self._paths)


QUERY_IMPORTS = ImportList().add(
    "context",
    "database/sql",
    "strings",
    "",
    "gorm.io/gorm",
    "gorm.io/gorm/schema",
    "gorm.io/gorm/clause",
    "",
    RUNTIME_MODULE,
    RUNTIME_MODULE + "/field",
    RUNTIME_MODULE + "/helper",
    "",
    "gorm.io/plugin/dbresolver",
)

UNIT_TEST_IMPORTS = ImportList().add(
    "context",
    "fmt",
    "strconv",
    "testing",
    "",
    "gorm.io/driver/sqlite",
    "gorm.io/gorm",
)