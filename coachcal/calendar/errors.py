"""Scheduling grid error types.

Layout and gesture handling never raise for bad lesson data; these errors
cover configuration and host-side loading only.

Standard error codes:
- INVALID_GRID_SETTINGS: A structural grid constant is out of range
- INVALID_JSON: Lesson payload is not valid JSON
- INVALID_RECORD: A lesson record failed validation
"""


class GridConfigError(ValueError):
    """Raised when grid settings cannot produce a consistent layout.

    Attributes:
        code: Error code (e.g., "INVALID_GRID_SETTINGS")
        details: List of error detail strings
    """

    def __init__(self, code: str, details: list[str]):
        self.code = code
        self.details = details
        super().__init__(f"{code}: {details}")


class LessonLoadError(ValueError):
    """Raised when host lesson records cannot be parsed.

    Attributes:
        code: Error code ("INVALID_JSON" or "INVALID_RECORD")
        details: List of error detail strings
        index: Position of the offending record, if known
    """

    def __init__(self, code: str, details: list[str], index: int | None = None):
        self.code = code
        self.details = details
        self.index = index
        where = f" (record {index})" if index is not None else ""
        super().__init__(f"{code}{where}: {details}")
