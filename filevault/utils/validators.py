import unicodedata

MAX_DISPLAY_NAME_LENGTH = 255
MAX_TAGS = 20
MAX_TAG_LENGTH = 50
MAX_SEARCH_QUERY_LENGTH = 255


class FileInputValidationError(Exception):
    """File input validation error exception"""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__('; '.join(errors))


def _has_control_chars(value: str) -> bool:
    return any(unicodedata.category(ch) == "Cc" for ch in value)


def normalize_display_name(name: str | None) -> str:
    """
    Validate and normalize an uploaded file name.

    Rules:
    - Not empty after trimming surrounding whitespace
    - At most 255 characters
    - No path separators (/ or \\)
    - No control characters

    Returns:
        The trimmed name

    Raises:
        FileInputValidationError: When the name does not meet requirements
    """
    name = (name or "").strip()
    errors = []

    if not name:
        errors.append("File name is required")
    if len(name) > MAX_DISPLAY_NAME_LENGTH:
        errors.append(f"File name must be at most {MAX_DISPLAY_NAME_LENGTH} characters long")
    if "/" in name or "\\" in name:
        errors.append("File name must not contain path separators")
    if _has_control_chars(name):
        errors.append("File name must not contain control characters")

    if errors:
        raise FileInputValidationError(errors)
    return name


def parse_tags(raw: str | None) -> list[str]:
    """
    Parse a comma-separated tag list.

    Tags are trimmed, empty entries dropped and duplicates removed while
    keeping first-seen order.

    Raises:
        FileInputValidationError: When there are too many tags or a tag is
            too long or contains control characters
    """
    if not raw:
        return []

    tags: list[str] = []
    for part in raw.split(","):
        tag = part.strip()
        if tag and tag not in tags:
            tags.append(tag)

    errors = []
    if len(tags) > MAX_TAGS:
        errors.append(f"At most {MAX_TAGS} tags are allowed")
    if any(len(tag) > MAX_TAG_LENGTH for tag in tags):
        errors.append(f"Tags must be at most {MAX_TAG_LENGTH} characters long")
    if any(_has_control_chars(tag) for tag in tags):
        errors.append("Tags must not contain control characters")

    if errors:
        raise FileInputValidationError(errors)
    return tags
