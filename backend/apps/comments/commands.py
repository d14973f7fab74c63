from dataclasses import dataclass, field
from typing import Any, Dict, Optional

CONTENT_MAX_LENGTH = 2000


def _parse_id(raw: Any) -> Optional[int]:
    if isinstance(raw, bool):
        return None
    try:
        value = int(str(raw).strip())
    except ValueError:
        return None
    return value if value >= 1 else None


@dataclass
class CommentCreateCommand:
    product_id: int
    author_id: int
    content: str
    parent_id: Optional[int] = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @staticmethod
    def from_raw(product_id: int, author_id: int, payload: Any) -> "CommentCreateCommand":
        data = payload if isinstance(payload, dict) else {}
        errors: Dict[str, str] = {}
        content = str(data.get("content") or "").strip()
        if not content:
            errors["content"] = "Comment text cannot be empty."
        elif len(content) > CONTENT_MAX_LENGTH:
            errors["content"] = f"Comment text must be at most {CONTENT_MAX_LENGTH} characters."
        raw_parent = data.get("parent_id", data.get("parentId"))
        parent_id = None
        if raw_parent not in (None, ""):
            parent_id = _parse_id(raw_parent)
            if parent_id is None:
                errors["parent_id"] = "Parent comment id must be a positive whole number."
        return CommentCreateCommand(
            product_id=product_id,
            author_id=author_id,
            content=content,
            parent_id=parent_id,
            errors=errors,
        )
