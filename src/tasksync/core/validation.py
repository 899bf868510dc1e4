"""Task form validation."""

from dataclasses import dataclass

from .tasks import Priority

TITLE_MIN_LENGTH = 3
DESCRIPTION_MAX_LENGTH = 200


class ValidationError(Exception):
    """Raised when form input does not describe a valid task."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{name}: {msg}" for name, msg in errors.items()))


@dataclass
class TaskDraft:
    """Cleaned form data, ready to hand to the synchronizer."""

    title: str
    description: str = ""
    priority: Priority = Priority.LOW
    completed: bool = False

    def to_changes(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "priority": Priority(self.priority).value,
            "completed": self.completed,
        }


def validate_task_form(title: str, description: str = "") -> dict[str, str]:
    """Return field -> message for every rule the input breaks."""
    errors = {}

    if not title.strip():
        errors["title"] = "Title is required"
    elif len(title.strip()) < TITLE_MIN_LENGTH:
        errors["title"] = f"Title must be at least {TITLE_MIN_LENGTH} characters"

    if len(description) > DESCRIPTION_MAX_LENGTH:
        errors["description"] = f"Maximum {DESCRIPTION_MAX_LENGTH} characters"

    return errors


def ensure_valid(
    title: str,
    description: str = "",
    priority: Priority | str = Priority.LOW,
    completed: bool = False,
) -> TaskDraft:
    """Validate form input and return a trimmed draft, or raise ValidationError."""
    errors = validate_task_form(title, description)
    if errors:
        raise ValidationError(errors)
    return TaskDraft(
        title=title.strip(),
        description=description.strip(),
        priority=Priority(priority),
        completed=completed,
    )
