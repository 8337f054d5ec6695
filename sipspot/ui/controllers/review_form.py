"""Review form state machine."""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Optional

from config import REVIEW_MAX_IMAGES
from sipspot.models import Review
from sipspot.models.review import DETAILED_RATING_KEYS
from sipspot.services.http_client import ApiError, UploadFile
from sipspot.services.validation import validate_review
from sipspot.ui.controllers.base import GENERIC_ERROR, Controller

logger = logging.getLogger(__name__)

SubmitFn = Callable[[dict, list[UploadFile]], Awaitable[object]]


class FormState(str, Enum):
    EDITING = "editing"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class ReviewDraft:
    """Field values of the review form."""
    rating: int = 0
    content: str = ""
    detailed_ratings: dict[str, int] = field(default_factory=dict)
    visit_date: str = ""  # YYYY-MM-DD
    images: list[UploadFile] = field(default_factory=list)

    @classmethod
    def from_review(cls, review: Review) -> "ReviewDraft":
        return cls(
            rating=review.rating,
            content=review.content,
            detailed_ratings=dict(review.detailed_ratings or {}),
            visit_date=review.visit_date.date().isoformat() if review.visit_date else "",
        )

    def to_payload(self) -> dict:
        payload: dict = {"rating": self.rating, "content": self.content.strip()}
        detailed = {k: v for k, v in self.detailed_ratings.items() if v}
        if detailed:
            payload["detailedRatings"] = detailed
        if self.visit_date:
            payload["visitDate"] = self.visit_date
        return payload


class ReviewFormController(Controller):
    """EDITING -> VALIDATING -> SUBMITTING -> SUCCESS.

    A failed validation goes straight back to EDITING; a failed submit
    passes through FAILED and returns to EDITING with the message in
    ``errors["submit"]``. Field values survive both.
    """

    def __init__(
        self,
        submit: SubmitFn,
        initial: Optional[Review] = None,
        on_change: Optional[Callable[[], None]] = None,
    ):
        super().__init__(on_change)
        self._submit = submit
        self.is_edit = initial is not None
        self.draft = ReviewDraft.from_review(initial) if initial else ReviewDraft()
        self.state = FormState.EDITING
        self.errors: dict[str, str] = {}

    @property
    def submitting(self) -> bool:
        return self.state is FormState.SUBMITTING

    # ------------------------------------------------------------------
    # Field edits
    # ------------------------------------------------------------------

    def set_rating(self, value: int) -> None:
        self.draft.rating = int(value or 0)
        self.errors.pop("rating", None)
        self._edited()

    def set_content(self, text: str) -> None:
        self.draft.content = text or ""
        self.errors.pop("content", None)
        self._edited()

    def set_detailed_rating(self, key: str, value: int) -> None:
        if key not in DETAILED_RATING_KEYS:
            raise ValueError(f"Unknown rating category: {key!r}")
        self.draft.detailed_ratings[key] = int(value or 0)
        self._edited()

    def set_visit_date(self, value: str) -> None:
        self.draft.visit_date = value or ""
        self._edited()

    def add_images(self, files: list[UploadFile]) -> bool:
        if len(self.draft.images) + len(files) > REVIEW_MAX_IMAGES:
            self.errors["images"] = f"You can upload at most {REVIEW_MAX_IMAGES} images"
            self._notify()
            return False
        self.draft.images.extend(files)
        self.errors.pop("images", None)
        self._edited()
        return True

    def remove_image(self, index: int) -> None:
        if 0 <= index < len(self.draft.images):
            del self.draft.images[index]
            self._edited()

    def reset(self) -> None:
        self.draft = ReviewDraft()
        self.errors = {}
        self.state = FormState.EDITING
        self._notify()

    # ------------------------------------------------------------------
    # Validation / submission
    # ------------------------------------------------------------------

    def validate(self) -> bool:
        self.state = FormState.VALIDATING
        self.errors = validate_review(
            self.draft.rating, self.draft.content, len(self.draft.images),
        )
        if self.errors:
            self.state = FormState.EDITING
            self._notify()
            return False
        return True

    async def submit(self) -> bool:
        if self.state is FormState.SUBMITTING:
            return False
        if not self.validate():
            return False

        self.state = FormState.SUBMITTING
        self._notify()
        try:
            await self._submit(self.draft.to_payload(), list(self.draft.images))
        except ApiError as exc:
            self._fail(exc.message or GENERIC_ERROR)
            return False
        except Exception:
            logger.exception("Unexpected error while submitting review")
            self._fail(GENERIC_ERROR)
            return False

        self.state = FormState.SUCCESS
        if not self.is_edit:
            self.draft = ReviewDraft()
        self._notify()
        return True

    def _fail(self, message: str) -> None:
        self.state = FormState.FAILED
        self.errors = {"submit": message}
        self._notify()
        self.state = FormState.EDITING
        self._notify()

    def _edited(self) -> None:
        if self.state is FormState.SUCCESS:
            self.state = FormState.EDITING
        self._notify()
