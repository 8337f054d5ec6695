import asyncio

from sipspot.models import Review, UserRef
from sipspot.services.http_client import ApiError
from sipspot.ui.controllers import FormState, ReviewDraft, ReviewFormController


def _recording_submit(error=None):
    calls = []

    async def submit(data, images):
        calls.append((data, images))
        if error is not None:
            raise error

    return submit, calls


def test_invalid_form_never_submits():
    submit, calls = _recording_submit()
    form = ReviewFormController(submit)
    form.set_content("too short")

    assert asyncio.run(form.submit()) is False
    assert calls == []
    assert form.state is FormState.EDITING
    assert set(form.errors) == {"rating", "content"}


def test_successful_submit_sends_payload_and_resets():
    submit, calls = _recording_submit()
    form = ReviewFormController(submit)
    form.set_rating(4)
    form.set_content("  A proper flat white, friendly staff.  ")
    form.set_detailed_rating("coffee", 5)
    form.set_detailed_rating("service", 0)
    form.add_images([("a.jpg", b"1", "image/jpeg")])

    assert asyncio.run(form.submit()) is True
    data, images = calls[0]
    assert data == {
        "rating": 4,
        "content": "A proper flat white, friendly staff.",
        "detailedRatings": {"coffee": 5},
    }
    assert images == [("a.jpg", b"1", "image/jpeg")]
    assert form.state is FormState.SUCCESS
    assert form.draft == ReviewDraft()


def test_server_failure_passes_through_failed_and_keeps_fields():
    submit, _ = _recording_submit(ApiError("You have already reviewed this cafe", status=409))
    form = ReviewFormController(submit)
    states = []
    form.subscribe(lambda: states.append(form.state))
    form.set_rating(5)
    form.set_content("Great pastries and quiet corners.")
    states.clear()

    assert asyncio.run(form.submit()) is False
    assert states == [FormState.SUBMITTING, FormState.FAILED, FormState.EDITING]
    assert form.errors == {"submit": "You have already reviewed this cafe"}
    assert form.draft.rating == 5
    assert form.draft.content == "Great pastries and quiet corners."


def test_unexpected_failure_gets_generic_message():
    submit, _ = _recording_submit(RuntimeError("boom"))
    form = ReviewFormController(submit)
    form.set_rating(3)
    form.set_content("Decent, a bit pricey for what it is.")

    assert asyncio.run(form.submit()) is False
    assert form.state is FormState.EDITING
    assert form.errors["submit"] == "Something went wrong, please try again"


def test_more_than_five_images_is_rejected():
    submit, _ = _recording_submit()
    form = ReviewFormController(submit)
    files = [(f"{i}.jpg", b"x", "image/jpeg") for i in range(4)]
    assert form.add_images(files) is True
    assert form.add_images(files[:2]) is False
    assert len(form.draft.images) == 4
    assert "images" in form.errors
    form.remove_image(0)
    assert form.add_images(files[:2]) is True
    assert len(form.draft.images) == 5


def test_edit_form_starts_from_review():
    review = Review(id="r1", cafe_id="c1", author=UserRef(id="me"), rating=2,
                    content="Too loud to work here.", detailed_ratings={"ambience": 1})
    submit, _ = _recording_submit()
    form = ReviewFormController(submit, initial=review)
    assert form.is_edit
    assert form.draft.rating == 2
    assert form.draft.detailed_ratings == {"ambience": 1}
    assert asyncio.run(form.submit()) is True
    # edits keep the fields after saving
    assert form.draft.content == "Too loud to work here."
