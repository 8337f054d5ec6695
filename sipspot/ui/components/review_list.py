"""Review list with per-review actions (vote, report, respond, delete)."""
from nicegui import ui

from config import REVIEW_SORT_OPTIONS
from sipspot.ui.components.ai_analysis import review_analysis_badge
from sipspot.ui.components.helpers import (
    INPUT_PROPS,
    empty_state,
    error_banner,
    format_date,
    star_icons,
    user_avatar,
)
from sipspot.ui.components.pagination import pagination


def review_list(detail, confirm, on_edit=None):
    """Render the reviews pane of a ``CafeDetailController``.

    Args:
        detail: the page's ``CafeDetailController``.
        confirm: factory ``confirm(title, message)`` returning an awaitable
            that resolves to True/False.
        on_edit: Optional callback(review) shown for the viewer's own reviews.
    """
    with ui.row().classes("items-center justify-between w-full"):
        ui.label(f"Reviews ({detail.review_total})").classes("text-h6 font-bold")
        ui.select(
            REVIEW_SORT_OPTIONS, value=detail.review_sort,
            on_change=lambda e: detail.set_review_sort(e.value),
        ).props(INPUT_PROPS).classes("w-48")

    if detail.reviews_error:
        error_banner(detail.reviews_error, on_retry=detail.load_reviews)
        return
    if detail.reviews_loading and not detail.reviews:
        with ui.row().classes("w-full justify-center py-8"):
            ui.spinner(size="lg")
        return
    if not detail.reviews:
        empty_state("No reviews yet. Be the first to share your experience!", icon="rate_review")
        return

    for review in detail.reviews:
        _review_item(detail, review, confirm, on_edit)

    pagination(detail.review_page, detail.review_total_pages, detail.go_to_review_page)


def _review_item(detail, review, confirm, on_edit):
    viewer = detail.viewer_id
    own = review.is_written_by(viewer)
    my_vote = review.vote_of(viewer)

    with ui.card().classes("w-full p-4"):
        with ui.row().classes("items-start gap-3 w-full no-wrap"):
            user_avatar(review.author)
            with ui.column().classes("gap-1 flex-1"):
                with ui.row().classes("items-center gap-2"):
                    ui.label(review.author.display_name if review.author else "Anonymous").classes(
                        "text-subtitle2 font-bold"
                    )
                    star_icons(review.rating)
                    ui.label(format_date(review.created_at)).classes("text-caption text-secondary")
                    if review.is_edited:
                        ui.label("(edited)").classes("text-caption text-secondary")
                if review.detailed_ratings:
                    with ui.row().classes("gap-3"):
                        for key, value in review.detailed_ratings.items():
                            ui.label(f"{key.title()}: {value}/5").classes("text-caption text-secondary")
                ui.label(review.content).classes("text-body2 whitespace-pre-line")
                if review.images:
                    with ui.row().classes("gap-2"):
                        for url in review.images:
                            ui.image(url).classes("w-20 h-20 rounded object-cover")
                if review.visit_date:
                    ui.label(f"Visited {format_date(review.visit_date)}").classes(
                        "text-caption text-secondary"
                    )

                review_analysis_badge(review.ai_analysis)

                if review.owner_response:
                    with ui.column().classes("gap-0 p-2 rounded bg-brown-1 w-full"):
                        ui.label("Response from the owner").classes("text-caption font-bold")
                        ui.label(review.owner_response.content).classes("text-body2")

                with ui.row().classes("items-center gap-1 mt-1"):
                    _vote_button(detail, review, "helpful", "thumb_up", review.helpful_count, my_vote)
                    _vote_button(
                        detail, review, "not-helpful", "thumb_down", review.not_helpful_count, my_vote,
                    )
                    ui.space()
                    if viewer and not own:
                        ui.button(
                            "Report", icon="flag",
                            on_click=lambda r=review: _report_dialog(detail, r),
                        ).props("flat dense size=sm color=grey-7")
                    if detail.is_owner and review.ai_analysis is None:
                        ui.button(
                            "Analyze", icon="psychology",
                            on_click=lambda r=review: detail.analyze_review(r.id),
                        ).props("flat dense size=sm color=accent")
                    if detail.is_owner and review.owner_response is None:
                        ui.button(
                            "Respond", icon="reply",
                            on_click=lambda r=review: _respond_dialog(detail, r),
                        ).props("flat dense size=sm color=primary")
                    if own and on_edit is not None:
                        ui.button(
                            "Edit", icon="edit", on_click=lambda r=review: on_edit(r),
                        ).props("flat dense size=sm color=primary")
                    if own:
                        ui.button(
                            "Delete", icon="delete",
                            on_click=lambda r=review: detail.delete_review(
                                r.id, confirm("Delete review?", "This cannot be undone."),
                            ),
                        ).props("flat dense size=sm color=negative")

                for key in (f"vote:{review.id}", f"report:{review.id}", f"response:{review.id}",
                            f"analyze:{review.id}", f"delete:{review.id}"):
                    if key in detail.action_errors:
                        ui.label(detail.action_errors[key]).classes("text-caption text-negative")


def _vote_button(detail, review, vote_type, icon, count, my_vote):
    active = my_vote == vote_type
    btn = ui.button(
        str(count), icon=icon,
        on_click=lambda: detail.vote_review(review.id, vote_type),
    ).props(f"flat dense size=sm color={'primary' if active else 'grey-7'}")
    if not detail.viewer_id or review.is_written_by(detail.viewer_id):
        btn.disable()


def _report_dialog(detail, review):
    with ui.dialog() as dlg, ui.card().classes("w-96"):
        ui.label("Report review").classes("text-subtitle1 font-bold")
        reason = ui.textarea("Reason").props(INPUT_PROPS).classes("w-full")
        with ui.row().classes("justify-end gap-2 mt-4 w-full"):
            ui.button("Cancel", on_click=dlg.close).props("flat")

            async def _submit():
                dlg.close()
                if await detail.report_review(review.id, reason.value or ""):
                    ui.notify("Thanks, the review was reported.", type="positive")

            ui.button("Report", on_click=_submit).props("color=negative")
    dlg.open()


def _respond_dialog(detail, review):
    with ui.dialog() as dlg, ui.card().classes("w-96"):
        ui.label("Respond to review").classes("text-subtitle1 font-bold")
        content = ui.textarea("Your response").props(INPUT_PROPS).classes("w-full")
        with ui.row().classes("justify-end gap-2 mt-4 w-full"):
            ui.button("Cancel", on_click=dlg.close).props("flat")

            async def _submit():
                text = (content.value or "").strip()
                if not text:
                    ui.notify("Response cannot be empty.", type="warning")
                    return
                dlg.close()
                if await detail.respond_to_review(review.id, text):
                    ui.notify("Response posted.", type="positive")

            ui.button("Post", on_click=_submit).props("color=primary")
    dlg.open()
