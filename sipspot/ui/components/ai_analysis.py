"""Sentiment panels: per-cafe distribution and per-review AI analysis."""
from nicegui import ui

from sipspot.models import SentimentStats
from sipspot.models.review import AIAnalysis
from sipspot.ui.components.helpers import SENTIMENT_COLORS, SENTIMENT_LABELS, section_header


def sentiment_panel(stats: SentimentStats | None):
    """Render the positive / neutral / negative breakdown of a cafe's reviews."""
    with ui.card().classes("w-full p-5"):
        section_header("Review sentiment", icon="psychology", subtitle="AI analysis of reviews")
        if stats is None or stats.total == 0:
            ui.label("No analysed reviews yet.").classes("text-body2 text-secondary")
            return

        percentages = stats.percentages
        counts = {"positive": stats.positive, "neutral": stats.neutral, "negative": stats.negative}
        for name in ("positive", "neutral", "negative"):
            colors = SENTIMENT_COLORS[name]
            with ui.row().classes("items-center gap-3 w-full"):
                ui.icon(colors["icon"]).style(f"color: {colors['text']}")
                ui.label(SENTIMENT_LABELS[name]).classes("text-body2 w-20")
                ui.linear_progress(
                    value=percentages[name] / 100, show_value=False, color=colors["bar"],
                ).classes("flex-1").props("rounded size=10px")
                ui.label(f"{percentages[name]}% ({counts[name]})").classes(
                    "text-caption text-secondary w-20 text-right"
                )
        ui.label(f"Based on {stats.total} analysed reviews").classes(
            "text-caption text-secondary mt-2"
        )


def review_analysis_badge(analysis: AIAnalysis | None):
    """Compact sentiment chip with keywords and summary for one review."""
    if analysis is None:
        return
    colors = SENTIMENT_COLORS.get(analysis.sentiment, SENTIMENT_COLORS["neutral"])
    with ui.column().classes("gap-1 p-2 rounded w-full").style(f"background: {colors['bg']}"):
        with ui.row().classes("items-center gap-2"):
            ui.icon(colors["icon"], size="xs").style(f"color: {colors['text']}")
            ui.label(SENTIMENT_LABELS.get(analysis.sentiment, analysis.sentiment)).classes(
                "text-caption font-medium"
            ).style(f"color: {colors['text']}")
            ui.label(f"{analysis.confidence:.0%} confidence").classes("text-caption text-secondary")
        if analysis.summary:
            ui.label(analysis.summary).classes("text-caption")
        if analysis.keywords:
            with ui.row().classes("gap-1"):
                for keyword in analysis.keywords[:6]:
                    ui.badge(keyword, color="white").classes("text-grey-8").props("outline")
