"""Plotly figures for the dashboard cards."""

from typing import Sequence

import plotly.graph_objects as go

from ..core.aggregation import (
    negative_feedback_by_topic,
    sentiment_counts,
    sentiment_split,
    topic_distribution,
)
from ..core.models import NEGATIVE_SENTIMENTS, Review, Sentiment, TrendPoint

SENTIMENT_COLORS = {
    Sentiment.BEST: "#22c55e",
    Sentiment.GOOD: "#a3e635",
    Sentiment.FARE: "#fb923c",
    Sentiment.BAD: "#ef4444",
    Sentiment.OTHER: "#9ca3af",
}
SPLIT_COLORS = {"Positive": "#22c55e", "Negative": "#ef4444"}
TOPIC_COLOR = "#6366f1"

_LAYOUT = dict(margin=dict(l=20, r=20, t=40, b=20), height=320)


def sentiment_bar_chart(reviews: Sequence[Review]) -> go.Figure:
    """Review count per sentiment bucket (BEST..BAD)."""
    counts = sentiment_counts(reviews)
    shown = [s for s in Sentiment if s != Sentiment.OTHER]
    fig = go.Figure(go.Bar(
        x=[s.value for s in shown],
        y=[counts[s] for s in shown],
        marker_color=[SENTIMENT_COLORS[s] for s in shown],
        text=[counts[s] for s in shown],
        textposition="outside",
        hovertemplate="<b>%{x}</b><br>Count: %{y}<extra></extra>",
    ))
    fig.update_layout(title_text="Reviews by Sentiment", showlegend=False, **_LAYOUT)
    return fig


def sentiment_split_chart(reviews: Sequence[Review]) -> go.Figure:
    """Donut of positive against negative reviews; empty slices are omitted."""
    split = sentiment_split(reviews)
    slices = [(name, split[name.lower()]) for name in ("Positive", "Negative") if split[name.lower()] > 0]
    fig = go.Figure(go.Pie(
        labels=[name for name, _ in slices],
        values=[value for _, value in slices],
        hole=0.55,
        marker=dict(colors=[SPLIT_COLORS[name] for name, _ in slices]),
        hovertemplate="<b>%{label}</b><br>%{value} reviews (%{percent})<extra></extra>",
    ))
    fig.update_layout(title_text="Sentiment Distribution", **_LAYOUT)
    return fig


def topic_distribution_chart(reviews: Sequence[Review]) -> go.Figure:
    """Review count per topic."""
    counts = topic_distribution(reviews)
    fig = go.Figure(go.Bar(
        x=[count for count in counts.values()],
        y=[topic.value for topic in counts],
        orientation="h",
        marker_color=TOPIC_COLOR,
        hovertemplate="<b>%{y}</b><br>Reviews: %{x}<extra></extra>",
    ))
    fig.update_layout(title_text="Feedback by Topic", showlegend=False, **_LAYOUT)
    return fig


def negative_feedback_chart(reviews: Sequence[Review]) -> go.Figure:
    """Stacked FARE/BAD counts per topic."""
    counts = negative_feedback_by_topic(reviews)
    topics = list(counts)
    fig = go.Figure()
    for sentiment in NEGATIVE_SENTIMENTS:
        fig.add_trace(go.Bar(
            name=sentiment.value,
            x=[t.value for t in topics],
            y=[counts[t][sentiment] for t in topics],
            marker_color=SENTIMENT_COLORS[sentiment],
        ))
    fig.update_layout(barmode="stack", title_text="Negative Feedback by Topic", **_LAYOUT)
    return fig


def sentiment_trend_chart(trend: Sequence[TrendPoint]) -> go.Figure:
    """Average rating per month."""
    fig = go.Figure(go.Scatter(
        x=[p.month for p in trend],
        y=[p.avg_rating for p in trend],
        mode="lines+markers",
        line=dict(color=TOPIC_COLOR, width=3),
        hovertemplate="<b>%{x}</b><br>Avg. Rating: %{y:.2f}<extra></extra>",
    ))
    fig.update_yaxes(range=[0, 5.2], title_text="Avg. Rating")
    fig.update_layout(title_text="Sentiment Trend", showlegend=False, **_LAYOUT)
    return fig
