"""Streamlit dashboard for GuestPulse."""

import streamlit as st
import logging
from pathlib import Path

# Add parent directory to path for imports
import sys
sys.path.append(str(Path(__file__).parent.parent.parent))

from guestpulse.core.config import settings
from guestpulse.core.constants import ErrorConstants, FileConstants, PlaceholderConstants, UIConstants
from guestpulse.core.errors import GuestPulseError
from guestpulse.core.aggregation import (
    has_negative_feedback,
    key_positive_points,
    negative_feedback_by_topic,
    rating_band,
    sentiment_split,
    top_topic,
)
from guestpulse.core.models import ALL_SENTIMENTS, ALL_TOPICS, Review
from guestpulse.services.pipeline import ReviewAnalysisPipeline
from guestpulse.ui import charts
from guestpulse.ui.state import ALL, DashboardSession, filter_reviews, sentiment_filter_counts, total_pages
from guestpulse.utils.data_prep import dumps_export, load_export
from guestpulse.utils.mock_data import mock_dashboard

# Configure logging
logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO), format=FileConstants.LOG_FORMAT)
logger = logging.getLogger(__name__)

SENTIMENT_ICONS = {"BEST": "😄", "GOOD": "🙂", "FARE": "😐", "BAD": "😠", "Other": "😶"}
TOPIC_ICONS = {"Reservation": "🛏️", "Management Service": "🏢", "Food": "🍽️", "Payment": "💳", "Other": "💬"}
TABLE_WIDGET_KEYS = ("table_sentiment", "table_topic", "table_search", "table_sort")
SORT_OPTIONS = {
    "Original order": (None, "ascending"),
    "Rating (low to high)": ("rating", "ascending"),
    "Rating (high to low)": ("rating", "descending"),
    "Topic (A-Z)": ("topic", "ascending"),
    "Topic (Z-A)": ("topic", "descending"),
}


def _excerpt(s, n=UIConstants.EXCERPT_LENGTH):
    s = (s or "").strip().replace("\n", " ")
    return s if len(s) <= n else s[:n-1] + "…"


@st.cache_resource
def get_pipeline() -> ReviewAnalysisPipeline:
    return ReviewAnalysisPipeline()


def _rewound(upload):
    # uploads are re-read across reruns
    upload.seek(0)
    return upload


# Page configuration
st.set_page_config(
    page_title="GuestPulse - Guest Feedback Analytics",
    page_icon="🧠",
    layout="wide"
)

session = DashboardSession(st.session_state)
pipeline = get_pipeline()


def render_snapshot(state):
    st.subheader("Guest Sentiment Snapshot")
    title, description = rating_band(state.overall_rating)
    col1, col2 = st.columns([1, 2])
    with col1:
        st.metric("Overall Rating", f"{state.overall_rating:.1f}/5")
        st.progress(min(1.0, state.overall_rating / 5.0))
        st.markdown(f"**{title}**")
        st.caption(description)
        st.metric("Total Reviews", len(state.reviews))
    with col2:
        st.plotly_chart(charts.sentiment_bar_chart(state.reviews), width="stretch")


def render_distribution(state):
    st.subheader("Sentiment Analysis & Insights at a Glance")
    split = sentiment_split(state.reviews)
    best = top_topic(state.reviews, positive=True)
    worst = top_topic(state.reviews, positive=False)

    col1, col2 = st.columns([1, 1])
    with col1:
        st.plotly_chart(charts.sentiment_split_chart(state.reviews), width="stretch")
    with col2:
        if split["positive_pct"] >= 50:
            st.success("The majority of feedback is positive.")
        else:
            st.warning("The majority of feedback is negative.")
        st.write(state.consolidated_review)
        c1, c2 = st.columns(2)
        c1.metric("Positive", f"{split['positive_pct']:.0f}%")
        c2.metric("Negative", f"{split['negative_pct']:.0f}%")
        c1.caption(f"Top positive topic: **{best.value if best else PlaceholderConstants.NO_TOPIC}**")
        c2.caption(f"Top negative topic: **{worst.value if worst else PlaceholderConstants.NO_TOPIC}**")


def render_positives_and_suggestions(state):
    col1, col2 = st.columns(2)
    with col1:
        st.subheader("✨ Key Positives")
        for point in key_positive_points(state.key_positives):
            st.write(f"✅ {point}")
    with col2:
        st.subheader("💡 Improvement Suggestions")
        if not state.suggestions:
            st.info(PlaceholderConstants.NO_SUGGESTIONS)
        for group in state.suggestions:
            with st.expander(f"{TOPIC_ICONS.get(group.topic.value, '💬')} {group.topic.value}"):
                for suggestion in group.suggestions:
                    st.write(f"• {suggestion}")


def render_topics(state):
    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(charts.topic_distribution_chart(state.reviews), width="stretch")
    with col2:
        if has_negative_feedback(negative_feedback_by_topic(state.reviews)):
            st.plotly_chart(charts.negative_feedback_chart(state.reviews), width="stretch")
        else:
            st.subheader("Negative Feedback by Topic")
            st.success("No negative feedback found. Great job!")


def render_trend(state):
    if state.sentiment_trend:
        st.plotly_chart(charts.sentiment_trend_chart(state.sentiment_trend), width="stretch")
    else:
        st.info("No monthly data available for a trend.")


def render_detailed(state):
    st.subheader("🔍 Detailed Feedback by Topic")
    total_reviews = len(state.reviews)
    for item in state.detailed_analysis:
        share = (item.total / total_reviews * 100) if total_reviews else 0
        label = f"{TOPIC_ICONS.get(item.topic.value, '💬')} {item.topic.value} · {item.total} mentions ({share:.0f}%)"
        with st.expander(label):
            positive_pct = item.positive / item.total if item.total else 0.0
            negative_pct = item.negative / item.total if item.total else 0.0
            c1, c2 = st.columns(2)
            with c1:
                st.caption(f"Positive · {item.positive}")
                st.progress(positive_pct)
                st.write(item.analysis.positive_summary)
            with c2:
                st.caption(f"Negative · {item.negative}")
                st.progress(negative_pct)
                st.write(item.analysis.negative_summary)
            if item.analysis.suggestions:
                st.markdown("**Suggestions**")
                for suggestion in item.analysis.suggestions:
                    st.write(f"• {suggestion}")


def _answer(question: str):
    """One Q&A call; failures stay inside the card."""
    try:
        return pipeline.ask(session.dashboard.reviews, question), None
    except GuestPulseError as e:
        logger.error(f"Q&A failed: {e.message}")
        return None, ErrorConstants.ANSWER_FAILED


def render_qa(state):
    st.subheader("❓ Review Q&A")
    st.caption("Get instant answers to key questions about your feedback.")

    with st.form("custom_question", clear_on_submit=False):
        question = st.text_input("Ask a Custom Question", placeholder="Type your question here...")
        submitted = st.form_submit_button("Ask")
    if submitted and question.strip():
        with st.spinner("Generating answer..."):
            answer, error = _answer(question.strip())
        if error:
            st.error(error)
        else:
            st.markdown(answer)

    st.markdown("**Or, get answers to common questions:**")
    for i, question in enumerate(UIConstants.TOP_QUESTIONS):
        with st.expander(question):
            if question in session.answers:
                st.markdown(session.answers[question])
            elif st.button("Get answer", key=f"top_question_{i}"):
                with st.spinner("Generating answer..."):
                    answer, error = _answer(question)
                if error:
                    st.error(error)
                else:
                    session.answers[question] = answer
                    st.markdown(answer)


@st.dialog("Draft a reply")
def reply_dialog(review: Review):
    st.caption(f"{SENTIMENT_ICONS.get(review.sentiment.value, '')} {review.sentiment.value} · {review.topic.value}")
    st.write(review.text)
    key = f"reply_{review.id}"
    if st.button("✍️ Generate draft"):
        with st.spinner("Drafting..."):
            try:
                st.session_state[key] = pipeline.draft_reply(review)
            except GuestPulseError as e:
                logger.error(f"Reply drafting failed: {e.message}")
                st.error(ErrorConstants.REPLY_FAILED)
    st.text_area("Reply", key=key, height=180)


def _on_filter_change():
    sort_key, direction = SORT_OPTIONS[st.session_state["table_sort"]]
    session.update_table(
        sentiment=st.session_state["table_sentiment"],
        topic=st.session_state["table_topic"],
        search=st.session_state["table_search"],
        sort_key=sort_key,
        sort_direction=direction,
    )


def render_reviews_table(state):
    st.subheader("📝 All Reviews")
    counts = sentiment_filter_counts(state.reviews)
    view = session.table

    c1, c2, c3, c4 = st.columns([1, 1, 2, 1])
    sentiment_options = [ALL] + [s.value for s in ALL_SENTIMENTS]
    c1.selectbox("Sentiment", sentiment_options, key="table_sentiment", on_change=_on_filter_change,
                 format_func=lambda v: f"{'All' if v == ALL else v} ({counts[v]})")
    c2.selectbox("Topic", [ALL] + [t.value for t in ALL_TOPICS], key="table_topic",
                 on_change=_on_filter_change, format_func=lambda v: "All" if v == ALL else v)
    c3.text_input("Search", key="table_search", on_change=_on_filter_change,
                  placeholder="Search review text...")
    c4.selectbox("Sort", list(SORT_OPTIONS), key="table_sort", on_change=_on_filter_change)

    filtered = filter_reviews(state.reviews, view)
    page_size = settings.reviews_per_page
    pages = total_pages(len(filtered), page_size)

    if not filtered:
        st.info("No reviews match the current filter.")
        return

    for review in session.visible_reviews(page_size):
        col1, col2, col3 = st.columns([1, 6, 1])
        col1.markdown(f"{SENTIMENT_ICONS.get(review.sentiment.value, '')} **{review.sentiment.value}**")
        col1.caption(f"⭐ {review.rating:.1f} · {review.month}")
        col2.write(_excerpt(review.text))
        col2.caption(review.topic.value)
        if col3.button("Reply", key=f"reply_btn_{review.id}"):
            reply_dialog(review)

    if pages > 1:
        prev_col, info_col, next_col = st.columns([1, 2, 1])
        if prev_col.button("◀ Previous", disabled=view.page <= 1):
            session.update_table(page=view.page - 1)
            st.rerun()
        info_col.caption(f"Page {view.page} of {pages}")
        if next_col.button("Next ▶", disabled=view.page >= pages):
            session.update_table(page=view.page + 1)
            st.rerun()


def render_dashboard(state):
    render_snapshot(state)
    st.divider()
    render_distribution(state)
    st.divider()
    render_positives_and_suggestions(state)
    st.divider()
    render_topics(state)
    render_trend(state)
    st.divider()
    render_detailed(state)
    st.divider()
    render_qa(state)
    st.divider()
    render_reviews_table(state)


# Main UI
st.title("🧠 GuestPulse")
st.write("Your Intelligent Partner in Guest Feedback.")

# Sidebar for data
with st.sidebar:
    st.header("📂 Data")

    upload = st.file_uploader("Upload Reviews", type=["xlsx", "xls", "csv", "json"],
                              help="Column 1: review text, column 2: month. Or a survey export (.json).")
    run_analysis = st.button("📊 Analyze Reviews", disabled=upload is None, width="stretch")
    run_mock = st.button("🧪 Test with Mock Data", width="stretch")

    st.subheader("💾 Saved Analysis")
    saved = st.file_uploader("Load Saved Analysis", type=["json"], key="saved_upload")
    run_import = st.button("📥 Load", disabled=saved is None, width="stretch")

    if session.has_dashboard:
        st.download_button(
            "📤 Export Analysis",
            data=dumps_export(session.dashboard),
            file_name=FileConstants.EXPORT_FILENAME,
            mime="application/json",
            width="stretch",
        )
        if st.button("🔄 New Analysis", width="stretch"):
            session.reset()
            st.rerun()

if run_analysis and upload is not None:
    with st.spinner("Connecting with your customers... our AI is reading every review."):
        session.run(lambda: pipeline.analyze_upload(_rewound(upload), upload.name))
elif run_mock:
    session.run(mock_dashboard)
elif run_import and saved is not None:
    session.run(lambda: load_export(_rewound(saved)))

if run_analysis or run_mock or run_import:
    # a new dashboard starts with default table widgets
    for key in TABLE_WIDGET_KEYS:
        st.session_state.pop(key, None)

error = session.pop_error()
if error is not None:
    st.toast(error.title, icon="⚠️")
    st.error(f"**{error.title}**: {error.message}")

if session.has_dashboard:
    render_dashboard(session.dashboard)
else:
    st.subheader("How It Works")
    cols = st.columns(3, gap="large")
    FEATURES = [
        ("📄 Upload Your Data", "Upload your customer reviews in an Excel, CSV or survey JSON file."),
        ("✨ Instant Analysis", "Each review is classified for sentiment and topic."),
        ("📊 Visualize Insights", "Explore interactive charts and get actionable suggestions."),
    ]
    for i, (title, description) in enumerate(FEATURES):
        with cols[i]:
            st.write(f"**{title}**")
            st.caption(description)
