"""Basic usage examples for GuestPulse."""

import os

from guestpulse import ReviewAnalysisPipeline
from guestpulse.core.aggregation import rating_band
from guestpulse.utils.data_prep import export_to_json, load_export
from guestpulse.utils.mock_data import mock_dashboard


def example_analyze_file(path):
    """Example: analyze a spreadsheet or survey export."""
    print(f"📊 Analyzing {path}")

    pipeline = ReviewAnalysisPipeline()
    state = pipeline.analyze_upload(path)

    title, description = rating_band(state.overall_rating)
    print(f"⭐ Overall rating: {state.overall_rating:.1f}/5 - {title}")
    print(f"   {description}")
    print(f"📝 {state.consolidated_review}")

    for item in state.detailed_analysis:
        print(f"  {item.topic.value}: {item.total} reviews, {item.negative} negative")
    return state


def example_demo_roundtrip():
    """Example: save the demo dashboard and load it back."""
    print("\n🧪 Demo dashboard export/import")

    state = mock_dashboard()
    export_to_json(state, "demo_analysis.json")
    restored = load_export("demo_analysis.json")
    print(f"✅ Restored {len(restored.reviews)} reviews, identical: {restored == state}")


def example_question(state):
    """Example: ask a question about the reviews."""
    pipeline = ReviewAnalysisPipeline()
    question = "What are the most common complaints?"
    print(f"\n❓ {question}")
    print(pipeline.ask(state.reviews, question))


if __name__ == "__main__":
    print("🚀 GuestPulse Examples")
    print("=" * 50)

    if not os.getenv("OPENAI_API_KEY"):
        print("⚠️  Warning: OPENAI_API_KEY not set. Using the keyword fallback.")
        print()

    example_demo_roundtrip()

    path = os.getenv("GUESTPULSE_SAMPLE", "reviews.csv")
    if os.path.exists(path):
        state = example_analyze_file(path)
        example_question(state)

    print("\n✅ Examples completed!")
