"""Command-line interface for GuestPulse."""

import argparse
import json
import logging
import subprocess
import sys
from pathlib import Path

from .core.aggregation import rating_band
from .core.config import settings
from .core.constants import FileConstants
from .core.errors import GuestPulseError
from .services.pipeline import ReviewAnalysisPipeline
from .utils.data_prep import export_to_json, load_export, prepare_export
from .utils.mock_data import mock_dashboard

logger = logging.getLogger(__name__)


def setup_logging():
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=FileConstants.LOG_FORMAT
    )


def print_dashboard(state):
    """Short plain-text summary of a dashboard."""
    title, _ = rating_band(state.overall_rating)
    print(f"Reviews: {len(state.reviews)}")
    print(f"Overall rating: {state.overall_rating:.2f}/5 ({title})")
    print(f"\nSummary:\n{state.consolidated_review}")

    if state.sentiment_trend:
        print("\nSentiment trend:")
        for point in state.sentiment_trend:
            print(f"  {point.month}: {point.avg_rating:.2f}")

    print("\nTopics:")
    for item in state.detailed_analysis:
        print(f"  {item.topic.value}: {item.total} reviews "
              f"({item.positive} positive, {item.negative} negative)")

    if state.suggestions:
        print("\nSuggestions:")
        for group in state.suggestions:
            for suggestion in group.suggestions:
                print(f"  [{group.topic.value}] {suggestion}")


def cmd_analyze(args):
    """Analyze command."""
    pipeline = ReviewAnalysisPipeline(batch_size=args.batch_size)

    print(f"Analyzing {args.file}...")
    state = pipeline.analyze_upload(args.file)
    print_dashboard(state)

    if args.out:
        export_to_json(state, args.out)
        print(f"\nAnalysis saved to {args.out}")


def cmd_demo(args):
    """Demo command: build the mock dashboard without any LLM call."""
    state = mock_dashboard()
    print_dashboard(state)

    if args.out:
        export_to_json(state, args.out)
        print(f"\nDemo analysis saved to {args.out}")


def cmd_show(args):
    """Show command: validate and summarize a saved analysis."""
    state = load_export(args.input_file)
    if args.pretty:
        print(json.dumps(prepare_export(state), indent=2, ensure_ascii=False))
    else:
        print_dashboard(state)


def cmd_ask(args):
    """Ask command: answer a question against a saved analysis."""
    state = load_export(args.input_file)
    pipeline = ReviewAnalysisPipeline()
    print(pipeline.ask(state.reviews, args.question))


def cmd_ui(args):
    """UI command."""
    app_path = Path(__file__).parent / "ui" / "streamlit_app.py"

    if not app_path.exists():
        print(f"Streamlit app not found at {app_path}")
        return

    print("Launching GuestPulse UI...")
    try:
        subprocess.run([
            sys.executable, "-m", "streamlit", "run", str(app_path)
        ], check=True)
    except subprocess.CalledProcessError as e:
        print(f"Failed to launch UI: {e}")
    except KeyboardInterrupt:
        print("\nUI stopped by user")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="GuestPulse - Guest Feedback Analytics")
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Analyze command
    analyze_parser = subparsers.add_parser('analyze', help='Analyze a review file')
    analyze_parser.add_argument('file', help='Spreadsheet (.xlsx, .xls, .csv) or survey export (.json)')
    analyze_parser.add_argument('--out', help='Output JSON file')
    analyze_parser.add_argument('--batch-size', type=int, default=None,
                                help='Reviews per classification call')

    # Demo command
    demo_parser = subparsers.add_parser('demo', help='Show the built-in demo analysis')
    demo_parser.add_argument('--out', help='Output JSON file')

    # Show command
    show_parser = subparsers.add_parser('show', help='Summarize a saved analysis')
    show_parser.add_argument('--in', dest='input_file', required=True, help='Saved analysis JSON file')
    show_parser.add_argument('--pretty', action='store_true', help='Pretty print the full JSON to stdout')

    # Ask command
    ask_parser = subparsers.add_parser('ask', help='Ask a question about a saved analysis')
    ask_parser.add_argument('--in', dest='input_file', required=True, help='Saved analysis JSON file')
    ask_parser.add_argument('question', help='Question to answer from the reviews')

    # UI command
    subparsers.add_parser('ui', help='Launch web UI')

    return parser


COMMANDS = {
    'analyze': cmd_analyze,
    'demo': cmd_demo,
    'show': cmd_show,
    'ask': cmd_ask,
    'ui': cmd_ui,
}


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    setup_logging()

    try:
        COMMANDS[args.command](args)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
    except GuestPulseError as e:
        logger.error(f"{e.title}: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
