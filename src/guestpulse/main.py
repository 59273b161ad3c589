"""Main entry point for GuestPulse."""

import sys

from guestpulse.cli import main as cli_main
from guestpulse.ui import run_streamlit_app


def main():
    """Main entry point - delegates to CLI or UI based on arguments."""
    if len(sys.argv) > 1 and sys.argv[1] == "ui":
        # Run Streamlit UI
        run_streamlit_app()
    else:
        # Run CLI
        cli_main()


if __name__ == "__main__":
    main()
