"""Constants and configuration values for GuestPulse."""

# Batch Processing Constants
class BatchConstants:
    """Constants related to review classification batches."""

    DEFAULT_BATCH_SIZE = 50  # reviews per classification call
    MIN_BATCH_SIZE = 1


# Prompt Constants
class PromptConstants:
    """Constants for LLM prompts and templates."""

    CLASSIFY_TEMPERATURE = 0.0  # deterministic labels
    CLASSIFY_MAX_TOKENS = 8000  # 50 reviews echo their text back

    SUMMARY_TEMPERATURE = 0.4  # temperature for narrative summaries
    SUMMARY_MAX_TOKENS = 800

    SUGGESTIONS_TEMPERATURE = 0.3
    SUGGESTIONS_MAX_TOKENS = 1200

    TOPIC_TEMPERATURE = 0.2
    TOPIC_MAX_TOKENS = 600

    ANSWER_TEMPERATURE = 0.3
    ANSWER_MAX_TOKENS = 800

    REPLY_TEMPERATURE = 0.5
    REPLY_MAX_TOKENS = 400


# Placeholder texts mandated for empty results
class PlaceholderConstants:
    """Fixed strings shown when the model has nothing to say."""

    NO_FEEDBACK = "No feedback provided for this topic."
    NO_POSITIVE_FEEDBACK = "No positive feedback provided."
    NO_NEGATIVE_FEEDBACK = "No negative feedback provided."
    NO_SUMMARY = "No summary available."
    NO_POSITIVES = "No positives identified."
    NO_SUGGESTIONS = "No specific suggestions generated."
    NO_TOPIC = "N/A"


# UI Constants
class UIConstants:
    """Constants for the dashboard."""

    EXCERPT_LENGTH = 240  # chars shown per review row

    TOP_QUESTIONS = [
        "What are the most common complaints about room cleanliness and maintenance?",
        "Summarize all feedback related to staff friendliness and professionalism.",
        'What are the top reasons guests give for a 5-star "BEST" rating?',
        "Are there any recurring issues with the check-in or check-out process?",
        "What specific food items are mentioned most often, and is the sentiment positive or negative?",
    ]

    # (threshold, title, description), checked top-down
    RATING_BANDS = [
        (4.5, "Excellent Guest Feedback!", "Guests are loving their stay. Keep up the great work!"),
        (4.0, "Great Job!", "Overall, guests are very satisfied. A few small tweaks could make it perfect."),
        (3.0, "Good, with Room to Grow", "Feedback is generally positive, but there are clear areas for improvement."),
        (2.0, "Attention Needed", "Significant areas require your focus to improve guest experience."),
    ]
    LOWEST_BAND = ("Urgent Review Required", "Immediate action is needed to address critical guest feedback.")


# Error Handling Constants
class ErrorConstants:
    """Constants for error handling and user-facing messages."""

    INVALID_FILE_TITLE = "Invalid File"
    INVALID_FILE_TYPE = "Please upload a valid Excel, CSV or JSON file (.xlsx, .xls, .csv, .json)."
    NO_VALID_REVIEWS = "No valid reviews found. Ensure the first column has review text and the second has the month."
    UNREADABLE_FILE = "Failed to read or process the file. Please ensure it is a valid .xlsx, .csv or .json file."
    INVALID_EXPORT = "Invalid analysis file. Expected reviews, consolidatedData, sentimentTrend and detailedAnalysis."

    ANALYSIS_FAILED_TITLE = "An error occurred"
    CLASSIFICATION_FAILED = "The AI model failed to return a valid analysis for the reviews."
    SUMMARY_FAILED = "The AI model failed to return a valid summary."
    SUGGESTIONS_FAILED = "The AI model failed to return valid suggestions."
    TOPIC_ANALYSIS_FAILED = "The AI model failed to return a valid topic analysis."
    ANSWER_FAILED = "Could not generate an answer. Please try again."
    REPLY_FAILED = "Could not draft a reply. Please try again."
    UNKNOWN_FAILURE = "Failed to analyze the reviews."


# File and Path Constants
class FileConstants:
    """Constants for file operations."""

    SPREADSHEET_EXTENSIONS = (".csv", ".xlsx", ".xls")
    SURVEY_EXTENSIONS = (".json",)
    EXPORT_FILENAME = "guestpulse-analysis.json"
    EXPORT_VERSION = "1.0.0"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # typographic punctuation accepted alongside printable ASCII
    EXTRA_TEXT_CHARS = "‘’“”–—…"
