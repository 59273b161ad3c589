"""Built-in demo dashboard, produced without any LLM call."""

from typing import List

from ..core.aggregation import build_detailed_analysis, overall_rating, sentiment_trend
from ..core.models import (
    DashboardState,
    Review,
    Sentiment,
    Topic,
    TopicAnalysis,
    TopicSuggestionGroup,
)

_MOCK_ROWS = [
    ("The room was sparkling clean and the bed was incredibly comfortable. I slept like a baby!", Sentiment.BEST, Topic.OTHER, 5, "Jan"),
    ("Check-in was a bit slow, but the staff was friendly. The breakfast buffet had a great selection.", Sentiment.GOOD, Topic.MANAGEMENT_SERVICE, 4, "Feb"),
    ("Our reservation was mixed up and we had to wait for an hour to get our room. Very frustrating start to our vacation.", Sentiment.BAD, Topic.RESERVATION, 1, "Mar"),
    ("Absolutely loved the food at the restaurant! The pasta was divine. Service was a little slow, but the food made up for it.", Sentiment.BEST, Topic.FOOD, 5, "Apr"),
    ("The Wi-Fi was terrible. I could barely get a signal in my room, which was a huge problem for my work meetings.", Sentiment.BAD, Topic.OTHER, 1, "May"),
    ("I was overcharged for the minibar. It took two phone calls to get it sorted out. A hassle I didn't need.", Sentiment.BAD, Topic.PAYMENT, 1, "Jun"),
    ("The location is perfect, right in the heart of the city. The room was a bit small, but it was clean and had a great view.", Sentiment.GOOD, Topic.OTHER, 4, "Jul"),
    ("Management was very unresponsive to my complaint about the noisy neighbors. I barely got any sleep.", Sentiment.BAD, Topic.MANAGEMENT_SERVICE, 1, "Aug"),
    ("A truly 5-star experience! From the moment we arrived, the service was impeccable. The concierge gave us fantastic recommendations.", Sentiment.BEST, Topic.MANAGEMENT_SERVICE, 5, "Sep"),
    ("The payment process was seamless. I paid with my card and got the receipt emailed to me instantly. Very efficient.", Sentiment.BEST, Topic.PAYMENT, 5, "Oct"),
    ("The food was cold and tasteless. A real disappointment for such an expensive hotel.", Sentiment.BAD, Topic.FOOD, 1, "Nov"),
    ("Our booking was for a sea-view room, but we were given a room facing a brick wall. The front desk was not helpful.", Sentiment.FARE, Topic.RESERVATION, 2.5, "Dec"),
    ("The staff at the front desk were incredibly rude and unhelpful. They acted like I was bothering them.", Sentiment.BAD, Topic.MANAGEMENT_SERVICE, 1, "Jan"),
    ("I had an issue with my booking and the management team resolved it quickly and professionally. I was very impressed.", Sentiment.BEST, Topic.MANAGEMENT_SERVICE, 5, "Feb"),
    ("The checkout process was a nightmare. They tried to charge me for things I never used. Be sure to check your bill carefully.", Sentiment.BAD, Topic.PAYMENT, 1, "Mar"),
]


def mock_reviews() -> List[Review]:
    return [
        Review(id=i, text=text, month=month, rating=float(rating), sentiment=sentiment, topic=topic)
        for i, (text, sentiment, topic, rating, month) in enumerate(_MOCK_ROWS)
    ]


def mock_dashboard() -> DashboardState:
    """A complete 15-review dashboard for trying the UI offline."""
    reviews = mock_reviews()

    analyses = {
        topic: TopicAnalysis(
            topic=topic,
            positive_summary=f"Positive feedback on {topic.value}.",
            negative_summary=f"Negative feedback on {topic.value}.",
            suggestions=[f"Address {topic.value} issues promptly."],
        )
        for topic in {r.topic for r in reviews}
    }

    return DashboardState(
        reviews=reviews,
        consolidated_review=(
            "Overall, feedback is mixed. While many guests praise the food and service, significant "
            "issues with reservations, billing, and Wi-Fi detract from the experience."
        ),
        key_positives=(
            "- Delicious food, especially the pasta\n- Friendly and professional staff\n"
            "- Seamless payment process\n- Excellent location"
        ),
        suggestions=[
            TopicSuggestionGroup(Topic.RESERVATION, ["Improve reservation system to avoid mix-ups.",
                                                     "Ensure early check-in confirmations are honored."]),
            TopicSuggestionGroup(Topic.PAYMENT, ["Double-check bills for accuracy before presenting to guests."]),
            TopicSuggestionGroup(Topic.OTHER, ["Upgrade Wi-Fi infrastructure for better coverage and speed."]),
            TopicSuggestionGroup(Topic.MANAGEMENT_SERVICE, ["Improve responsiveness to guest complaints, "
                                                            "particularly regarding noise."]),
        ],
        overall_rating=overall_rating(reviews),
        sentiment_trend=sentiment_trend(reviews),
        detailed_analysis=build_detailed_analysis(reviews, analyses),
    )
