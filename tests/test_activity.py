"""Activity score and segment derivation."""
import pytest

from pinboard.models.user import UserDocument, UserSegment, compute_activity


def test_reference_profile_is_creator():
    assert compute_activity(100, 50, 10, 30) == (51.0, UserSegment.CREATOR)


def test_new_user_is_casual():
    assert compute_activity(0, 0, 0, 0) == (0.0, UserSegment.CASUAL)


@pytest.mark.parametrize(
    "comments, expected",
    [
        (100, UserSegment.CASUAL),      # 20.0
        (101, UserSegment.POWER),       # 20.2
        (250, UserSegment.POWER),       # 50.0
        (251, UserSegment.CREATOR),     # 50.2
        (400, UserSegment.CREATOR),     # 80.0
        (401, UserSegment.INFLUENCER),  # 80.2
    ],
)
def test_thresholds_are_strict(comments, expected):
    _, segment = compute_activity(0, comments, 0, 0)
    assert segment == expected


def test_score_is_rounded_to_two_places():
    score, _ = compute_activity(1, 1, 1, 1)
    assert score == 1.0
    score, _ = compute_activity(3, 0, 0, 0)
    assert score == 0.9


def test_document_recompute_stores_plain_values():
    user = UserDocument(
        username="ada",
        email="ada@example.com",
        hashed_password="x",
        total_pins=100,
        total_comments=50,
        total_boards=10,
        followers=[f"{i:024x}" for i in range(30)],
    )
    user.recompute_activity()

    data = user.to_insert()
    assert data["activity_score"] == 51.0
    assert data["segment"] == "creator"
    assert data["settings"]["grid_size"] == "medium"
