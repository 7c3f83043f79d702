"""Тесты офлайн-ответчика по правилам."""

import pytest
from pydantic import ValidationError

from profile_qa.profile import Profile, load_profile
from profile_qa.responder import (
    DEFAULT_QUICK_ACTIONS,
    INTENTS,
    RuleBasedResponder,
    normalize,
    score_match,
)


@pytest.fixture
def responder(profile: Profile) -> RuleBasedResponder:
    return RuleBasedResponder(profile)


def test_normalize() -> None:
    assert normalize("  What's   YOUR Stack?! ") == "what s your stack"


def test_intent_table_order_is_explicit() -> None:
    assert [i.name for i in INTENTS] == [
        "summary", "detailed", "skills", "experience", "projects", "github", "linkedin", "email",
    ]


def test_first_match_wins(responder) -> None:
    # "profile" (summary) стоит раньше "project"
    assert responder.match("profile and projects").name == "summary"
    assert responder.match("detailed skills").name == "detailed"


def test_summary_has_headline_first_paragraph_and_quick_actions(responder) -> None:
    reply = responder.answer("Please introduce yourself")
    assert reply.answer == "Backend Developer\nBuilds APIs.\n\nFirst paragraph."
    assert [a.label for a in reply.quickActions] == ["More details", "Skills", "Projects"]


def test_more_details_quick_action_reaches_detailed_intent(responder) -> None:
    summary = responder.answer("summary")
    more = summary.quickActions[0].message
    reply = responder.answer(more)
    assert reply.answer == "First paragraph.\n\nSecond paragraph.\n\nThird paragraph."


def test_skills_limits_faces_and_items(responder) -> None:
    reply = responder.answer("What is your stack?")
    core, faces = reply.answer.split("\n\n")
    assert core == "Core: Python • FastAPI | Testing"
    lines = faces.split("\n")
    assert len(lines) == 6
    assert lines[0] == "Face0: " + ", ".join(f"item0_{j}" for j in range(8))


def test_stack_answer_is_deterministic(responder) -> None:
    assert responder.answer("What is your stack?") == responder.answer("What is your stack?")


def test_experience_lists_four_most_recent_in_order(responder) -> None:
    reply = responder.answer("Show your experience")
    blocks = reply.answer.split("\n\n")
    assert len(blocks) == 4
    assert blocks[0] == "• Role 0 (2010)\n  - Did thing 0a\n  - Did thing 0b"
    assert [b.split(" (")[0] for b in blocks] == ["• Role 0", "• Role 1", "• Role 2", "• Role 3"]


def test_projects_list_six_with_url_when_present(responder) -> None:
    reply = responder.answer("project")
    blocks = reply.answer.split("\n\n")
    assert len(blocks) == 6
    assert blocks[0] == "• Project 0\n  Description 0\n  https://example.com/p0"
    assert blocks[1] == "• Project 1\n  Description 1"


def test_github_and_missing_linkedin(responder) -> None:
    assert responder.answer("github?").answer == "GitHub: https://github.com/test-person"
    assert responder.answer("LinkedIn please").answer == "LinkedIn link is not set yet."


def test_email_only(responder) -> None:
    assert responder.answer("How can I contact you?").answer == "Email: test@example.com"


def test_fallback_related_when_three_words_match(responder) -> None:
    reply = responder.answer("fastapi apis search")
    assert score_match("fastapi apis search", responder.profile.to_text()) >= 3
    assert reply.answer.startswith("I found related info in my portfolio.")
    assert reply.quickActions == list(DEFAULT_QUICK_ACTIONS)


def test_fallback_help_when_nothing_matches(responder) -> None:
    reply = responder.answer("zebra quantum")
    assert reply.answer.startswith("Ask me about my summary")
    assert [a.label for a in reply.quickActions] == ["Summary", "Skills", "Experience", "Projects", "GitHub"]


def test_empty_sections_still_give_non_empty_answers() -> None:
    responder = RuleBasedResponder(Profile())
    assert responder.answer("experience").answer == "Experience section is not set yet."
    assert responder.answer("projects").answer == "Projects section is not set yet."
    assert responder.answer("skills").answer == "Tech stack info is not set yet."
    assert responder.answer("email").answer == "Email is not set yet."
    assert responder.answer("summary").answer


def test_bundled_profile_loads() -> None:
    from profile_qa.config import IndexingConfig

    profile = load_profile(IndexingConfig().profile_path)
    reply = RuleBasedResponder(profile).answer("Show your experience")
    assert reply.answer.count("• ") == 4


def test_mutating_a_reply_does_not_leak_into_later_replies(responder) -> None:
    first = responder.answer("zebra quantum")
    first.quickActions.append(first.quickActions[0])
    with pytest.raises(ValidationError):
        first.quickActions[0].label = "Hacked"

    second = responder.answer("zebra quantum")
    assert [a.label for a in second.quickActions] == ["Summary", "Skills", "Experience", "Projects", "GitHub"]

    summary = responder.answer("Summarise your profile")
    summary.quickActions.clear()
    assert [a.label for a in responder.answer("Summarise your profile").quickActions] == [
        "More details", "Skills", "Projects",
    ]
