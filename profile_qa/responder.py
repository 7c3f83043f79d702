#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Офлайн-ответчик по правилам над структурированным профилем.

Работает синхронно, без сети и полностью детерминированно. Намерения
проверяются по таблице INTENTS сверху вниз, срабатывает первое совпавшее;
если ничего не совпало, считается пересечение слов вопроса с корпусом профиля.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from .models import ChatReply, QuickAction
from .profile import Profile

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_SPACES = re.compile(r"\s+")

MIN_WORD_LEN = 3
RELATED_SCORE = 3

DEFAULT_QUICK_ACTIONS = (
    QuickAction(label="Summary", message="Summarise your profile"),
    QuickAction(label="Skills", message="What are your skills?"),
    QuickAction(label="Experience", message="Show your experience"),
    QuickAction(label="Projects", message="Show your projects"),
    QuickAction(label="GitHub", message="Share your GitHub"),
)

SUMMARY_QUICK_ACTIONS = (
    # без слова "summary", иначе сообщение снова попадёт в намерение summary
    QuickAction(label="More details", message="Show the detailed version"),
    QuickAction(label="Skills", message="What are your skills?"),
    QuickAction(label="Projects", message="Show your top projects"),
)


def normalize(text: str) -> str:
    """Нижний регистр, всё кроме [a-z0-9] и пробелов заменяется пробелом, пробелы схлопнуты."""
    return _SPACES.sub(" ", _NON_ALNUM.sub(" ", (text or "").lower())).strip()


def score_match(query: str, corpus: str) -> int:
    """Сколько слов вопроса (длиной от 3 символов) встречаются в корпусе как подстроки."""
    q, t = normalize(query), normalize(corpus)
    if not q or not t:
        return 0
    return sum(1 for w in q.split(" ") if len(w) >= MIN_WORD_LEN and w in t)


def contains_any(*needles: str) -> Callable[[str], bool]:
    def predicate(msg: str) -> bool:
        return any(n in msg for n in needles)
    return predicate


def _summary(p: Profile) -> ChatReply:
    first = p.about.paragraphs[0] if p.about.paragraphs else ""
    text = f"{p.hero.headline}\n{p.hero.subline}\n\n{first}".strip()
    return ChatReply(answer=text or "Profile summary is not set yet.", quickActions=list(SUMMARY_QUICK_ACTIONS))


def _detailed(p: Profile) -> ChatReply:
    text = "\n\n".join(x for x in p.about.paragraphs if x).strip()
    fallback = f"{p.hero.headline}\n{p.hero.subline}".strip()
    return ChatReply(answer=text or fallback or "Profile summary is not set yet.")


def _skills(p: Profile) -> ChatReply:
    pills = f"Core: {' | '.join(p.hero.pills)}" if p.hero.pills else ""
    faces = "\n".join(f"{f.title}: {', '.join(f.items[:8])}" for f in p.tech[:6])
    text = "\n\n".join(x for x in (pills, faces) if x).strip()
    return ChatReply(answer=text or "Tech stack info is not set yet.")


def _experience(p: Profile) -> ChatReply:
    top = p.experience[:4]
    if not top:
        return ChatReply(answer="Experience section is not set yet.")
    blocks = []
    for e in top:
        block = f"• {e.title} ({e.when})"
        if e.bullets:
            block += "\n  - " + "\n  - ".join(e.bullets)
        blocks.append(block)
    return ChatReply(answer="\n\n".join(blocks))


def _projects(p: Profile) -> ChatReply:
    top = p.projects[:6]
    if not top:
        return ChatReply(answer="Projects section is not set yet.")
    blocks = ["\n  ".join(x for x in (f"• {pr.title}", pr.desc, pr.url or "") if x) for pr in top]
    return ChatReply(answer="\n\n".join(blocks))


def _link(label: str) -> Callable[[Profile], ChatReply]:
    def handler(p: Profile) -> ChatReply:
        link = p.find_link(label)
        return ChatReply(answer=f"{label}: {link.url}" if link else f"{label} link is not set yet.")
    return handler


def _email(p: Profile) -> ChatReply:
    email = p.hero.cta.email or p.contact.email
    return ChatReply(answer=f"Email: {email}" if email else "Email is not set yet.")


@dataclass(frozen=True)
class Intent:
    name: str
    predicate: Callable[[str], bool]
    handler: Callable[[Profile], ChatReply]


# Порядок строк задаёт приоритет: побеждает первое совпадение.
INTENTS: List[Intent] = [
    Intent("summary", contains_any("summary", "summarise", "summarize", "introduce", "profile", "about you"), _summary),
    Intent("detailed", contains_any("longer", "detailed"), _detailed),
    Intent("skills", contains_any("skill", "stack", "tech", "tools"), _skills),
    Intent("experience", contains_any("experience", "job", "work"), _experience),
    Intent("projects", contains_any("project", "portfolio"), _projects),
    Intent("github", contains_any("github"), _link("GitHub")),
    Intent("linkedin", contains_any("linkedin"), _link("LinkedIn")),
    Intent("email", contains_any("email", "contact"), _email),
]


class RuleBasedResponder:
    """Детерминированный ответчик по таблице намерений; сеть не используется."""

    def __init__(self, profile: Profile, intents: List[Intent] = INTENTS) -> None:
        self.profile = profile
        self.intents = intents
        self._corpus = normalize(profile.to_text())

    def match(self, message: str) -> Optional[Intent]:
        """Первое намерение, предикат которого истинен для нормализованного сообщения, или None."""
        msg = normalize(message)
        for intent in self.intents:
            if intent.predicate(msg):
                return intent
        return None

    def answer(self, message: str) -> ChatReply:
        intent = self.match(message)
        if intent is not None:
            return intent.handler(self.profile)

        if score_match(message, self._corpus) >= RELATED_SCORE:
            return ChatReply(
                answer=(
                    "I found related info in my portfolio. Try asking more specifically, like:\n"
                    "- “Summarise your profile”\n"
                    "- “Show your experience”\n"
                    "- “Show your projects”\n"
                    "- “What is your stack?”"
                ),
                quickActions=list(DEFAULT_QUICK_ACTIONS),
            )
        return ChatReply(
            answer="Ask me about my summary, skills, experience, projects, or contact info. "
                   "Try one of the buttons below.",
            quickActions=list(DEFAULT_QUICK_ACTIONS),
        )
