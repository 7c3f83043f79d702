#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Структурированный профиль (hero/about/tech/experience/projects/contact).

Один и тот же профиль служит источником для индексации (как текст)
и данными для офлайн-ответчика.
"""

import json
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError

from .errors import DataError


class Link(BaseModel):
    label: str
    url: str


class HeroCTA(BaseModel):
    email: str = ""
    links: List[Link] = Field(default_factory=list)


class Hero(BaseModel):
    headline: str = ""
    subline: str = ""
    pills: List[str] = Field(default_factory=list)
    cta: HeroCTA = Field(default_factory=HeroCTA)
    note: str = ""


class About(BaseModel):
    title: str = "About"
    paragraphs: List[str] = Field(default_factory=list)
    focusAreas: List[str] = Field(default_factory=list)


class TechFace(BaseModel):
    title: str
    badge: str = ""
    items: List[str] = Field(default_factory=list)


class ExperienceItem(BaseModel):
    title: str
    when: str = ""
    bullets: List[str] = Field(default_factory=list)


class ProjectItem(BaseModel):
    title: str
    desc: str = ""
    meta: str = ""
    url: Optional[str] = None


class Contact(BaseModel):
    email: str = ""
    links: List[Link] = Field(default_factory=list)


class Profile(BaseModel):
    name: str = ""
    hero: Hero = Field(default_factory=Hero)
    about: About = Field(default_factory=About)
    tech: List[TechFace] = Field(default_factory=list)
    experience: List[ExperienceItem] = Field(default_factory=list)
    projects: List[ProjectItem] = Field(default_factory=list)
    contact: Contact = Field(default_factory=Contact)

    def find_link(self, label: str) -> Optional[Link]:
        """Ищет ссылку по подписи (без учёта регистра) среди ссылок hero."""
        wanted = label.lower()
        for link in self.hero.cta.links:
            if link.label.lower() == wanted:
                return link
        return None

    def to_text(self) -> str:
        """Плоский текст всех разделов профиля: корпус для индексации и поиска по словам."""
        hero, about = self.hero, self.about

        hero_text = "\n".join([hero.headline, hero.subline, " | ".join(hero.pills), hero.note])
        about_text = "{}\n{}\nFocus: {}".format(
            about.title, "\n".join(p for p in about.paragraphs if p), ", ".join(about.focusAreas)
        )
        tech_text = "\n".join(f"{f.title} {f.badge} {' '.join(f.items)}" for f in self.tech)
        exp_text = "\n".join(f"{e.title} {e.when} {' '.join(e.bullets)}" for e in self.experience)
        project_text = "\n".join(f"{p.title} {p.desc} {p.meta} {p.url or ''}" for p in self.projects)
        contact_text = "\n".join(
            [
                f"email: {hero.cta.email}",
                " ".join(f"{l.label}: {l.url}" for l in hero.cta.links),
                " ".join(f"{l.label}: {l.url}" for l in self.contact.links),
            ]
        )
        return "\n\n".join([hero_text, about_text, tech_text, exp_text, project_text, contact_text])


def load_profile(path: str) -> Profile:
    """Читает профиль из JSON-файла.

    Отсутствующий, нечитаемый или невалидный файл даёт DataError.
    """
    p = Path(path)
    if not p.is_file():
        raise DataError(f"Profile not found: {p}")
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
        return Profile.model_validate(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise DataError(f"Profile is unreadable: {p}") from exc
