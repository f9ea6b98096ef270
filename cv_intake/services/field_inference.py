# cv_intake/services/field_inference.py
"""
Heuristic field inference over plain résumé text.

Personal details come from labeled lines first ("Name:", "Email:", "Phone:"),
then from free-text patterns. Sections (education, skills, projects) come from
entity tags when a tagger is configured, otherwise from scanning the text for
section headers.
"""
import logging
import re
from typing import Any, Callable, Dict, List, Optional

from cv_intake.constants import (
    PERSON_LABEL,
    SECTION_ENTITY_LABELS,
    SECTION_HEADERS,
    SECTION_KINDS,
    EDUCATION,
    SKILLS,
    PROJECTS,
)
from cv_intake.models import ExtractedResume, PersonalInfo
from cv_intake.services.entity_tagger import EntityTagger, TaggedSpan
from cv_intake.utils import coerce_text, dedupe_preserving_order, non_empty_lines

logger = logging.getLogger(__name__)

NameResolver = Callable[[str], str]

# --- Regex Patterns ---
NAME_LABEL_PATTERN = re.compile(
    r"^[ \t]*name\b[ \t]*([:\-])?[ \t]*(.*)$", re.IGNORECASE | re.MULTILINE
)
CAPITALIZED_NAME_PATTERN = re.compile(r"\b[A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)+\b")

EMAIL_LABEL_PATTERN = re.compile(
    r"^[ \t]*e-?mail(?:[ \t]+address)?\b[ \t]*[:\-]?[ \t]*(.*)$",
    re.IGNORECASE | re.MULTILINE,
)
EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")

PHONE_LABEL_PATTERN = re.compile(
    r"^[ \t]*(?:phone|contact)(?:[ \t]+number)?\b[ \t]*[:\-]?[ \t]*(.*)$",
    re.IGNORECASE | re.MULTILINE,
)
# Optional +country code, optional (area) code, then 3 and 4 digit groups.
PHONE_PATTERN = re.compile(
    r"(?<![\w+])(?:\+\d{1,3}[ .\-]?)?(?:\(\d{2,4}\)|\d{2,4})?[ .\-]?\d{3}[ .\-]\d{4}(?!\d)"
)
# Separator between a header and inline content, e.g. "Skills: Python".
HEADER_SEPARATOR_PATTERN = re.compile(r"[ \t]*[:\-]")
# A labeled value only has to look like digits and phone punctuation.
LABELED_PHONE_VALUE_PATTERN = re.compile(r"\+?\(?\d[\d \t().\-]{5,}\d")


def _header_alternation(headers: List[str]) -> str:
    ordered = sorted(headers, key=len, reverse=True)
    return "|".join(re.escape(h).replace(r"\ ", r"[ \t]+") for h in ordered)


def _header_word_pattern(headers: List[str]) -> re.Pattern:
    return re.compile(rf"\b(?:{_header_alternation(headers)})\b", re.IGNORECASE)


# --- Name Resolvers ---
def name_from_label(text: str) -> str:
    for match in NAME_LABEL_PATTERN.finditer(text):
        value = match.group(2).strip()
        # Without ":" or "-" only a capitalized name counts ("Name of employer" does not).
        if match.group(1) is None and not CAPITALIZED_NAME_PATTERN.fullmatch(value):
            continue
        if value:
            return value
    return ""


def name_from_capitalized_words(text: str) -> str:
    match = CAPITALIZED_NAME_PATTERN.search(text)
    return match.group(0).strip() if match else ""


def name_from_first_line(text: str) -> str:
    lines = non_empty_lines(text)
    return lines[0] if lines else ""


def name_from_person_entities(spans: List[TaggedSpan]) -> NameResolver:
    def resolve(text: str) -> str:
        for span in spans:
            if span.label == PERSON_LABEL and span.text.strip():
                return span.text.strip()
        return ""

    return resolve


# --- Contact Fields ---
def extract_email(text: Any) -> str:
    text = coerce_text(text)
    for match in EMAIL_LABEL_PATTERN.finditer(text):
        address = EMAIL_PATTERN.search(match.group(1))
        if address:
            return address.group(0)
    address = EMAIL_PATTERN.search(text)
    return address.group(0) if address else ""


def extract_phone(text: Any) -> str:
    text = coerce_text(text)
    for match in PHONE_LABEL_PATTERN.finditer(text):
        value = LABELED_PHONE_VALUE_PATTERN.search(match.group(1))
        if value:
            return value.group(0).strip()
    number = PHONE_PATTERN.search(text)
    return number.group(0).strip() if number else ""


class FieldInferenceEngine:
    """
    Pure function of text plus the strategy chosen at construction time:
    an optional entity tagger, the section header vocabularies and the
    ordered name resolvers.
    """

    def __init__(
        self,
        tagger: Optional[EntityTagger] = None,
        vocabularies: Optional[Dict[str, List[str]]] = None,
        name_resolvers: Optional[List[NameResolver]] = None,
    ):
        self.tagger = tagger
        self.vocabularies = {**SECTION_HEADERS, **(vocabularies or {})}
        self._name_resolvers = name_resolvers

        all_headers = [h for headers in self.vocabularies.values() for h in headers]
        self._any_header_word = _header_word_pattern(all_headers)
        self._header_words = {
            kind: _header_word_pattern(headers)
            for kind, headers in self.vocabularies.items()
        }

    # --- Public API ---
    def infer(self, text: Any) -> ExtractedResume:
        text = coerce_text(text)
        spans = self._tag(text)
        return ExtractedResume(
            personal_info=self._personal_info(text, spans),
            education=self._section(text, EDUCATION, spans),
            skills=self._section(text, SKILLS, spans),
            projects=self._section(text, PROJECTS, spans),
        )

    def infer_personal_info(self, text: Any) -> PersonalInfo:
        text = coerce_text(text)
        return self._personal_info(text, self._tag(text))

    def infer_section(self, text: Any, kind: str) -> List[str]:
        if kind not in SECTION_KINDS:
            raise ValueError(
                f"Unknown section kind '{kind}'. Expected one of {', '.join(SECTION_KINDS)}."
            )
        text = coerce_text(text)
        return self._section(text, kind, self._tag(text))

    def name_resolvers(self, spans: List[TaggedSpan]) -> List[NameResolver]:
        if self._name_resolvers is not None:
            return list(self._name_resolvers)
        return [
            name_from_label,
            name_from_capitalized_words,
            name_from_person_entities(spans),
            name_from_first_line,
        ]

    # --- Internals ---
    def _tag(self, text: str) -> List[TaggedSpan]:
        if self.tagger is None or not text.strip():
            return []
        try:
            return list(self.tagger.tag(text))
        except Exception as e:
            logger.warning(f"Entity tagging failed, continuing without tags: {e}")
            return []

    def _personal_info(self, text: str, spans: List[TaggedSpan]) -> PersonalInfo:
        name = ""
        for resolver in self.name_resolvers(spans):
            name = resolver(text)
            if name:
                break
        return PersonalInfo(name=name, email=extract_email(text), phone=extract_phone(text))

    def _section(self, text: str, kind: str, spans: List[TaggedSpan]) -> List[str]:
        if self.tagger is not None:
            tagged = self._tagged_section(text, kind, spans)
            if tagged:
                return tagged
        return self._section_by_headers(text, kind)

    def _tagged_section(self, text: str, kind: str, spans: List[TaggedSpan]) -> List[str]:
        label = SECTION_ENTITY_LABELS[kind]
        found = [(span.start, span.text.strip()) for span in spans if span.label == label]
        found += [(m.start(), m.group(0)) for m in self._header_words[kind].finditer(text)]
        found.sort(key=lambda item: item[0])
        return dedupe_preserving_order(value for _, value in found if value)

    def _section_by_headers(self, text: str, kind: str) -> List[str]:
        header = self._header_words[kind].search(text)
        if not header:
            return []
        start = header.end()
        separator = HEADER_SEPARATOR_PATTERN.match(text, start)
        if separator:
            start = separator.end()
        terminator = self._any_header_word.search(text, start)
        end = terminator.start() if terminator else len(text)
        return non_empty_lines(text[start:end])
