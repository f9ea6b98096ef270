# cv_intake/services/entity_tagger.py
"""
Optional entity tagging used by the field inference engine.

Two taggers are available: a spaCy pipeline (statistical NER for people plus an
entity ruler carrying education/skill/project vocabularies) and an NLTK
named-entity chunker that only reports people.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol

import nltk
import spacy
from nltk.tokenize import word_tokenize

from cv_intake.constants import CATEGORY_TERMS, PERSON_LABEL

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaggedSpan:
    text: str
    label: str
    start: int  # character offset into the tagged text


class EntityTagger(Protocol):
    def tag(self, text: str) -> List[TaggedSpan]: ...


class SpacyEntityTagger:
    def __init__(
        self,
        model_name: str = "en_core_web_sm",
        category_terms: Optional[Dict[str, List[str]]] = None,
    ):
        try:
            self.nlp = spacy.load(model_name)
        except OSError:
            logger.warning(
                f"spaCy model '{model_name}' is not installed; "
                "falling back to a blank English pipeline (no PERSON entities)."
            )
            self.nlp = spacy.blank("en")

        ruler_options = {"config": {"phrase_matcher_attr": "LOWER"}}
        if "ner" in self.nlp.pipe_names:
            ruler_options["before"] = "ner"
        ruler = self.nlp.add_pipe("entity_ruler", **ruler_options)

        terms = CATEGORY_TERMS if category_terms is None else category_terms
        ruler.add_patterns(
            [
                {"label": label, "pattern": term}
                for label, label_terms in terms.items()
                for term in label_terms
            ]
        )

    def tag(self, text: str) -> List[TaggedSpan]:
        doc = self.nlp(text)
        return [TaggedSpan(ent.text, ent.label_, ent.start_char) for ent in doc.ents]


# (resource path, package id). Newer NLTK releases ship the *_tab / *_eng variants.
_NLTK_PACKAGES = [
    ("tokenizers/punkt", "punkt"),
    ("tokenizers/punkt_tab", "punkt_tab"),
    ("taggers/averaged_perceptron_tagger", "averaged_perceptron_tagger"),
    ("taggers/averaged_perceptron_tagger_eng", "averaged_perceptron_tagger_eng"),
    ("chunkers/maxent_ne_chunker", "maxent_ne_chunker"),
    ("chunkers/maxent_ne_chunker_tab", "maxent_ne_chunker_tab"),
    ("corpora/words", "words"),
]


def ensure_nltk_resources() -> None:
    for path, package_id in _NLTK_PACKAGES:
        try:
            nltk.data.find(path)
        except LookupError:
            logger.info(f"NLTK package '{package_id}' not found. Downloading...")
            if not nltk.download(package_id, quiet=True):
                logger.warning(f"Could not download NLTK package '{package_id}'.")


class NltkEntityTagger:
    def __init__(self, download: bool = True):
        if download:
            ensure_nltk_resources()

    def tag(self, text: str) -> List[TaggedSpan]:
        if not text.strip():
            return []
        tokens = word_tokenize(text)

        # word_tokenize drops whitespace, so recover each token's offset.
        offsets = []
        cursor = 0
        for token in tokens:
            index = text.find(token, cursor)
            if index < 0:
                offsets.append(cursor)
                continue
            offsets.append(index)
            cursor = index + len(token)

        spans: List[TaggedSpan] = []
        position = 0
        for node in nltk.ne_chunk(nltk.pos_tag(tokens)):
            if not isinstance(node, nltk.Tree):
                position += 1
                continue
            width = len(node.leaves())
            if node.label() == PERSON_LABEL:
                start = offsets[position]
                last = position + width - 1
                end = offsets[last] + len(tokens[last])
                spans.append(TaggedSpan(text[start:end], PERSON_LABEL, start))
            position += width
        return spans


def build_entity_tagger(kind: str, model_name: str = "en_core_web_sm") -> Optional[EntityTagger]:
    kind = (kind or "none").strip().lower()
    if kind == "spacy":
        return SpacyEntityTagger(model_name)
    if kind == "nltk":
        return NltkEntityTagger()
    if kind == "none":
        return None
    raise ValueError(f"Unknown entity tagger '{kind}'. Use 'spacy', 'nltk' or 'none'.")
