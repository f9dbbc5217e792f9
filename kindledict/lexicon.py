import enum
import logging

from . import inflect


logger = logging.getLogger(__name__)


# Source name for pronunciations crawled from Wiktionary
WIKI_PRONUNCIATION = 'wiki'


class LexiconError(Exception):
    pass


class ConfigError(LexiconError):
    pass


class IngestError(LexiconError):
    pass


class ExportError(LexiconError):
    pass


class WordClass(enum.Enum):
    # Declaration order is the order sections are rendered in
    VERB = "verb"
    NOUN = "noun"
    ADJECTIVE = "adjective"
    ADVERB = "adverb"
    PREPOSITION = "preposition"
    DETERMINER = "determiner"
    PRONOUN = "pronoun"
    LINKING_WORD = "linking"
    UNKNOWN = "other"

    @property
    def label(self):
        return self.value

    @property
    def rank(self):
        return _WORD_CLASS_ORDER[self]

    def __lt__(self, other):
        if not isinstance(other, WordClass):
            return NotImplemented
        return self.rank < other.rank


_WORD_CLASS_ORDER = {word_class: num for num, word_class in enumerate(WordClass)}


class Meaning(object):
    def __init__(self, description="", translations=(), order=0):
        self.description = description
        self.translations = set(translations)
        self.order = order

    def add_translation(self, translation):
        self.translations.add(translation)

    def is_empty(self):
        return not self.description and not self.translations

    def __eq__(self, other):
        if not isinstance(other, Meaning):
            return NotImplemented
        return (self.description, self.translations, self.order) == \
            (other.description, other.translations, other.order)

    def __repr__(self):
        return f"Meaning({self.description!r}, {sorted(self.translations)!r}, order={self.order})"


class Term(object):
    def __init__(self, headword):
        self.headword = headword
        self.inflections = set()
        # source name -> pronunciations, in the order they were read
        self.pronunciations = {}
        # WordClass -> normalized description -> Meaning
        self.classes = {}

    def is_empty(self):
        if not self.headword:
            return True
        return not self.pronunciations and not self.classes

    def meanings(self, word_class):
        return sorted(self.classes.get(word_class, {}).values(), key=lambda m: m.order)

    def __repr__(self):
        return f"Term({self.headword!r})"


class Dictionary(object):
    def __init__(self, source_language="en", target_language="cs", title="", author=""):
        self.source_language = source_language
        self.target_language = target_language
        self.title = title
        self.author = author
        self.terms = {}
        self.rules = inflect.get_rules(source_language)
        self.irregular_verbs = dict(self.rules.irregular_verbs)

    def _get_or_create(self, headword):
        key = normalize(headword)
        term = self.terms.get(key)
        if term is None:
            term = self.terms[key] = Term(headword)
        return term

    def add_pronunciation(self, headword, name, pronunciation):
        term = self._get_or_create(headword)
        term.pronunciations.setdefault(name, []).append(pronunciation)

    def add_meaning(self, headword, word_class, meaning):
        term = self._get_or_create(headword)
        forms = inflect.inflect(self.source_language, headword, word_class, self.irregular_verbs)
        term.inflections.update(form for form in forms if form != headword)
        meanings = term.classes.setdefault(word_class, {})
        key = normalize(meaning.description)
        existing = meanings.get(key)
        if existing is None:
            # First sighting fixes the rank; later merges keep it
            existing = meanings[key] = Meaning(meaning.description, order=len(meanings))
        existing.translations.update(meaning.translations)

    def lookup(self, word):
        return self.terms.get(normalize(word))

    def reversed(self):
        result = Dictionary(
            self.target_language,
            self.source_language,
            f"{self.title} (reversed)" if self.title else "",
            self.author,
        )
        for term in self:
            for word_class in sorted(term.classes):
                for meaning in term.meanings(word_class):
                    for translation in sorted(meaning.translations):
                        if translation:
                            result.add_meaning(translation, word_class, Meaning(translations=[term.headword]))
        logger.debug("reversed %d terms into %d", len(self), len(result))
        return result

    def __len__(self):
        return len(self.terms)

    def __iter__(self):
        return iter(self.terms.values())

    def __contains__(self, word):
        return normalize(word) in self.terms


def normalize(text):
    return text.lower()
