"""Wiktionary dump reader.

Reads a bzip2 multistream pages-articles dump one page at a time. The
XML side is a small state machine (``transition``) and the wikitext side
is a pure line scanner (``extract_page``); ``read_wiki`` only wires them
to the decompressor and the dictionary.
"""

import bz2
import enum
import logging
import re
from collections import namedtuple
from xml.etree import ElementTree

from .lexicon import WIKI_PRONUNCIATION, IngestError, Meaning, WordClass


logger = logging.getLogger(__name__)


HEAD_TEMPLATES = {
    'en-noun': WordClass.NOUN,
    'en-pron': WordClass.PRONOUN,
    'en-adv': WordClass.ADVERB,
    'en-det': WordClass.DETERMINER,
    'en-con': WordClass.LINKING_WORD,
    'en-verb': WordClass.VERB,
    'en-adj': WordClass.ADJECTIVE,
    'en-prep': WordClass.PREPOSITION,
}


class PageState(enum.Enum):
    NONE = 0
    PAGE = 1
    TITLE = 2
    CONTENT = 3


Page = namedtuple('Page', ['title', 'content'])
EMPTY_PAGE = Page("", "")

Pronunciation = namedtuple('Pronunciation', ['headword', 'name', 'pronunciation'])
MeaningFact = namedtuple('MeaningFact', ['headword', 'word_class', 'meaning'])


class Patterns(object):
    def __init__(self, prefix):
        self.template = re.compile(r"\{\{(.*?)\}\}")
        self.translations_title = re.compile(r"^([^/]+)/translations$")
        self.language = re.compile(r"^==([^=]+)==$")
        # e.g. "* Czech: {{t+|cs|pes|m}}"
        self.prefix = re.compile(rf"^\*.?\s{re.escape(prefix)}:")


def local_name(tag):
    # Dumps use a default namespace: {http://www.mediawiki.org/xml/export-0.10/}page
    return tag.rsplit('}', 1)[-1]


def transition(state, page, event):
    """Advances the page state machine by one XML event.

    An event is a ``(kind, tag, text)`` triple where kind is "start",
    "end" or "text". Returns ``(state, page, emitted)``; emitted is the
    finished Page when a non-namespaced page closes, otherwise None.
    """
    kind, tag, text = event
    tag = local_name(tag) if tag else tag
    if kind == 'start':
        if tag == 'page':
            return PageState.PAGE, EMPTY_PAGE, None
        elif tag == 'title':
            return PageState.TITLE, page._replace(title=""), None
        elif tag == 'text':
            return PageState.CONTENT, page._replace(content=""), None
        return state, page, None
    if kind == 'text' or (kind == 'end' and tag in ('title', 'text')):
        if text:
            if state is PageState.TITLE:
                page = page._replace(title=page.title + text)
            elif state is PageState.CONTENT:
                page = page._replace(content=page.content + text)
        if kind == 'text' or state not in (PageState.TITLE, PageState.CONTENT):
            return state, page, None
        return PageState.PAGE, page, None
    if kind == 'end' and tag == 'page':
        if state is PageState.NONE or ':' in page.title:
            # Talk:, Appendix:, Wiktionary: ... are not articles
            return PageState.NONE, EMPTY_PAGE, None
        return PageState.NONE, EMPTY_PAGE, page
    return state, page, None


def extract_page(page, source_language, patterns):
    facts = []
    headword = page.title.strip()
    match = patterns.translations_title.match(headword)
    if match:
        headword = match[1]

    word_class = WordClass.UNKNOWN
    meaning = Meaning()
    language = ""

    def flush():
        if not meaning.is_empty():
            facts.append(MeaningFact(headword, word_class, Meaning(meaning.description, meaning.translations)))

    for line in page.content.splitlines():
        match = patterns.language.match(line.rstrip())
        if match:
            language = match[1].strip().lower()
        if language and language != 'english':
            # English always comes first; nothing after it is ours
            break

        for template in patterns.template.findall(line):
            parts = template.split('|')
            control = parts[0].strip()
            if control == 'IPA':
                if len(parts) > 1 and parts[1].strip() != source_language:
                    continue
                if language != 'english':
                    continue
                for part in parts[2:]:
                    pronunciation = part.strip()
                    if pronunciation.startswith('/'):
                        facts.append(Pronunciation(headword, WIKI_PRONUNCIATION, pronunciation))
            elif control == 'trans-top':
                flush()
                if len(parts) > 1 and language == 'english':
                    meaning = Meaning(parts[1].strip())
                else:
                    meaning = Meaning()
            elif control == 'trans-bottom':
                flush()
                meaning = Meaning()
            elif control in HEAD_TEMPLATES:
                word_class = HEAD_TEMPLATES[control]
            elif len(parts) > 2 and patterns.prefix.match(line):
                translation = parts[2].strip()
                if translation:
                    meaning.add_translation(translation)

    flush()
    return facts


def apply_facts(dictionary, facts):
    for fact in facts:
        if isinstance(fact, Pronunciation):
            dictionary.add_pronunciation(fact.headword, fact.name, fact.pronunciation)
        else:
            dictionary.add_meaning(fact.headword, fact.word_class, fact.meaning)


def iter_pages(infile):
    state, page = PageState.NONE, EMPTY_PAGE
    root = None
    for kind, elem in ElementTree.iterparse(infile, events=('start', 'end')):
        if root is None:
            root = elem
        text = elem.text if kind == 'end' else None
        state, page, emitted = transition(state, page, (kind, elem.tag, text))
        if kind == 'end' and local_name(elem.tag) == 'page':
            # Finished pages are only reachable from the root; drop them
            root.clear()
        if emitted is not None:
            yield emitted


def read_wiki(dictionary, filename, prefix):
    patterns = Patterns(prefix)
    pages = 0
    facts = 0
    try:
        with bz2.open(filename, 'rb') as infile:
            for page in iter_pages(infile):
                page_facts = extract_page(page, dictionary.source_language, patterns)
                apply_facts(dictionary, page_facts)
                pages += 1
                facts += len(page_facts)
                if pages % 100000 == 0:
                    logger.info("%s: %d pages", filename, pages)
    except (OSError, EOFError, ElementTree.ParseError) as err:
        raise IngestError(f"{filename}: {err}") from err
    logger.info("%s: %d pages, %d facts", filename, pages, facts)
    return pages
