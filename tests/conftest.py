"""Pytest configuration and fixtures."""

import bz2

import pytest

from kindledict.lexicon import Dictionary, Meaning, WordClass


WIKI_PAGES = [
    ("dog", """==English==
===Pronunciation===
* {{IPA|en|/dɒɡ/|/dɔɡ/}}
===Noun===
{{en-noun}}
# A mammal.
====Translations====
{{trans-top|animal}}
* Czech: {{t+|cs|pes|m}}
* German: {{t+|de|Hund|m}}
{{trans-bottom}}
===Verb===
{{en-verb}}
{{trans-top|to follow}}
* Czech: {{t|cs|sledovat}}
{{trans-bottom}}

==French==
{{trans-top|chien}}
* Czech: {{t|cs|francouzský pes}}
{{trans-bottom}}
"""),
    ("Talk:dog", """==English==
{{en-noun}}
{{trans-top|talk}}
* Czech: {{t|cs|diskuse}}
{{trans-bottom}}
"""),
    ("cat/translations", """==English==
{{en-noun}}
{{trans-top|feline}}
* Czech: {{t+|cs|kočka|f}}
{{trans-bottom}}
"""),
]


def make_dump(pages):
    text = '<mediawiki xmlns="http://www.mediawiki.org/xml/export-0.10/">\n'
    text += "<siteinfo><sitename>Wiktionary</sitename></siteinfo>\n"
    for title, content in pages:
        content = content.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        text += f"<page><title>{title}</title><ns>0</ns>"
        text += f'<revision><text xml:space="preserve">{content}</text></revision></page>\n'
    text += "</mediawiki>\n"
    return text


def write_multistream(path, text, parts=3):
    # Wikimedia dumps are several bzip2 streams concatenated
    data = text.encode("utf-8")
    size = len(data) // parts + 1
    with open(path, "wb") as outfile:
        for start in range(0, len(data), size):
            outfile.write(bz2.compress(data[start:start + size]))
    return path


@pytest.fixture
def wiki_dump(tmp_path):
    return write_multistream(tmp_path / "enwiktionary.xml.bz2", make_dump(WIKI_PAGES))


@pytest.fixture
def bilingual_file(tmp_path):
    path = tmp_path / "en-cs.txt"
    path.write_text(
        "# GNU/FDL English-Czech dictionary\n"
        "dog\tpes\tn:\t\n"
        "dog\tpsisko\tn:\t\n"
        "run\tběžet\tv:\t\n"
        "quickly\trychle\tadv:\t\n"
        "short\tkrátký\n"
        "lonely\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def pronunciation_file(tmp_path):
    path = tmp_path / "ipa.txt"
    path.write_text(
        "dog\t/dɒɡ/, /dɔːɡ/\n"
        "cat\t/kæt/\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def sample_dictionary():
    dictionary = Dictionary("en", "cs", "English-Czech", "Tester")
    dictionary.add_meaning("dog", WordClass.NOUN, Meaning("animal", ["pes"]))
    dictionary.add_meaning("dog", WordClass.VERB, Meaning("to follow", ["sledovat"]))
    dictionary.add_pronunciation("dog", "wiki", "/dɒɡ/")
    dictionary.add_meaning("cat", WordClass.NOUN, Meaning(translations=["kočka"]))
    return dictionary
