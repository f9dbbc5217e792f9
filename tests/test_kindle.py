"""Tests for the Kindle exporter."""

import re

import pytest

from kindledict import kindle
from kindledict.lexicon import Dictionary, ExportError, Meaning, Term, WordClass


def read(path):
    return path.read_text(encoding="utf-8")


def entries(text):
    return re.findall(r"<idx:entry .*?</idx:entry>", text, re.DOTALL)


class TestOutputDirectory:
    """Tests for output path handling."""

    def test_creates_directory(self, tmp_path, sample_dictionary):
        output = tmp_path / "out" / "dict"
        ids = kindle.to_kindle(sample_dictionary, str(output))
        assert ids == ["content0001"]
        assert (output / "content0001.xhtml").is_file()
        assert (output / "content.opf").is_file()

    def test_existing_file(self, tmp_path, sample_dictionary):
        output = tmp_path / "dict"
        output.write_text("occupied")
        with pytest.raises(ExportError, match="is a file"):
            kindle.to_kindle(sample_dictionary, str(output), force=True)
        assert read(output) == "occupied"

    def test_existing_directory_needs_force(self, tmp_path, sample_dictionary):
        with pytest.raises(ExportError, match="use -f"):
            kindle.to_kindle(sample_dictionary, str(tmp_path))
        assert list(tmp_path.iterdir()) == []

    def test_existing_directory_with_force(self, tmp_path, sample_dictionary):
        assert kindle.to_kindle(sample_dictionary, str(tmp_path), force=True) == ["content0001"]


class TestBatching:
    """Tests for splitting entries across content files."""

    def test_30001_terms(self, tmp_path):
        dictionary = Dictionary()
        for num in range(30001):
            dictionary.add_pronunciation(f"word{num}", "ipa", "/w/")
        ids = kindle.to_kindle(dictionary, str(tmp_path / "dict"))
        assert ids == ["content0001", "content0002"]
        assert len(entries(read(tmp_path / "dict" / "content0001.xhtml"))) == 30000
        last = entries(read(tmp_path / "dict" / "content0002.xhtml"))
        assert len(last) == 1
        assert "word30000" in last[0]
        opf = read(tmp_path / "dict" / "content.opf")
        assert re.findall(r'<item id="(content\d+)"', opf) == ids
        assert re.findall(r'<itemref idref="(content\d+)"', opf) == ids
        assert not (tmp_path / "dict" / "content0003.xhtml").exists()

    def test_empty_terms_take_no_slot(self, tmp_path):
        dictionary = Dictionary()
        dictionary.add_pronunciation("a", "ipa", "/a/")
        dictionary.terms["ghost"] = Term("ghost")
        dictionary.add_pronunciation("", "ipa", "/x/")
        dictionary.add_pronunciation("b", "ipa", "/b/")
        ids = kindle.to_kindle(dictionary, str(tmp_path / "dict"), batch_size=2)
        assert ids == ["content0001"]
        text = read(tmp_path / "dict" / "content0001.xhtml")
        assert len(entries(text)) == 2
        assert "ghost" not in text

    def test_batches_keep_dictionary_order(self):
        dictionary = Dictionary()
        for word in ("c", "a", "b"):
            dictionary.add_pronunciation(word, "ipa", "/x/")
        batches = list(kindle.batches(dictionary, 2))
        assert [[term.headword for term in batch] for batch in batches] == [["c", "a"], ["b"]]

    def test_empty_dictionary(self, tmp_path):
        ids = kindle.to_kindle(Dictionary(), str(tmp_path / "dict"))
        assert ids == []
        assert "<itemref" not in read(tmp_path / "dict" / "content.opf")


class TestFormatTerm:
    """Tests for entry rendering."""

    def test_headword_and_inflections(self):
        dictionary = Dictionary()
        dictionary.add_meaning("stop", WordClass.VERB, Meaning(translations=["zastavit"]))
        text = kindle.format_term(dictionary.lookup("stop"))
        assert "<b><idx:orth>stop<idx:infl>" in text
        assert text.index('value="stopped"') < text.index('value="stopping"') < text.index('value="stops"')

    def test_no_inflection_block_without_inflections(self):
        dictionary = Dictionary()
        dictionary.add_pronunciation("the", "ipa", "/ðə/")
        assert "<idx:infl>" not in kindle.format_term(dictionary.lookup("the"))

    def test_wiki_pronunciation_suppressed(self):
        dictionary = Dictionary()
        dictionary.add_pronunciation("dog", "wiki", "/dɒɡ/")
        dictionary.add_pronunciation("dog", "ipa", "/dɔːɡ/")
        text = kindle.format_pronunciations(dictionary.lookup("dog"))
        assert text == "<i>ipa</i>: /dɔːɡ/<br />\n"

    def test_wiki_pronunciation_alone(self):
        dictionary = Dictionary()
        dictionary.add_pronunciation("dog", "wiki", "/dɒɡ/")
        dictionary.add_pronunciation("dog", "wiki", "/dɔɡ/")
        assert kindle.format_pronunciations(dictionary.lookup("dog")) == "/dɒɡ/, /dɔɡ/<br />\n"

    def test_pronunciation_sources_sorted(self):
        dictionary = Dictionary()
        dictionary.add_pronunciation("dog", "us", "/dɔɡ/")
        dictionary.add_pronunciation("dog", "uk", "/dɒɡ/")
        text = kindle.format_pronunciations(dictionary.lookup("dog"))
        assert text.index("uk") < text.index("us")

    def test_classes_and_meanings(self):
        dictionary = Dictionary()
        dictionary.add_meaning("dog", WordClass.NOUN, Meaning("person", ["chlap"]))
        dictionary.add_meaning("dog", WordClass.NOUN, Meaning("animal", ["pes", "chlap"]))
        dictionary.add_meaning("dog", WordClass.VERB, Meaning("to follow", ["sledovat"]))
        text = kindle.format_classes(dictionary.lookup("dog"))
        assert text.index("verb") < text.index("noun")
        assert "<li>chlap | pes</li>" in text
        assert text.index("<li>person</li>") < text.index("<li>animal</li>")

    def test_class_with_only_empty_meanings_is_skipped(self):
        term = Term("dog")
        term.classes[WordClass.NOUN] = {"": Meaning()}
        term.classes[WordClass.VERB] = {}
        assert kindle.format_classes(term) == ""

    def test_escaping(self):
        dictionary = Dictionary()
        dictionary.add_meaning("R&D", WordClass.NOUN, Meaning("<research> & \"development\"", ["výzkum 'a' vývoj"]))
        dictionary.add_pronunciation("R&D", "a<b", "/ɑːr ənd diː/")
        text = kindle.format_term(dictionary.lookup("R&D"))
        assert "R&amp;D" in text
        assert "&lt;research&gt; &amp; &quot;development&quot;" in text
        assert "výzkum &#x27;a&#x27; vývoj" in text
        assert "<i>a&lt;b</i>" in text
        assert "<research>" not in text
        assert "&amp;amp;" not in text


class TestOpf:
    """Tests for the package manifest."""

    def test_metadata(self, tmp_path):
        dictionary = Dictionary("en", "cs", "Dogs & Cats", "A <B>")
        dictionary.add_pronunciation("dog", "ipa", "/dɒɡ/")
        kindle.to_kindle(dictionary, str(tmp_path / "dict"))
        opf = read(tmp_path / "dict" / "content.opf")
        assert "<dc:title>Dogs &amp; Cats</dc:title>" in opf
        assert "<dc:creator opf:role=\"aut\">A &lt;B&gt;</dc:creator>" in opf
        assert "<DictionaryInLanguage>en</DictionaryInLanguage>" in opf
        assert "<DictionaryOutLanguage>cs</DictionaryOutLanguage>" in opf
        assert '<item id="content0001" href="content0001.xhtml"' in opf
