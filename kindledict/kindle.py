"""Kindle (mobipocket) dictionary export.

Writes contentNNNN.xhtml documents holding the index entries plus a
content.opf package file listing them; kindlegen turns the directory into
a .mobi dictionary. Output is written in place: if writing fails part way
through, the partially written directory is left behind.
"""

import html
import logging
import os

from .lexicon import WIKI_PRONUNCIATION, ExportError


logger = logging.getLogger(__name__)


# Keeps each document within kindlegen's per-file size limits
BATCH_SIZE = 30000

OPF_FILENAME = 'content.opf'

CONTENT_HEADER = """<html xmlns:math="http://exslt.org/math" xmlns:svg="http://www.w3.org/2000/svg"
    xmlns:tl="https://kindlegen.s3.amazonaws.com/AmazonKindlePublishingGuidelines.pdf" xmlns:saxon="http://saxon.sf.net/"
    xmlns:xs="http://www.w3.org/2001/XMLSchema" xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
    xmlns:cx="https://kindlegen.s3.amazonaws.com/AmazonKindlePublishingGuidelines.pdf"
    xmlns:dc="http://purl.org/dc/elements/1.1/"
    xmlns:mbp="https://kindlegen.s3.amazonaws.com/AmazonKindlePublishingGuidelines.pdf"
    xmlns:mmc="https://kindlegen.s3.amazonaws.com/AmazonKindlePublishingGuidelines.pdf"
    xmlns:idx="https://kindlegen.s3.amazonaws.com/AmazonKindlePublishingGuidelines.pdf">
<head>
    <meta http-equiv="Content-Type" content="text/html; charset=utf-8" />
</head>
<body>
    <mbp:frameset>
"""

CONTENT_FOOTER = """
    </mbp:frameset>
</body>
</html>
"""

OPF_HEADER = """<?xml version="1.0"?>
<package version="2.0" xmlns="http://www.idpf.org/2007/opf" unique-identifier="{source}-{target}-dict">
    <metadata>
        <dc:title>{title}</dc:title>
        <dc:creator opf:role="aut">{author}</dc:creator>
        <dc:language>{source}</dc:language>
        <x-metadata>
          <DictionaryInLanguage>{source}</DictionaryInLanguage>
          <DictionaryOutLanguage>{target}</DictionaryOutLanguage>
        </x-metadata>
    </metadata>
    <manifest>
"""


def escape(text):
    return html.escape(text, quote=True)


def to_kindle(dictionary, output_path, force=False, batch_size=BATCH_SIZE):
    prepare_output_dir(output_path, force)
    content_ids = create_content_files(dictionary, output_path, batch_size)
    create_opf_file(dictionary, output_path, content_ids)
    logger.info("%s: wrote %d content files", output_path, len(content_ids))
    return content_ids


def check_output_dir(output_path, force):
    # Creates nothing, so it can run before any dictionary is built
    if os.path.exists(output_path):
        if not os.path.isdir(output_path):
            raise ExportError(f"{output_path} is a file, a directory expected.")
        if not force:
            raise ExportError(f"{output_path} is an existing directory, use -f to force.")


def prepare_output_dir(output_path, force):
    check_output_dir(output_path, force)
    os.makedirs(output_path, exist_ok=True)


def batches(dictionary, batch_size):
    batch = []
    for term in dictionary:
        if term.is_empty():
            continue
        batch.append(term)
        if len(batch) == batch_size:
            yield batch
            batch = []
    if batch:
        yield batch


def content_id(num):
    return f"content{num:04}"


def create_content_files(dictionary, output_path, batch_size=BATCH_SIZE):
    content_ids = []
    for num, batch in enumerate(batches(dictionary, batch_size), start=1):
        id = content_id(num)
        create_content_file(batch, os.path.join(output_path, id + '.xhtml'))
        content_ids.append(id)
    return content_ids


def create_content_file(terms, filename):
    with open(filename, 'w', encoding='utf-8') as outfile:
        outfile.write(CONTENT_HEADER)
        for term in terms:
            outfile.write(format_term(term))
        outfile.write(CONTENT_FOOTER)


def format_term(term):
    text = '\n<idx:entry name="main" scriptable="yes" spell="yes">\n'
    text += format_headword(term)
    text += format_pronunciations(term)
    text += format_classes(term)
    text += '\n</idx:entry>\n'
    return text


def format_headword(term):
    text = f"<b><idx:orth>{escape(term.headword)}"
    if term.inflections:
        text += "<idx:infl>"
        for inflection in sorted(term.inflections):
            text += f'<idx:iform value="{escape(inflection)}" />'
        text += "</idx:infl>"
    text += "</idx:orth></b><br />\n"
    return text


def format_pronunciations(term):
    text = ""
    for name in sorted(term.pronunciations):
        if len(term.pronunciations) > 1 and name == WIKI_PRONUNCIATION:
            # Pronunciations from a named source win over crawled ones
            continue
        if name and name != WIKI_PRONUNCIATION:
            text += f"<i>{escape(name)}</i>: "
        text += escape(", ".join(term.pronunciations[name]))
        text += "<br />\n"
    return text


def format_classes(term):
    text = ""
    for word_class in sorted(term.classes):
        meanings = [m for m in term.meanings(word_class) if not m.is_empty()]
        if not meanings:
            continue
        text += escape(word_class.label)
        text += format_meanings(meanings)
    return text


def format_meanings(meanings):
    text = ""
    translations = set()
    for meaning in meanings:
        translations.update(meaning.translations)
    if translations:
        text += "<ul>\n"
        text += f"<li>{escape(' | '.join(sorted(translations)))}</li>\n"
        text += "</ul>\n"
    descriptions = [meaning.description for meaning in meanings if meaning.description]
    if descriptions:
        text += "<ol>\n"
        for description in descriptions:
            text += f"<li>{escape(description)}</li>\n"
        text += "</ol>\n"
    return text


def create_opf_file(dictionary, output_path, content_ids):
    with open(os.path.join(output_path, OPF_FILENAME), 'w', encoding='utf-8') as outfile:
        outfile.write(OPF_HEADER.format(
            title=escape(dictionary.title),
            author=escape(dictionary.author),
            source=escape(dictionary.source_language),
            target=escape(dictionary.target_language),
        ))
        for id in content_ids:
            outfile.write(f'<item id="{id}" href="{id}.xhtml" media-type="application/xhtml+xml" />\n')
        outfile.write("\n    </manifest>\n    <spine>\n")
        for id in content_ids:
            outfile.write(f'<itemref idref="{id}"/>\n')
        outfile.write("\n    </spine>\n</package>\n")
