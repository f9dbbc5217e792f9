import logging

from .lexicon import ConfigError, IngestError, Meaning, WordClass


logger = logging.getLogger(__name__)


CATEGORY_TAGS = {
    'n:': WordClass.NOUN,
    'v:': WordClass.VERB,
    'adv:': WordClass.ADVERB,
    'adj:': WordClass.ADJECTIVE,
    'pron:': WordClass.PRONOUN,
    'prep:': WordClass.PREPOSITION,
}


def read_tab_file(filename):
    rows = []
    try:
        with open(filename, 'r', encoding='utf-8') as infile:
            for line in infile:
                line = line.rstrip('\r\n')
                if line.startswith('#'):
                    continue
                row = line.split('\t')
                if len(row) > 1:
                    rows.append(row)
    except (OSError, UnicodeDecodeError) as err:
        raise IngestError(f"{filename}: {err}") from err
    return rows


def parse_category(tag):
    tag = tag.strip()
    for prefix, word_class in CATEGORY_TAGS.items():
        if tag.startswith(prefix):
            return word_class
    return WordClass.UNKNOWN


def read_czech(dictionary, filename):
    """Reads an English-Czech GNU/FDL style word list.

    Each row is "headword <tab> translation <tab> category tag ...".
    Rows with fewer than three fields are skipped.
    """
    count = 0
    for row in read_tab_file(filename):
        if len(row) < 3:
            continue
        meaning = Meaning()
        meaning.add_translation(row[1].strip())
        dictionary.add_meaning(row[0].strip(), parse_category(row[2]), meaning)
        count += 1
    logger.info("%s: %d translations", filename, count)
    return count


BILINGUAL_READERS = {
    'en-cs': read_czech,
}


def get_bilingual_reader(source_language, target_language):
    pair = f"{source_language}-{target_language}"
    try:
        return BILINGUAL_READERS[pair]
    except KeyError:
        raise ConfigError(f"Unsupported language combination: {pair}") from None


def read_bilingual(dictionary, filename):
    reader = get_bilingual_reader(dictionary.source_language, dictionary.target_language)
    return reader(dictionary, filename)


def read_pronunciation(dictionary, name, filename):
    count = 0
    for row in read_tab_file(filename):
        headword = row[0].strip()
        for pronunciation in row[1].split(','):
            dictionary.add_pronunciation(headword, name, pronunciation.strip())
            count += 1
    logger.info("%s: %d pronunciations (%s)", filename, count, name)
    return count
