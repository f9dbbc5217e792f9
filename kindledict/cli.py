import argparse
import logging
import sys
import textwrap

from . import build
from . import kindle
from . import lexdb
from .lexicon import LexiconError


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    p = argparse.ArgumentParser(description="Builds Kindle dictionaries from word lists and Wiktionary dumps")
    p.add_argument('-i', '--input', help="filename of tab-separated bilingual word list")
    p.add_argument('-p', '--pronunciation', action='append', default=[], metavar='NAME:FILE',
                   help="named tab-separated pronunciation list (repeatable)")
    p.add_argument('-w', '--wiki', help="filename of bzip2-compressed Wiktionary dump")
    p.add_argument('--wiki-prefix', help="translation line prefix in the dump, e.g. Czech")
    p.add_argument('-o', '--output', help="output directory for the Kindle source files")
    p.add_argument('-f', '--force', action='store_true', help="write into an existing output directory")
    p.add_argument('--source-language', default='en', help="source language code (default: en)")
    p.add_argument('--target-language', default='cs', help="target language code (default: cs)")
    p.add_argument('-t', '--title', default="", help="dictionary title")
    p.add_argument('-a', '--author', default="", help="dictionary author")
    p.add_argument('-d', '--db', help="filename of lookup database to write, or to read when no input is given")
    p.add_argument('-r', '--reverse', action='store_true', help="reverse lookup")
    p.add_argument('--interactive', action='store_true', help="interactive mode")
    p.add_argument('-v', '--verbose', action='store_true', help="log progress")
    p.add_argument('search_terms', nargs='*')
    args = p.parse_args(argv)
    setup_logging(args.verbose)
    try:
        run(config_from_args(args))
    except LexiconError as err:
        print(err, file=sys.stderr)
        return 1
    return 0


def setup_logging(verbose):
    logger = logging.getLogger('kindledict')
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(handler)
    return logger


def config_from_args(args):
    return build.BuildConfig(
        input_file=args.input,
        pronunciation_files=[build.parse_pronunciation_arg(value) for value in args.pronunciation],
        wiki_file=args.wiki,
        wiki_prefix=args.wiki_prefix,
        output_path=args.output,
        query=args.search_terms,
        source_language=args.source_language,
        target_language=args.target_language,
        title=args.title,
        author=args.author,
        force=args.force,
        reverse=args.reverse,
        interactive=args.interactive,
        db_file=args.db,
    )


def run(config):
    if not config.has_sources():
        config.validate()
        with lexdb.LexDB(config.db_file) as db:
            print("Records:", len(db))
            lookup_all(db, config)
        return

    dictionary = build.build_dictionary(config)
    print("Records:", len(dictionary))
    if config.db_file:
        lexdb.LexDB.generate(dictionary, config.db_file)
    if config.query or config.interactive:
        lookup_all(DictionaryLookup(dictionary), config)
    if config.output_path:
        kindle.to_kindle(dictionary, config.output_path, config.force)


class DictionaryLookup(object):
    # Gives an in-memory Dictionary the same lookup interface as LexDB
    def __init__(self, dictionary):
        self.dictionary = dictionary
        self.reversed = None

    def lookup(self, word):
        return self.dictionary.lookup(word)

    def reverse_lookup(self, word):
        if self.reversed is None:
            self.reversed = self.dictionary.reversed()
        return self.reversed.lookup(word)


def lookup_all(db, config):
    for term in config.query:
        lookup(db, term, config.reverse)
    if config.interactive:
        interactive_mode(db, config.reverse)


def interactive_mode(db, reverse):
    while True:
        try:
            search_str = input("> ").strip()
        except (KeyboardInterrupt, EOFError):
            print()
            break
        if search_str:
            lookup(db, search_str, reverse)


def lookup(db, search_str, reverse):
    if reverse:
        term = db.reverse_lookup(search_str)
    else:
        term = db.lookup(search_str)
    if term is None:
        print("Not found:", search_str, "\n")
    else:
        print(format_term(term))


def format_term(term):
    types = "; ".join(word_class.label for word_class in sorted(term.classes))
    text = f"{term.headword}: {types}\n" if types else f"{term.headword}:\n"
    body = ""
    if term.inflections:
        body += "forms: " + ", ".join(sorted(term.inflections)) + "\n"
    for name in sorted(term.pronunciations):
        body += f"{name}: " + ", ".join(term.pronunciations[name]) + "\n"
    for word_class in sorted(term.classes):
        body += word_class.label + "\n"
        meanings = term.meanings(word_class)
        translations = sorted(set().union(*(m.translations for m in meanings)))
        if translations:
            body += textwrap.indent(" | ".join(translations), " "*4) + "\n"
        for num, meaning in enumerate(m for m in meanings if m.description):
            body += textwrap.indent(f"{num + 1}. {meaning.description}", " "*4) + "\n"
    return text + textwrap.indent(body, " "*4)


if __name__ == '__main__':
    sys.exit(main())
