import logging
import os
from dataclasses import dataclass, field

from . import kindle
from . import readers
from . import wiki
from .lexicon import ConfigError, Dictionary


logger = logging.getLogger(__name__)


@dataclass
class BuildConfig:
    input_file: str = None
    pronunciation_files: list = field(default_factory=list)
    wiki_file: str = None
    wiki_prefix: str = None
    output_path: str = None
    query: list = field(default_factory=list)
    source_language: str = "en"
    target_language: str = "cs"
    title: str = ""
    author: str = ""
    force: bool = False
    reverse: bool = False
    interactive: bool = False
    db_file: str = None

    def has_sources(self):
        return bool(self.input_file or self.pronunciation_files or self.wiki_file)

    def validate(self):
        for filename in self.input_files():
            if not os.path.isfile(filename):
                raise ConfigError(f"File does not exist: {filename}")
        if self.input_file:
            readers.get_bilingual_reader(self.source_language, self.target_language)
        if self.wiki_file and not self.wiki_prefix:
            raise ConfigError("No wiki prefix specified.")
        if not (self.query or self.output_path or self.db_file or self.interactive):
            raise ConfigError("No search, output path (-o) or database (-d) is specified.")
        if not self.has_sources() and not self.db_file:
            raise ConfigError("No input (-i, -p, -w) or database (-d) is specified.")
        if self.output_path:
            if not self.has_sources():
                raise ConfigError("-o requires an input (-i, -p, -w).")
            kindle.check_output_dir(self.output_path, self.force)

    def input_files(self):
        files = [self.input_file] if self.input_file else []
        files += [filename for _, filename in self.pronunciation_files]
        if self.wiki_file:
            files.append(self.wiki_file)
        return files


def parse_pronunciation_arg(value):
    parts = value.split(':')
    if len(parts) != 2:
        raise ConfigError("Pronunciation must have 2 parts: '<name>:<filename>'")
    name, filename = parts[0].strip(), parts[1].strip()
    if not name or not filename:
        raise ConfigError("Pronunciation must have 2 parts: '<name>:<filename>'")
    return name, filename


def build_dictionary(config):
    config.validate()
    dictionary = Dictionary(
        config.source_language,
        config.target_language,
        config.title,
        config.author,
    )
    if config.input_file:
        logger.info("Reading %s", config.input_file)
        readers.read_bilingual(dictionary, config.input_file)
    for name, filename in config.pronunciation_files:
        logger.info("Reading %s pronunciations from %s", name, filename)
        readers.read_pronunciation(dictionary, name, filename)
    if config.wiki_file:
        logger.info("Reading %s", config.wiki_file)
        wiki.read_wiki(dictionary, config.wiki_file, config.wiki_prefix)
    logger.info("Built %d records", len(dictionary))
    return dictionary
