import logging
import os
import tempfile

from sqlitedict import SqliteDict

from .lexicon import ConfigError, normalize


logger = logging.getLogger(__name__)


TERMS_TABLE = 'terms'
REVERSE_TABLE = 'reverse'
META_TABLE = 'meta'


class LexDB(object):
    """A compiled dictionary and its reverse view, stored on disk.

    Records are Term objects keyed by normalized headword, so lookups
    behave exactly like Dictionary.lookup without re-reading the sources.
    """

    def __init__(self, db_filename):
        self.terms = None
        self.reverse = None
        if not os.path.isfile(db_filename):
            raise ConfigError(f"Database does not exist: {db_filename}")
        self.filename = db_filename
        with SqliteDict(db_filename, tablename=META_TABLE, flag='r') as meta:
            self.meta = dict(meta)
        self.terms = SqliteDict(db_filename, tablename=TERMS_TABLE, flag='r')
        self.reverse = SqliteDict(db_filename, tablename=REVERSE_TABLE, flag='r')

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __del__(self):
        self.close()

    def __len__(self):
        return len(self.terms)

    def close(self):
        for table in (self.terms, self.reverse):
            if table is not None:
                table.close()
        self.terms = None
        self.reverse = None

    @classmethod
    def generate(cls, dictionary, db_filename):
        # Write the new database to a temporary file, then move it to the
        # desired location, so readers never see a half-written database.
        # The temporary file lives next to its final location so the move
        # stays on one filesystem.
        dirname, basename = os.path.split(os.path.abspath(db_filename))
        tmpfile, tmp_filename = tempfile.mkstemp(".tmp", f"{basename}-", dirname)
        os.close(tmpfile)       # sqlite will reopen it
        try:
            write_db(dictionary, tmp_filename)
            os.replace(tmp_filename, db_filename)
        except Exception:
            try:
                os.remove(tmp_filename)
            except OSError:
                pass
            raise
        logger.info("%s: stored %d records", db_filename, len(dictionary))

    def lookup(self, word):
        return self.terms.get(normalize(word))

    def reverse_lookup(self, word):
        return self.reverse.get(normalize(word))


def write_db(dictionary, filename):
    with SqliteDict(filename, tablename=META_TABLE) as meta:
        meta['source_language'] = dictionary.source_language
        meta['target_language'] = dictionary.target_language
        meta['title'] = dictionary.title
        meta['author'] = dictionary.author
        meta.commit()
    write_table(dictionary, filename, TERMS_TABLE)
    write_table(dictionary.reversed(), filename, REVERSE_TABLE)


def write_table(dictionary, filename, tablename):
    with SqliteDict(filename, tablename=tablename) as db:
        for key, term in dictionary.terms.items():
            if not term.is_empty():
                db[key] = term
        db.commit()
