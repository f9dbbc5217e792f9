import html

import flask
import markdown

from . import lexdb


DB_FILENAME = 'dictionary.sqlite3'


application = flask.Flask(__name__)
application.config['DB'] = DB_FILENAME
# KINDLEDICT_DB=/path/to/dictionary.sqlite3
application.config.from_prefixed_env('KINDLEDICT')


def open_db():
    return lexdb.LexDB(application.config['DB'])


@application.route('/api/search/')
@application.route('/api/search/<search_terms>')
def search(search_terms="dictionary"):
    with open_db() as db:
        text = ""
        for term in search_terms.split():
            entry = db.lookup(term)
            if entry is None:
                text += f"<h2>Not found: {html.escape(term)}</h2>\n"
            else:
                text += format_term(entry, db.meta.get('source_language', ""))
    return text


@application.route('/api/search/reverse/')
@application.route('/api/search/reverse/<search_terms>')
def search_reverse(search_terms="slovník"):
    with open_db() as db:
        text = ""
        for term in search_terms.split():
            entry = db.reverse_lookup(term)
            if entry is None:
                text += f"<h2>Not found: {html.escape(term)}</h2>\n"
            else:
                text += format_term(entry, db.meta.get('target_language', ""))
    return text


def format_term(term, language):
    text = f"<h2 lang=\"{html.escape(language)}\">{html.escape(term.headword)}</h2>\n"
    text += markdown.markdown(term_to_markdown(term))
    return text + "\n"


def term_to_markdown(term):
    # Source text is escaped first so markdown only sees our own markup
    lines = []
    if term.inflections:
        lines.append("*" + html.escape(", ".join(sorted(term.inflections))) + "*")
        lines.append("")
    for name in sorted(term.pronunciations):
        pronunciations = html.escape(", ".join(term.pronunciations[name]))
        lines.append(f"**{html.escape(name)}**: {pronunciations}  ")
    lines.append("")
    for word_class in sorted(term.classes):
        meanings = [m for m in term.meanings(word_class) if not m.is_empty()]
        if not meanings:
            continue
        lines.append(f"### {word_class.label}")
        lines.append("")
        translations = sorted(set().union(*(m.translations for m in meanings)))
        if translations:
            # A paragraph, not a list: markdown would merge it with the glosses
            lines.append(html.escape(" | ".join(translations)))
            lines.append("")
        descriptions = [m.description for m in meanings if m.description]
        for num, description in enumerate(descriptions, start=1):
            lines.append(f"{num}. {html.escape(description)}")
        lines.append("")
    return "\n".join(lines)
