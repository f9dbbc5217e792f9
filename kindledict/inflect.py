import re
from collections import namedtuple


CONSONANTS = "bcdfghjklmnpqrstvwxyz"
VOWELS = "aeiou"

# Sibilant endings take -es
RE_SIBILANT = re.compile(r"(s|sh|ch|x)$", re.IGNORECASE)
RE_CONSONANT_Y = re.compile(rf"^(.*[{CONSONANTS}])y$", re.IGNORECASE)
RE_CONSONANT_IE = re.compile(rf"^(.*[{CONSONANTS}])ie$", re.IGNORECASE)
# A final consonant is doubled after a single short vowel: stop -> stopped,
# but not after a long vowel (eat, rain) and never for w, x or y (play, fix)
RE_SHORT_VOWEL_CONSONANT = re.compile(
    rf"(?:^|[{CONSONANTS}])[{VOWELS}]([bcdfghjklmnpqrstvz])$", re.IGNORECASE
)

O_ES_WORDS = frozenset(("hero", "potato", "tomato", "go", "do"))

EN_IRREGULAR_VERBS = {
    'arise': ['arose', 'arisen'],
    'be': ['was', 'were', 'been', 'am', 'are', 'is'],
    'bear': ['bore', 'borne'],
    'begin': ['began', 'begun'],
    'break': ['broke', 'broken'],
    'bring': ['brought'],
    'buy': ['bought'],
    'choose': ['chose', 'chosen'],
    'come': ['came'],
    'do': ['did', 'done'],
    'drink': ['drank', 'drunk'],
    'drive': ['drove', 'driven'],
    'eat': ['ate', 'eaten'],
    'fall': ['fell', 'fallen'],
    'find': ['found'],
    'fly': ['flew', 'flown'],
    'forget': ['forgot', 'forgotten'],
    'get': ['got', 'gotten'],
    'give': ['gave', 'given'],
    'go': ['went', 'gone'],
    'have': ['had'],
    'know': ['knew', 'known'],
    'make': ['made'],
    'ride': ['rode', 'ridden'],
    'run': ['ran'],
    'see': ['saw', 'seen'],
    'sing': ['sang', 'sung'],
    'speak': ['spoke', 'spoken'],
    'swim': ['swam', 'swum'],
    'take': ['took', 'taken'],
    'think': ['thought'],
    'write': ['wrote', 'written'],
}


LanguageRules = namedtuple('LanguageRules', ['pluralize', 'inflect_verb', 'irregular_verbs'])


def _no_forms(headword, irregular_verbs=None):
    return []


NO_RULES = LanguageRules(_no_forms, _no_forms, {})


def en_add_s(headword):
    if RE_SIBILANT.search(headword):
        return headword + 'es'
    elif headword.lower().endswith('o'):
        if headword.lower() in O_ES_WORDS:
            return headword + 'es'
        return headword + 's'
    match = RE_CONSONANT_Y.match(headword)
    if match:
        return match[1] + 'ies'
    return headword + 's'


def en_add_ing(headword):
    lowered = headword.lower()
    if lowered.endswith('ee'):
        return headword + 'ing'
    match = RE_CONSONANT_IE.match(headword)
    if match:
        return match[1] + 'ying'
    if lowered.endswith('e'):
        return headword[:-1] + 'ing'
    match = RE_SHORT_VOWEL_CONSONANT.search(headword)
    if match:
        return headword + match[1] + 'ing'
    return headword + 'ing'


def en_add_ed(headword, irregular_verbs):
    forms = irregular_verbs.get(headword.lower())
    if forms:
        return list(forms)
    if headword.lower().endswith('e'):
        return [headword + 'd']
    match = RE_CONSONANT_Y.match(headword)
    if match:
        return [match[1] + 'ied']
    match = RE_SHORT_VOWEL_CONSONANT.search(headword)
    if match:
        return [headword + match[1] + 'ed']
    return [headword + 'ed']


def en_pluralize(headword, irregular_verbs=None):
    return [en_add_s(headword)]


def en_inflect_verb(headword, irregular_verbs=None):
    if irregular_verbs is None:
        irregular_verbs = EN_IRREGULAR_VERBS
    return [en_add_s(headword), en_add_ing(headword)] + en_add_ed(headword, irregular_verbs)


LANGUAGES = {
    'en': LanguageRules(en_pluralize, en_inflect_verb, EN_IRREGULAR_VERBS),
}


def get_rules(language):
    return LANGUAGES.get(language, NO_RULES)


def inflect(language, headword, word_class, irregular_verbs=None):
    # lexicon imports this module at load time
    from .lexicon import WordClass
    if not headword:
        return []
    rules = get_rules(language)
    if irregular_verbs is None:
        irregular_verbs = rules.irregular_verbs
    if word_class is WordClass.NOUN:
        return rules.pluralize(headword, irregular_verbs)
    elif word_class is WordClass.VERB:
        return rules.inflect_verb(headword, irregular_verbs)
    return []
