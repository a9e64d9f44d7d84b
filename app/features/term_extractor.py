from __future__ import annotations

import re
from typing import Iterable

from pydantic import BaseModel, ConfigDict

from app.core.config.scoring import get_scoring_value

# Terms may contain "+", "." or "/" (c++, node.js, ci/cd), so plain \b is not enough.
_LEFT = r"(?<![\w+./])"
_RIGHT = r"(?![\w+]|[./]\w)"


def _terms(body: str) -> re.Pattern[str]:
    return re.compile(rf"{_LEFT}(?:{body}){_RIGHT}", re.IGNORECASE)


DISCIPLINE_NAMES = (
    "mechanical",
    "electrical",
    "civil",
    "software",
    "chemical",
    "biomedical",
    "aerospace",
    "computer",
    "industrial",
    "materials",
    "nuclear",
    "environmental",
    "structural",
    "systems",
    "robotics",
)

CATEGORY_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    "disciplines": tuple(_terms(rf"{name}\s+engineering") for name in DISCIPLINE_NAMES),
    "technologies": (
        _terms(
            r"python|java|c\+\+|javascript|react|angular|vue|node\.js|docker|kubernetes|aws|azure|gcp"
            r"|sql|mongodb|redis|git|jenkins|ansible|terraform"
        ),
        _terms(r"cad|solidworks|autocad|matlab|simulink|ansys|abaqus|comsol|stata|r|spss|minitab"),
        _terms(
            r"arduino|raspberry\s+pi|microcontroller|fpga|asic|pcb|sensor|actuator|motor|pump|valve|circuit"
        ),
        _terms(
            r"machine\s+learning|artificial\s+intelligence|deep\s+learning|neural\s+network"
            r"|computer\s+vision|nlp"
        ),
        _terms(r"agile|scrum|waterfall|lean|six\s+sigma|kaizen|kanban|devops|ci/cd"),
    ),
    "standards": (
        _terms(
            r"iso|astm|asme|ieee|ansi|nist|ul|ce|rohs|reach|fda|epa|osh|api|asnt|aws|aisc|aci|aashto"
        ),
        _terms(r"iso\s+\d+|astm\s+[a-z]\d+|asme\s+[a-z]\d+|ieee\s+\d+|ansi\s+[a-z]\d+"),
    ),
    "methodologies": (
        _terms(
            r"design\s+thinking|systems\s+thinking|lean\s+manufacturing|tqm|fmea"
            r"|root\s+cause\s+analysis|poka\s+yoke"
        ),
        _terms(
            r"finite\s+element\s+analysis|computational\s+fluid\s+dynamics|stress\s+analysis"
            r"|thermal\s+analysis|fea|cfd"
        ),
        _terms(
            r"project\s+management|risk\s+assessment|quality\s+assurance|testing|validation|verification"
        ),
    ),
}

_TECHNICAL_SUFFIX_RE = re.compile(
    r"(?:ing|tion|sion|ment|ance|ence|ity|ness|ship|hood|dom|ism|ist|er|or|al|ic|ical|ous|ive|able|ible)$"
)
_TECHNICAL_PREFIX_RE = re.compile(
    r"^(?:micro|macro|nano|pico|femto|atto|zepto|yocto|tera|giga|mega|kilo|milli|centi|deci"
    r"|semi|quasi|pseudo|bi|tri|tetra|quad|penta|hexa|hepta|octa|nona|deca|multi|poly|mono|uni|omni|di"
    r"|inter|intra|trans|sub|super|hyper|ultra|infra|pre|post|re|un|dis|mis|over|under|out|up|down"
    r"|in|ex|pro|anti|auto|self|bio|geo|hydro|thermo|electro|mechano|chemo|photo|radio|tele|cyber"
    r"|info|data|tech|comp|sys|net|web|soft|hard|firm|real|virtual|digital|analog|linear|non"
    r"|meta|para|peri|epi|endo|ecto|meso|iso|homo|hetero)"
)
_TECHNICAL_NOUN_RE = re.compile(
    r"^(?:algorithm|analysis|approximation|architecture|assembly|automation|benchmark|calculation"
    r"|calibration|certification|coefficient|compliance|configuration|constant|deployment|derivative"
    r"|diagnostic|documentation|encryption|equation|formula|framework|function|gradient|implementation"
    r"|integral|integration|maintenance|matrix|monitoring|optimization|parameter|polynomial|probability"
    r"|protocol|regulation|specification|standardization|statistics|theorem|validation|variable|vector"
    r"|verification)$"
)
_SI_UNIT_RE = re.compile(
    r"^(?:watt|volt|ampere|ohm|farad|henry|tesla|weber|joule|newton|pascal|hertz|decibel|candela|mole"
    r"|kelvin|radian|steradian|meter|kilogram|second)$"
)

_TOKEN_STRIP = ".,;:!?()[]{}<>\"'`"


class TermBucket(BaseModel):
    model_config = ConfigDict(frozen=True)

    disciplines: frozenset[str] = frozenset()
    technologies: frozenset[str] = frozenset()
    standards: frozenset[str] = frozenset()
    methodologies: frozenset[str] = frozenset()
    technical_words: tuple[str, ...] = ()

    def category(self, name: str) -> list[str]:
        return sorted(getattr(self, name))

    def discipline_titles(self) -> list[str]:
        return [term.title() for term in self.category("disciplines")]

    def keywords(self, technical_word_limit: int | None = None) -> list[str]:
        limit = technical_word_limit
        if limit is None:
            limit = int(get_scoring_value("analysis.technical_words_limit", 50))
        merged = (
            self.category("technologies")
            + self.category("standards")
            + self.category("methodologies")
            + list(self.technical_words[:limit])
        )
        return dedupe_terms(merged)


def _normalize_term(value: str) -> str:
    return " ".join(value.lower().split())


def dedupe_terms(values: Iterable[str], *, min_length: int = 1) -> list[str]:
    """Case-insensitive dedupe keeping the first spelling seen."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        term = " ".join(str(value).split())
        key = term.lower()
        if len(term) < min_length or key in seen:
            continue
        seen.add(key)
        result.append(term)
    return result


def is_technical_word(word: str) -> bool:
    return bool(
        _TECHNICAL_SUFFIX_RE.search(word)
        or _TECHNICAL_PREFIX_RE.match(word)
        or _TECHNICAL_NOUN_RE.match(word)
        or _SI_UNIT_RE.match(word)
    )


def find_technical_words(text: str) -> tuple[str, ...]:
    found: list[str] = []
    seen: set[str] = set()
    for raw in text.split():
        word = raw.strip(_TOKEN_STRIP).lower()
        if len(word) < 3 or not word[0].isalpha() or word in seen:
            continue
        if is_technical_word(word):
            seen.add(word)
            found.append(word)
    return tuple(found)


def extract_terms(text: str) -> TermBucket:
    matched: dict[str, set[str]] = {category: set() for category in CATEGORY_PATTERNS}
    for category, patterns in CATEGORY_PATTERNS.items():
        for pattern in patterns:
            for match in pattern.finditer(text):
                term = _normalize_term(match.group(0))
                if term:
                    matched[category].add(term)

    return TermBucket(
        disciplines=frozenset(matched["disciplines"]),
        technologies=frozenset(matched["technologies"]),
        standards=frozenset(matched["standards"]),
        methodologies=frozenset(matched["methodologies"]),
        technical_words=find_technical_words(text),
    )


_FALLBACK_DISCIPLINE_RE = re.compile(
    rf"\b(?:{'|'.join(DISCIPLINE_NAMES)})\s+engineering\b",
    re.IGNORECASE,
)
_FALLBACK_KEYWORD_RE = _terms(
    r"python|java|c\+\+|react|angular|cad|solidworks|matlab|arduino|machine\s+learning"
    r"|iso|astm|asme|ieee|lean|agile|scrum|fmea|fea|cfd"
)


def fallback_terms(text: str) -> tuple[list[str], list[str]]:
    """Coarse discipline and keyword scan used when no structured LLM reply exists."""
    disciplines = dedupe_terms(
        _normalize_term(m.group(0)).title() for m in _FALLBACK_DISCIPLINE_RE.finditer(text)
    )
    keywords = dedupe_terms(_normalize_term(m.group(0)) for m in _FALLBACK_KEYWORD_RE.finditer(text))
    return disciplines, keywords
