"""Named text predicates used by the rule sets.

Regex detection is kept on purpose: it still works on units the parser
rejects. Each pattern sits behind a named function so a rule never
touches a raw regex and a predicate can later be swapped for a
tree-based check.
"""

import re
from dataclasses import dataclass

from ui_compliance.config import ClassificationLevel


@dataclass(frozen=True)
class PatternMatch:
    """One regex hit with its position in the unit."""

    text: str
    start: int
    line: int
    column: int
    groups: tuple[str, ...] = ()


def line_of(text: str, offset: int) -> int:
    """1-indexed line number of a character offset."""
    return text.count("\n", 0, offset) + 1


def column_of(text: str, offset: int) -> int:
    return offset - (text.rfind("\n", 0, offset) + 1)


def line_start_offset(text: str, line: int) -> int:
    """Character offset where 1-indexed ``line`` begins."""
    if line <= 1:
        return 0
    offset = 0
    for _ in range(line - 1):
        nxt = text.find("\n", offset)
        if nxt == -1:
            return len(text)
        offset = nxt + 1
    return offset


def _matches(pattern: re.Pattern[str], text: str) -> list[PatternMatch]:
    return [
        PatternMatch(
            text=m.group(0),
            start=m.start(),
            line=line_of(text, m.start()),
            column=column_of(text, m.start()),
            groups=tuple(g or "" for g in m.groups()),
        )
        for m in pattern.finditer(text)
    ]


def _in_comment(text: str, offset: int) -> bool:
    """Rough check: a // or /* earlier on the same line."""
    prefix = text[text.rfind("\n", 0, offset) + 1:offset]
    return "//" in prefix or "/*" in prefix


# -- Style ------------------------------------------------------------------

_HEIGHT_UTILITY = re.compile(r"^h-(\d+)$")


def height_utility(token: str) -> int | None:
    """Height of an ``h-N`` utility class, or None."""
    m = _HEIGHT_UTILITY.match(token)
    return int(m.group(1)) if m else None


# -- Design system ----------------------------------------------------------

_COLOR_LITERALS = [
    (re.compile(r"#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{3})\b"), "hex color"),
    (re.compile(r"rgba\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*,\s*[\d.]+\s*\)"), "RGBA color"),
    (re.compile(r"rgb\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*\)"), "RGB color"),
    (re.compile(r"hsl\(\s*\d+\s*,\s*\d+%\s*,\s*\d+%\s*\)"), "HSL color"),
]

_SPACING_LITERAL = re.compile(
    r"\b(?:padding|margin|gap|top|right|bottom|left|width|height)"
    r"(?:Top|Right|Bottom|Left)?\s*:\s*['\"]?\d+px"
)


def find_hardcoded_colors(text: str) -> list[tuple[PatternMatch, str]]:
    """Colour literals outside comments, with their kind."""
    hits = []
    for pattern, kind in _COLOR_LITERALS:
        for m in _matches(pattern, text):
            if not _in_comment(text, m.start):
                hits.append((m, kind))
    return sorted(hits, key=lambda h: h[0].start)


def find_hardcoded_spacing(text: str) -> list[PatternMatch]:
    return [m for m in _matches(_SPACING_LITERAL, text) if not _in_comment(text, m.start)]


REMOVED_OPTIONS = [
    ('variant="legacy"', 'variant="default"', "legacy variant has been removed - use the default variant"),
    ("variant='legacy'", "variant='default'", "legacy variant has been removed - use the default variant"),
    ('size="xs"', 'size="sm"', "xs size has been removed - use sm as the minimum size"),
    ("size='xs'", "size='sm'", "xs size has been removed - use sm as the minimum size"),
]


def find_removed_options(text: str) -> list[tuple[PatternMatch, str, str]]:
    """Removed component options: (match, replacement, message)."""
    hits = []
    for old, new, message in REMOVED_OPTIONS:
        for m in _matches(re.compile(re.escape(old)), text):
            hits.append((m, new, message))
    return sorted(hits, key=lambda h: h[0].start)


# -- Classification & security ---------------------------------------------

@dataclass(frozen=True)
class SensitiveTermFamily:
    """A family of sensitive terms and the level it requires."""

    name: str
    pattern: re.Pattern[str]
    required_level: ClassificationLevel


SENSITIVE_TERM_FAMILIES = [
    SensitiveTermFamily(
        "Personal Identification",
        re.compile(
            r"(personnummer|fødselsnummer|national[\s_-]?id|\bssn\b|social[\s_-]?security)",
            re.IGNORECASE,
        ),
        ClassificationLevel.RESTRICTED,
    ),
    SensitiveTermFamily(
        "Contact Information",
        re.compile(r"(e-?mail|epost|e-post|telefon|phone|adresse|address)", re.IGNORECASE),
        ClassificationLevel.RESTRICTED,
    ),
    SensitiveTermFamily(
        "Health Information",
        re.compile(r"(helse|health|medical|medisinsk|sykdom|illness)", re.IGNORECASE),
        ClassificationLevel.CONFIDENTIAL,
    ),
    SensitiveTermFamily(
        "Credentials",
        re.compile(r"(password|passord|secret|hemmelighet|api[_-]?key|access[_-]?token)", re.IGNORECASE),
        ClassificationLevel.CONFIDENTIAL,
    ),
]

_CLASSIFICATION_MARKER = re.compile(
    r"/\*\s*NSM:\s*(OPEN|RESTRICTED|CONFIDENTIAL|SECRET)\b[^*]*\*/",
    re.IGNORECASE,
)


def find_sensitive_terms(text: str) -> dict[str, tuple[SensitiveTermFamily, PatternMatch]]:
    """First hit per sensitive family, keyed by family name."""
    found: dict[str, tuple[SensitiveTermFamily, PatternMatch]] = {}
    for family in SENSITIVE_TERM_FAMILIES:
        hits = _matches(family.pattern, text)
        if hits:
            found[family.name] = (family, hits[0])
    return found


def find_classification_marker(text: str) -> tuple[ClassificationLevel, PatternMatch] | None:
    hits = _matches(_CLASSIFICATION_MARKER, text)
    if not hits:
        return None
    return ClassificationLevel(hits[0].groups[0].upper()), hits[0]


def classification_marker(level: ClassificationLevel, families: list[str]) -> str:
    """Marker comment text for ``level``."""
    contents = ", ".join(families).lower()
    return f"/* NSM: {level.value} - Contains {contents} */"


_LITERAL_SECRET = re.compile(
    r"""\b(api[_-]?key|apiKey|secret|token|password)\s*[:=]\s*["'][^"'\s]+["']""",
    re.IGNORECASE,
)
_INSECURE_URL = re.compile(r"http://(?!localhost|127\.0\.0\.1|www\.w3\.org/)[^\s'\"`)]*")
# xmlns="...", xmlns:xlink="..." and the JSX spelling xmlnsXlink={"..."}
_NAMESPACE_ATTRIBUTE = re.compile(r"\bxmlns[\w:-]*\s*=\s*\{?\s*['\"`]$")
_UNESCAPED_MARKUP = re.compile(r"dangerouslySetInnerHTML|\.innerHTML\s*=(?!=)")


def find_literal_secrets(text: str) -> list[PatternMatch]:
    return _matches(_LITERAL_SECRET, text)


def find_insecure_urls(text: str) -> list[PatternMatch]:
    """Plain-HTTP URLs, minus loopback hosts and XML namespace identifiers."""
    return [
        m for m in _matches(_INSECURE_URL, text)
        if not _NAMESPACE_ATTRIBUTE.search(text[max(0, m.start - 64):m.start])
    ]


def find_unescaped_markup(text: str) -> list[PatternMatch]:
    return _matches(_UNESCAPED_MARKUP, text)


_NORWEGIAN_CHARS = re.compile(r"[æøåÆØÅ]")
_I18N_USAGE = re.compile(r"useTranslation|\bt\(|i18n|react-i18next|next-i18next|<Trans\b")


def find_norwegian_text(text: str) -> list[PatternMatch]:
    return _matches(_NORWEGIAN_CHARS, text)


def has_i18n_usage(text: str) -> bool:
    return _I18N_USAGE.search(text) is not None


# -- Accessibility ----------------------------------------------------------

_OUTLINE_SUPPRESSION = re.compile(r"""outline\s*:\s*['"]?(?:none|0)\b""")


def find_outline_suppression(text: str) -> list[PatternMatch]:
    """CSS or style-object ``outline: none`` / ``outline: 0``."""
    return _matches(_OUTLINE_SUPPRESSION, text)


def is_focus_replacement(token: str) -> bool:
    """A class token that restores a visible focus indicator."""
    return token.startswith(("focus:", "focus-visible:"))


LOW_CONTRAST_TOKENS = (
    "text-gray-400",
    "text-gray-300",
    "text-yellow-300",
    "text-blue-300",
    "text-green-300",
    "text-red-300",
    "text-purple-300",
    "text-pink-300",
)

_SHADE = re.compile(r"-(\d+)$")


def low_contrast_tokens(aa_only: bool = False) -> tuple[str, ...]:
    """Flagged tokens; the AA tier only flags the lightest shades."""
    if aa_only:
        return tuple(t for t in LOW_CONTRAST_TOKENS if t.endswith("-300"))
    return LOW_CONTRAST_TOKENS


def find_low_contrast_tokens(text: str, tokens: tuple[str, ...]) -> list[PatternMatch]:
    if not tokens:
        return []
    pattern = re.compile(r"(?<![\w-])(" + "|".join(re.escape(t) for t in tokens) + r")(?![\w-])")
    return _matches(pattern, text)


def higher_contrast(token: str) -> str:
    """Same colour family at shade 600 or darker."""
    m = _SHADE.search(token)
    if not m:
        return token
    shade = max(600, int(m.group(1)))
    return token[: m.start()] + f"-{shade}"
