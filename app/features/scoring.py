from __future__ import annotations

from app.core.config.scoring import get_scoring_value


def _non_negative(value: float | int | None) -> float:
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number or number < 0:  # NaN or negative
        return 0.0
    return number


def keyword_density(keyword_count: int | None, word_count: int | None) -> float:
    words = _non_negative(word_count)
    if words <= 0:
        return 0.0
    return _non_negative(keyword_count) / words


def engineering_score(
    discipline_count: int | None,
    keyword_count: int | None,
    page_count: int | None,
    density: float | None,
) -> float:
    """Weighted engineering relevance score, always within [0, 100]."""
    disciplines = _non_negative(discipline_count)
    keywords = _non_negative(keyword_count)
    pages = _non_negative(page_count)
    term_density = _non_negative(density)

    discipline_weight = float(get_scoring_value("engineering.weights.discipline", 10))
    keyword_weight = float(get_scoring_value("engineering.weights.keyword", 2))
    page_weight = float(get_scoring_value("engineering.weights.page", 2))
    density_weight = float(get_scoring_value("engineering.weights.density", 1000))
    page_cap = float(get_scoring_value("engineering.caps.page_bonus", 20))
    density_cap = float(get_scoring_value("engineering.caps.density_bonus", 50))
    total_cap = float(get_scoring_value("engineering.caps.total", 100))

    base = disciplines * discipline_weight + keywords * keyword_weight
    page_bonus = min(pages * page_weight, page_cap)
    density_bonus = min(term_density * density_weight, density_cap)
    score = min(base + page_bonus + density_bonus, total_cap, 100.0)
    return max(score, 0.0)
