"""
Ingredient name matching strategies.

SubstringMatchStrategy is the compatibility policy: exact name, then unranked
substring over aliases, then shortest canonical name containing the input.
RankedMatchStrategy ranks names and aliases by TF-IDF similarity instead.
"""

from typing import Optional, Protocol

from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity

from pantry.config import settings
from pantry.logging import get_logger
from pantry.storage.models import Ingredient
from pantry.storage.repository import CatalogRepository

logger = get_logger(__name__)


def normalize_name(name: str) -> str:
    return " ".join((name or "").lower().split())


class MatchStrategy(Protocol):
    def match(self, name: str, repository: CatalogRepository) -> Optional[Ingredient]: ...


class SubstringMatchStrategy:
    """First hit wins; alias hits are not ranked, storage order decides."""

    def match(self, name: str, repository: CatalogRepository) -> Optional[Ingredient]:
        normalized = normalize_name(name)
        if not normalized:
            return None
        exact = repository.get_ingredient_by_name(normalized)
        if exact:
            return exact
        ingredients = repository.list_ingredients()
        for ingredient in ingredients:
            # Substring of the comma-joined field, so a hit may span two aliases.
            joined = ",".join(ingredient.aliases or []).lower()
            if normalized in joined:
                return ingredient
        partial = [i for i in ingredients if normalized in i.name.lower()]
        if partial:
            return min(partial, key=lambda i: len(i.name))
        return None


class RankedMatchStrategy:
    """Exact name first, then best TF-IDF char n-gram match over names and aliases."""

    def __init__(self, threshold: Optional[float] = None) -> None:
        self.threshold = settings.ranked_match_threshold if threshold is None else threshold

    def match(self, name: str, repository: CatalogRepository) -> Optional[Ingredient]:
        normalized = normalize_name(name)
        if not normalized:
            return None
        exact = repository.get_ingredient_by_name(normalized)
        if exact:
            return exact
        labels: list[str] = []
        owners: list[Ingredient] = []
        for ingredient in repository.list_ingredients():
            for label in [ingredient.name, *(ingredient.aliases or [])]:
                labels.append(normalize_name(label))
                owners.append(ingredient)
        if not labels:
            return None
        vec = TfidfVectorizer(analyzer="char_wb", ngram_range=(2, 3))
        X = vec.fit_transform([normalized] + labels)
        scores = cosine_similarity(X[0:1], X[1:])[0]
        best = int(scores.argmax())
        if scores[best] < self.threshold:
            logger.info("ingredient.ranked_miss name=%s best=%s score=%.3f", name, labels[best], scores[best])
            return None
        return owners[best]
