"""Repository for reference table access."""

import json
import logging
from pathlib import Path
from typing import Iterable, Optional

from ..config import DEFAULT_DATA_DIR, get_settings
from ..models.formula import Ingredient
from ..models.naturals import ConstituentProfile
from ..models.regulatory import LimitEntry


logger = logging.getLogger(__name__)


class ReferenceDataRepository:
    """Read-only access to the ingredient list, limit library and constituent table.

    Tables are loaded once, on first query, and never written afterwards.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """Initialize the repository.

        Args:
            data_dir: Directory containing the reference JSON files.
        """
        self.data_dir = Path(data_dir) if data_dir else DEFAULT_DATA_DIR
        self._ingredients: dict[str, Ingredient] = {}
        self._limits: dict[str, LimitEntry] = {}
        self._profiles: dict[str, ConstituentProfile] = {}
        self._loaded = False

    @classmethod
    def from_tables(
        cls,
        ingredients: Iterable[Ingredient] = (),
        limits: Iterable[LimitEntry] = (),
        profiles: Iterable[ConstituentProfile] = (),
    ) -> "ReferenceDataRepository":
        """Build a repository from in-memory tables instead of JSON files.

        Args:
            ingredients: Master ingredient records.
            limits: Regulatory limit entries.
            profiles: Constituent expansion profiles.

        Returns:
            A repository that is already loaded.
        """
        repo = cls()
        repo._ingredients = {i.id: i for i in ingredients}
        repo._limits = {e.cas_number: e for e in limits}
        repo._profiles = {p.ingredient_id: p for p in profiles}
        repo._loaded = True
        return repo

    def load_all(self) -> None:
        """Load all reference data files."""
        self._load_ingredients()
        self._load_limits()
        self._load_profiles()
        self._loaded = True
        logger.info(
            "Loaded reference tables from %s: %d ingredients, %d limit entries, %d constituent profiles",
            self.data_dir,
            len(self._ingredients),
            len(self._limits),
            len(self._profiles),
        )

    def _load_json(self, filename: str) -> dict:
        """Load a JSON file from the data directory."""
        filepath = self.data_dir / filename
        if not filepath.exists():
            logger.warning("Reference file %s not found, using empty table", filepath)
            return {}
        with open(filepath, "r", encoding="utf-8") as f:
            return json.load(f)

    def _load_ingredients(self) -> None:
        """Load the master ingredient list."""
        data = self._load_json("ingredients.json")
        for item in data.get("ingredients", []):
            ingredient = Ingredient.from_dict(item)
            self._ingredients[ingredient.id] = ingredient

    def _load_limits(self) -> None:
        """Load the regulatory limit library."""
        data = self._load_json("ifra_limits.json")
        for item in data.get("substances", []):
            entry = LimitEntry.from_dict(item)
            self._limits[entry.cas_number] = entry

    def _load_profiles(self) -> None:
        """Load the constituent expansion table."""
        data = self._load_json("constituents.json")
        for item in data.get("profiles", []):
            profile = ConstituentProfile.from_dict(item)
            self._profiles[profile.ingredient_id] = profile

    def _ensure_loaded(self) -> None:
        """Ensure data is loaded."""
        if not self._loaded:
            self.load_all()

    # Ingredient queries
    def get_ingredient(self, ingredient_id: Optional[str]) -> Optional[Ingredient]:
        """Get master ingredient by id."""
        if not ingredient_id:
            return None
        self._ensure_loaded()
        return self._ingredients.get(ingredient_id)

    def get_all_ingredients(self) -> list[Ingredient]:
        """Get all master ingredients."""
        self._ensure_loaded()
        return list(self._ingredients.values())

    def search_ingredients(self, query: str, limit: int = 20) -> list[Ingredient]:
        """Search ingredients by id, name or CAS number.

        Args:
            query: Case-insensitive substring.
            limit: Maximum results to return.

        Returns:
            Matching ingredients, exact id/CAS matches first.
        """
        self._ensure_loaded()
        query_lower = query.lower().strip()
        if not query_lower:
            return []

        exact = [
            i for i in self._ingredients.values()
            if i.id == query_lower or i.cas_number == query_lower
        ]
        partial = [
            i for i in self._ingredients.values()
            if i not in exact and (
                query_lower in i.id
                or query_lower in i.name.lower()
                or query_lower in i.cas_number
            )
        ]
        return (exact + partial)[:limit]

    # Limit library queries
    def get_limit_entry(self, cas_number: str) -> Optional[LimitEntry]:
        """Get regulatory limit entry by CAS number."""
        self._ensure_loaded()
        return self._limits.get(cas_number)

    def get_all_limit_entries(self) -> list[LimitEntry]:
        """Get all limit entries."""
        self._ensure_loaded()
        return list(self._limits.values())

    # Constituent table queries
    def get_constituent_profile(self, ingredient_id: Optional[str]) -> Optional[ConstituentProfile]:
        """Get the constituent expansion profile for an ingredient id."""
        if not ingredient_id:
            return None
        self._ensure_loaded()
        return self._profiles.get(ingredient_id)

    def get_all_constituent_profiles(self) -> list[ConstituentProfile]:
        """Get all constituent profiles."""
        self._ensure_loaded()
        return list(self._profiles.values())


# Singleton repository instance
_repository: Optional[ReferenceDataRepository] = None


def get_repository() -> ReferenceDataRepository:
    """Get or create the default repository.

    Returns:
        The singleton repository instance.
    """
    global _repository
    if _repository is None:
        _repository = ReferenceDataRepository(get_settings().data_dir)
    return _repository
