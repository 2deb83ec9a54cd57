import json
import os
from typing import Dict, Protocol

from app.core.logger import logger


GLOBAL_SCOPE = "global"


class CostPriceRepository(Protocol):

    def get(self, scope: str) -> Dict[str, float]:
        ...

    def set(self, scope: str, sku: str, cost: float) -> None:
        ...


def merge_scopes(scopes):

    merged = {}

    # shop scopes first so explicit global entries win
    for name, prices in scopes.items():
        if name != GLOBAL_SCOPE:
            merged.update(prices)

    merged.update(scopes.get(GLOBAL_SCOPE, {}))

    return merged


class InMemoryCostPriceRepository:

    def __init__(self, initial=None):
        self._scopes = {k: dict(v) for k, v in (initial or {}).items()}

    def get(self, scope):

        if scope == GLOBAL_SCOPE:
            return merge_scopes(self._scopes)

        return dict(self._scopes.get(scope, {}))

    def set(self, scope, sku, cost):

        prices = self._scopes.setdefault(scope, {})

        if cost is None or cost <= 0:
            prices.pop(sku, None)
        else:
            prices[sku] = float(cost)


class JsonCostPriceRepository(InMemoryCostPriceRepository):
    """Cost prices kept in one JSON file: {scope: {sku: cost}}."""

    def __init__(self, path):

        self.path = path

        super().__init__(self._read())

    def _read(self):

        if not os.path.exists(self.path):
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)

        except (OSError, json.JSONDecodeError) as e:

            logger.warning(f"Ignoring unreadable cost file {self.path}: {e}")

            return {}

        if not isinstance(data, dict):

            logger.warning(f"Ignoring cost file {self.path}: expected an object, got {type(data).__name__}")

            return {}

        return {
            scope: {sku: float(v) for sku, v in prices.items() if isinstance(v, (int, float)) and v > 0}
            for scope, prices in data.items()
            if isinstance(prices, dict)
        }

    def set(self, scope, sku, cost):

        super().set(scope, sku, cost)

        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)

        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._scopes, f, ensure_ascii=False, indent=2)
