"""Catalog provider abstractions and a SQLite catalog store."""
from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from models.product import Product, from_raw_record
from tools.observability import instrument_call

logger = logging.getLogger(__name__)


def coerce_products(raw_items: Iterable[Dict[str, Any] | Product]) -> List[Product]:
    """Build products from loose records, skipping the ones that fail validation."""

    products: List[Product] = []
    for raw in raw_items:
        if isinstance(raw, Product):
            products.append(raw)
            continue
        try:
            products.append(from_raw_record(raw))
        except (TypeError, ValueError) as exc:
            logger.warning("Skipping catalog entry due to validation error: %s", exc)
    return products


class CatalogProvider:
    """Source of the catalog snapshot the look engine reads."""

    def list_products(self) -> List[Product]:
        raise NotImplementedError


class StaticCatalogProvider(CatalogProvider):
    """Catalog snapshot supplied by the caller, e.g. products sent by the storefront."""

    def __init__(self, products: Iterable[Dict[str, Any] | Product]) -> None:
        self._products = coerce_products(products)

    def list_products(self) -> List[Product]:
        return list(self._products)


_LIST_FIELDS = ("images", "colors", "sizes", "tags", "occasions", "style")


class SQLiteCatalogStore(CatalogProvider):
    """Local SQLite-backed product catalog."""

    def __init__(self, database_path: str | Path = "data/catalog.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS products (
                    position INTEGER PRIMARY KEY AUTOINCREMENT,
                    product_id TEXT NOT NULL UNIQUE,
                    name TEXT NOT NULL,
                    brand TEXT,
                    category TEXT NOT NULL,
                    subcategory TEXT,
                    price REAL NOT NULL,
                    original_price REAL,
                    images TEXT,
                    colors TEXT,
                    sizes TEXT,
                    gender TEXT,
                    tags TEXT,
                    in_stock INTEGER,
                    stock_qty INTEGER,
                    occasions TEXT,
                    style TEXT,
                    featured INTEGER,
                    gift_suitable INTEGER
                );
                """
            )

    def _row_to_product(self, row: sqlite3.Row) -> Product:
        record = {key: row[key] for key in row.keys() if key != "position"}
        for key in _LIST_FIELDS:
            record[key] = json.loads(record[key]) if record[key] else []
        record["in_stock"] = bool(record["in_stock"])
        record["featured"] = bool(record["featured"])
        record["gift_suitable"] = bool(record["gift_suitable"])
        price = record["price"]
        if isinstance(price, float) and price.is_integer():
            record["price"] = int(price)
        return Product(**record)

    def create_product(self, product: Product) -> Product:
        record = product.to_record()
        for key in _LIST_FIELDS:
            record[key] = json.dumps(record[key])
        columns = ", ".join(record)
        placeholders = ", ".join(f":{key}" for key in record)
        updates = ", ".join(f"{key}=excluded.{key}" for key in record if key != "product_id")
        with self._connect() as conn:
            conn.execute(
                f"INSERT INTO products ({columns}) VALUES ({placeholders}) "
                f"ON CONFLICT(product_id) DO UPDATE SET {updates}",
                record,
            )
        return product

    def load_records(self, records: Iterable[Dict[str, Any]]) -> int:
        """Upsert loose catalog records; returns how many were stored."""

        stored = 0
        for product in coerce_products(records):
            self.create_product(product)
            stored += 1
        return stored

    def get_product(self, product_id: str) -> Optional[Product]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM products WHERE product_id = ?", (product_id,)).fetchone()
            return self._row_to_product(row) if row else None

    @instrument_call("catalog")
    def list_products(self) -> List[Product]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM products ORDER BY position").fetchall()
        return [self._row_to_product(row) for row in rows]

    def update_product(self, product_id: str, updated_fields: Dict[str, Any]) -> Optional[Product]:
        current = self.get_product(product_id)
        if not current:
            return None
        changes = {
            key: value
            for key, value in updated_fields.items()
            if key != "product_id" and hasattr(current, key)
        }
        return self.create_product(replace(current, **changes))

    def delete_product(self, product_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM products WHERE product_id = ?", (product_id,))
            return cursor.rowcount > 0


__all__ = ["CatalogProvider", "StaticCatalogProvider", "SQLiteCatalogStore", "coerce_products"]
