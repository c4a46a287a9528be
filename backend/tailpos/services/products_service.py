# backend/tailpos/services/products_service.py
"""
Catalog manager.

Products live in the store adapter's "products" collection; this module
adds keyword filtering on top and is the only writer of catalog edits.

KEYWORD MATCHING: the keyword is tried as a case-insensitive regular
expression searched anywhere in the product name. A keyword that is not a
valid pattern (e.g. "(") is matched as a literal substring instead, so the
filter never fails on operator input.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable

from . import store_service

logger = logging.getLogger(__name__)


def compile_keyword(keyword: str | None) -> re.Pattern | None:
    """Return the matcher for a keyword, or None for "no filter"."""
    if not keyword:
        return None
    try:
        return re.compile(keyword, re.IGNORECASE)
    except re.error:
        logger.debug("Keyword %r is not a valid pattern; matching literally", keyword)
        return re.compile(re.escape(keyword), re.IGNORECASE)


def filter_products(products: Iterable[dict], keyword: str | None) -> list[dict]:
    pattern = compile_keyword(keyword)
    if pattern is None:
        return list(products)
    return [p for p in products if pattern.search(p.get("name") or "")]


def list_products() -> list[dict]:
    return store_service.get_all(store_service.PRODUCTS)


def filtered_products(keyword: str | None = None) -> list[dict]:
    """Catalog filtered by keyword; the whole catalog when keyword is empty."""
    return filter_products(list_products(), keyword)


def get_product(product_id: int) -> dict | None:
    return store_service.get(store_service.PRODUCTS, product_id)


def create_product(record: dict) -> dict:
    product_id = store_service.add(store_service.PRODUCTS, record)
    logger.info("Created product id=%s name=%s", product_id, record.get("name"))
    return get_product(product_id)


def update_product(product_id: int, record: dict) -> dict | None:
    updated = store_service.update(store_service.PRODUCTS, product_id, record)
    if updated is not None:
        logger.info("Updated product id=%s", product_id)
    return updated


def delete_product(product_id: int) -> bool:
    deleted = store_service.delete(store_service.PRODUCTS, product_id)
    if deleted:
        logger.info("Deleted product id=%s", product_id)
    return deleted
