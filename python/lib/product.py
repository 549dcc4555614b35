#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
product.py
----------

The record stored in the product index.  A product is identified by its
``product_id`` alone: two records with the same id compare equal even if
their name, category or price differ, which is what lets a later record
replace an earlier one in the tree.

>>> from product import Product, product_key
>>> from red_black_tree import RedBlackTree
>>> index = RedBlackTree(key=product_key)
>>> index.add(Product("1001", "Wireless Mouse", "Electronics|Accessories", 29.99))
>>> print(index.search("1001"))
Product ID: 1001, Name: Wireless Mouse, Category: Electronics|Accessories, Price: $29.99
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

CATEGORY_SEPARATOR = "|"


@dataclass(frozen=True)
class Product:
    product_id: str
    name: str = field(compare=False)
    category: str = field(compare=False)
    price: float = field(compare=False)

    @property
    def categories(self) -> Tuple[str, ...]:
        """Individual category tags, in the order they were given."""
        if not self.category:
            return ()
        return tuple(self.category.split(CATEGORY_SEPARATOR))

    def __str__(self) -> str:
        return (
            f"Product ID: {self.product_id}, Name: {self.name}, "
            f"Category: {self.category}, Price: ${self.price:.2f}"
        )


def product_key(product: Product) -> str:
    """Key function for indexing products by id."""
    return product.product_id
