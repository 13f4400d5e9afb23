"""Katalog erişimi: satır -> DiscountRule dönüşümü, kod araması, otomatik aday listesi."""
from datetime import timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

from app.services.discount_catalog import CatalogUnavailable, DiscountCatalog
from app.services.discount_types import AllTarget, CategoryTarget, DiscountKind, ProductTarget
from factories import NOW


def test_find_by_code_exact_match(db, make_discount):
    make_discount(code="SALE10", product_ids=None)
    catalog = DiscountCatalog(db)
    found = catalog.find_by_code("SALE10")
    assert found is not None
    assert found.kind == DiscountKind.PERCENTAGE
    assert isinstance(found.target, AllTarget)
    assert catalog.find_by_code("sale10") is None
    assert catalog.find_by_code("NOPE") is None


def test_target_lists_become_tagged_variants(db, make_discount):
    make_discount(code="P", target_type="products", product_ids=["p1", "p2"])
    make_discount(code="C", target_type="categories", category_names=["GPU"])
    catalog = DiscountCatalog(db)
    products = catalog.find_by_code("P").target
    assert isinstance(products, ProductTarget)
    assert products.product_ids == frozenset({"p1", "p2"})
    assert isinstance(catalog.find_by_code("C").target, CategoryTarget)


def test_automatic_candidates_filtering(db, make_discount):
    make_discount(code=None, name="auto ok", is_automatic=True)
    make_discount(code="MANUAL", is_automatic=False)
    make_discount(code=None, name="auto inactive", is_automatic=True, status="inactive")
    make_discount(
        code=None,
        name="auto expired",
        is_automatic=True,
        start_date=NOW - timedelta(days=10),
        end_date=NOW - timedelta(days=1),
    )
    make_discount(
        code=None,
        name="auto future",
        is_automatic=True,
        start_date=NOW + timedelta(days=1),
        end_date=NOW + timedelta(days=10),
    )
    names = [r.name for r in DiscountCatalog(db).list_automatic_candidates(NOW)]
    assert names == ["auto ok"]


def test_store_failure_raises_catalog_unavailable():
    # Tabloları oluşturulmamış bir veritabanı: sorgu OperationalError verir
    broken = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    with Session(broken) as session:
        catalog = DiscountCatalog(session)
        with pytest.raises(CatalogUnavailable):
            catalog.find_by_code("SALE10")
        with pytest.raises(CatalogUnavailable):
            catalog.list_automatic_candidates(NOW)


def test_unreadable_row(db, make_discount):
    make_discount(code="BROKEN", discount_type="bogus")
    make_discount(code=None, name="auto broken", is_automatic=True, status="active", discount_type="bogus")
    make_discount(code=None, name="auto ok", is_automatic=True)
    catalog = DiscountCatalog(db)
    with pytest.raises(CatalogUnavailable):
        catalog.find_by_code("BROKEN")
    assert [r.name for r in catalog.list_automatic_candidates(NOW)] == ["auto ok"]
