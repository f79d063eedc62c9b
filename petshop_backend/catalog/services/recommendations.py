# catalog/services/recommendations.py

"""
======================================================
PATH: catalog/services/recommendations.py
======================================================
PRODUCT RECOMMENDATIONS

Strategies:
- similar: same category (0.5, +0.3 same brand, +0.2 price within 20%,
  +0.1 rating > 4) and tag overlap (0.3 + 0.4 * common / own tags)
- frequently bought together: share of (non-cancelled) orders containing
  both products; falls back to similar when there is no order history
- trending: 7-day activity, min((events * 0.3 + purchases * 0.7) / 100, 1.0);
  falls back to in-stock bestsellers at 0.8
- personalized: browsing history (0.6), purchase history (0.8),
  co-purchases of other shoppers (0.7), preferred categories (0.5);
  falls back to trending

Results are cached (Django cache) as (product_id, score, reason) triples
for RECOMMENDATION_CACHE_SECONDS and re-hydrated on read, so inactive
products drop out of cached lists immediately.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal

from django.apps import apps
from django.conf import settings
from django.core.cache import cache
from django.db.models import Count, Q
from django.utils import timezone

from catalog.models import Product, ProductEvent

logger = logging.getLogger("catalog")

DEFAULT_LIMIT = 12
TRENDING_WINDOW_DAYS = 7
HISTORY_WINDOW_DAYS = 30
ORDER_SCAN_LIMIT = 1000

CANCELLED_STATUS = "cancelled"


@dataclass
class Recommendation:
    product: Product
    score: float
    reason: str


# ---------------------------------------------------------
# Cache helpers
# ---------------------------------------------------------
def _cache_seconds() -> int:
    return int(getattr(settings, "RECOMMENDATION_CACHE_SECONDS", 1800))


def _cache_key(kind: str, key, limit: int) -> str:
    return f"reco:{kind}:{key}:{limit}"


def _personal_key(user=None, session_id: str = "") -> str:
    if user is not None and getattr(user, "is_authenticated", False):
        return f"user-{user.pk}"
    return f"session-{session_id}"


def _store(key: str, recs: list[Recommendation]) -> None:
    cache.set(key, [(str(r.product.pk), r.score, r.reason) for r in recs], _cache_seconds())


def _load(key: str):
    raw = cache.get(key)
    if raw is None:
        return None

    products = Product.objects.filter(pk__in=[pid for pid, _, _ in raw], is_active=True)
    by_id = {str(p.pk): p for p in products}
    out = []
    for pid, score, reason in raw:
        product = by_id.get(pid)
        if product is not None:
            out.append(Recommendation(product=product, score=score, reason=reason))
    return out


def invalidate_personal_cache(*, user=None, session_id: str = "") -> None:
    cache.delete(_cache_key("personalized", _personal_key(user, session_id), DEFAULT_LIMIT))


# ---------------------------------------------------------
# Scoring helpers
# ---------------------------------------------------------
def _merge(recs: list[Recommendation], limit: int) -> list[Recommendation]:
    """
    Deduplicate by product keeping the best score, then order by score.
    """
    best: dict = {}
    for rec in recs:
        current = best.get(rec.product.pk)
        if current is None or rec.score > current.score:
            best[rec.product.pk] = rec
    ordered = sorted(best.values(), key=lambda r: r.score, reverse=True)
    return ordered[:limit]


def _available():
    return Product.objects.filter(is_active=True, stock_quantity__gt=0)


def similarity_score(base: Product, other: Product) -> float:
    score = 0.5
    if base.brand_id and other.brand_id == base.brand_id:
        score += 0.3
    if base.price and base.price > 0:
        diff = abs((other.price - base.price) / base.price)
        if diff < Decimal("0.2"):
            score += 0.2
    if other.rating > 4:
        score += 0.1
    return round(score, 4)


def tag_overlap_score(base_tags: list, other_tags: list) -> tuple[float, int]:
    own = list(base_tags or [])
    common = len([t for t in (other_tags or []) if t in own])
    return round(0.3 + (common / (len(own) or 1)) * 0.4, 4), common


# ---------------------------------------------------------
# Strategies
# ---------------------------------------------------------
def similar_products(product: Product, *, limit: int = DEFAULT_LIMIT) -> list[Recommendation]:
    key = _cache_key("similar", product.pk, limit)
    cached = _load(key)
    if cached is not None:
        return cached

    recs: list[Recommendation] = []
    candidates = _available().exclude(pk=product.pk)

    if product.category_id:
        for p in candidates.filter(category_id=product.category_id)[: limit * 2]:
            recs.append(
                Recommendation(
                    product=p,
                    score=similarity_score(product, p),
                    reason="Similar category and features",
                )
            )

    if product.tags:
        tag_q = Q()
        for tag in product.tags:
            tag_q |= Q(tags__icontains=f'"{tag}"')
        for p in candidates.filter(tag_q)[:limit]:
            score, common = tag_overlap_score(product.tags, p.tags)
            if common:
                recs.append(Recommendation(product=p, score=score, reason=f"Similar tags ({common} common)"))

    result = _merge(recs, limit)
    _store(key, result)
    return result


def frequently_bought_together(product: Product, *, limit: int = 6) -> list[Recommendation]:
    key = _cache_key("fbt", product.pk, limit)
    cached = _load(key)
    if cached is not None:
        return cached

    OrderItem = apps.get_model("orders", "OrderItem")

    order_ids = list(
        OrderItem.objects.filter(product=product)
        .exclude(order__status=CANCELLED_STATUS)
        .values_list("order_id", flat=True)
        .distinct()[:ORDER_SCAN_LIMIT]
    )

    counts = Counter(
        OrderItem.objects.filter(order_id__in=order_ids, product__isnull=False)
        .exclude(product_id=product.pk)
        .values_list("product_id", flat=True)
    )

    if not counts:
        return similar_products(product, limit=limit)

    top_ids = [pid for pid, _ in counts.most_common(limit)]
    by_id = Product.objects.filter(pk__in=top_ids, is_active=True).in_bulk()

    recs = []
    for pid in top_ids:
        p = by_id.get(pid)
        if p is None:
            continue
        freq = counts[pid]
        recs.append(
            Recommendation(
                product=p,
                score=round(min(freq / len(order_ids), 1.0), 4),
                reason=f"Frequently bought together ({freq} times)",
            )
        )

    result = _merge(recs, limit)
    _store(key, result)
    return result


def trending_products(*, limit: int = DEFAULT_LIMIT) -> list[Recommendation]:
    key = _cache_key("trending", "global", limit)
    cached = _load(key)
    if cached is not None:
        return cached

    since = timezone.now() - timedelta(days=TRENDING_WINDOW_DAYS)
    activity = list(
        ProductEvent.objects.filter(
            created_at__gte=since,
            event_type__in=[
                ProductEvent.EventType.VIEW,
                ProductEvent.EventType.CLICK,
                ProductEvent.EventType.PURCHASE,
            ],
        )
        .values("product_id")
        .annotate(
            events=Count("id"),
            purchases=Count("id", filter=Q(event_type=ProductEvent.EventType.PURCHASE)),
        )
        .order_by("-events", "-purchases")[: limit * 2]
    )

    if not activity:
        bestsellers = _available().filter(is_bestseller=True).order_by("-rating", "-review_count")[:limit]
        result = [Recommendation(product=p, score=0.8, reason="Popular bestseller") for p in bestsellers]
        _store(key, result)
        return result

    by_id = _available().filter(pk__in=[row["product_id"] for row in activity]).in_bulk()
    recs = []
    for row in activity:
        p = by_id.get(row["product_id"])
        if p is None:
            continue
        events, purchases = row["events"], row["purchases"]
        score = min((events * 0.3 + purchases * 0.7) / 100, 1.0)
        recs.append(
            Recommendation(
                product=p,
                score=round(score, 4),
                reason=f"Trending ({events} views, {purchases} purchases this week)",
            )
        )

    result = _merge(recs, limit)
    _store(key, result)
    return result


def _events_for(user=None, session_id: str = ""):
    if user is not None and getattr(user, "is_authenticated", False):
        return ProductEvent.objects.filter(user=user)
    if session_id:
        return ProductEvent.objects.filter(session_id=session_id)
    return ProductEvent.objects.none()


def _user_order_items(user):
    OrderItem = apps.get_model("orders", "OrderItem")
    return OrderItem.objects.filter(order__user=user, product__isnull=False).exclude(
        order__status=CANCELLED_STATUS
    )


def personalized_recommendations(*, user=None, session_id: str = "", limit: int = DEFAULT_LIMIT) -> list[Recommendation]:
    is_user = user is not None and getattr(user, "is_authenticated", False)
    if not is_user and not session_id:
        return trending_products(limit=limit)

    key = _cache_key("personalized", _personal_key(user, session_id), limit)
    cached = _load(key)
    if cached is not None:
        return cached

    recs: list[Recommendation] = []
    events = _events_for(user, session_id)

    # Browsing history (last 30 days)
    since = timezone.now() - timedelta(days=HISTORY_WINDOW_DAYS)
    recent = list(
        events.filter(
            created_at__gte=since,
            event_type__in=[ProductEvent.EventType.VIEW, ProductEvent.EventType.CLICK],
        )
        .select_related("product")
        .order_by("-created_at")[:50]
    )
    if recent:
        cat_ids = {e.product.category_id for e in recent if e.product.category_id}
        brand_ids = {e.product.brand_id for e in recent if e.product.brand_id}
        for p in _available().filter(Q(category_id__in=cat_ids) | Q(brand_id__in=brand_ids))[: limit * 2]:
            recs.append(Recommendation(product=p, score=0.6, reason="Based on your browsing history"))

    if is_user:
        bought = list(_user_order_items(user).select_related("product")[:200])
        bought_ids = {i.product_id for i in bought}

        # Purchase history
        cat_ids = {i.product.category_id for i in bought if i.product.category_id}
        brand_ids = {i.product.brand_id for i in bought if i.product.brand_id}
        if cat_ids or brand_ids:
            for p in _available().filter(Q(category_id__in=cat_ids) | Q(brand_id__in=brand_ids))[:limit]:
                recs.append(Recommendation(product=p, score=0.8, reason="Based on your purchase history"))

        # Shoppers who bought the same products
        if bought_ids:
            OrderItem = apps.get_model("orders", "OrderItem")
            peer_orders = (
                OrderItem.objects.filter(product_id__in=bought_ids)
                .exclude(order__user=user)
                .exclude(order__status=CANCELLED_STATUS)
                .values_list("order_id", flat=True)
                .distinct()[:100]
            )
            peer_counts = Counter(
                OrderItem.objects.filter(order_id__in=list(peer_orders), product__isnull=False)
                .exclude(product_id__in=bought_ids)
                .values_list("product_id", flat=True)
            )
            top_ids = [pid for pid, _ in peer_counts.most_common(limit)]
            for p in _available().filter(pk__in=top_ids):
                recs.append(
                    Recommendation(product=p, score=0.7, reason="Shoppers with similar taste also bought")
                )

    # Preferred categories (last 100 signals)
    cat_counts = Counter(
        cid
        for cid in events.order_by("-created_at").values_list("product__category_id", flat=True)[:100]
        if cid
    )
    top_categories = [cid for cid, _ in cat_counts.most_common(3)]
    if top_categories:
        for p in _available().filter(category_id__in=top_categories).order_by("-rating", "-review_count")[:limit]:
            recs.append(Recommendation(product=p, score=0.5, reason="Popular in your preferred categories"))

    result = _merge(recs, limit)
    if not result:
        return trending_products(limit=limit)

    _store(key, result)
    return result


# ---------------------------------------------------------
# Tracking
# ---------------------------------------------------------
def track_event(*, product: Product, event_type: str, user=None, session_id: str = "", metadata=None) -> ProductEvent:
    is_user = user is not None and getattr(user, "is_authenticated", False)
    event = ProductEvent.objects.create(
        product=product,
        user=user if is_user else None,
        session_id=(session_id or "")[:64],
        event_type=event_type,
        metadata=metadata or {},
    )
    invalidate_personal_cache(user=user if is_user else None, session_id=session_id)
    return event
