# catalog/services/slugs.py

"""
SLUG HELPERS

Rules:
- Slugs are derived from a display name: lower-case, ASCII, hyphenated.
- Collisions get a numeric suffix: "cat-food", "cat-food-2", "cat-food-3", ...
- Existing slugs are never regenerated on rename (caller decides).
"""

from __future__ import annotations

from django.utils.text import slugify


def base_slug(value: str, *, max_length: int = 200) -> str:
    slug = slugify(value or "", allow_unicode=False)[:max_length].strip("-")
    return slug or "item"


def unique_slug(model, value: str, *, instance=None, field_name: str = "slug", max_length: int = 200) -> str:
    """
    Return a slug for `value` that is unique for `model.<field_name>`.

    `instance` is excluded from the collision check so saving an
    existing row does not collide with itself.
    """
    root = base_slug(value, max_length=max_length)
    qs = model._default_manager.all()
    if instance is not None and instance.pk is not None:
        qs = qs.exclude(pk=instance.pk)

    candidate = root
    n = 1
    while qs.filter(**{field_name: candidate}).exists():
        n += 1
        suffix = f"-{n}"
        candidate = f"{root[: max_length - len(suffix)]}{suffix}"
    return candidate
