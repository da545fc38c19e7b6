from __future__ import annotations

import re

_SINGLE = re.compile(r"\d+")
_RANGE = re.compile(r"(\d+)\s*-\s*(\d+)")


def _split_parts(spec: str) -> list[str]:
    return [part.strip() for part in spec.strip().split(",") if part.strip()]


def _expand_part(part: str, max_page: int) -> tuple[list[int], str | None]:
    if _SINGLE.fullmatch(part):
        page = int(part)
        if page < 1 or page > max_page:
            return [], f"Page {page} is out of range (1-{max_page})."
        return [page], None

    range_match = _RANGE.fullmatch(part)
    if range_match:
        start = int(range_match.group(1))
        end = int(range_match.group(2))
        if start > end:
            return [], f"Invalid range '{part}'. Start must be <= end."
        if start < 1 or end > max_page:
            return [], f"Range '{part}' is out of range (1-{max_page})."
        return list(range(start, end + 1)), None

    return [], f"Invalid token '{part}'. Use formats like 1,3,5-7."


def parse_page_range_spec(spec: str, max_page: int) -> tuple[list[int], str | None]:
    """Parse ``1,3,5-7`` into sorted unique 1-based page numbers."""
    parts = _split_parts(spec)
    if not parts:
        return [], "Enter one or more page numbers or ranges."

    pages: set[int] = set()
    for part in parts:
        expanded, error = _expand_part(part, max_page)
        if error:
            return [], error
        pages.update(expanded)

    return sorted(pages), None


def parse_page_order_spec(spec: str, total: int) -> tuple[list[int], str | None]:
    """Parse a complete new order such as ``3,1-2`` into 0-based positions.

    Every position from 1 to ``total`` must appear exactly once.
    """
    parts = _split_parts(spec)
    if not parts:
        return [], "Enter the new page order, e.g. 3,1-2."

    order: list[int] = []
    for part in parts:
        expanded, error = _expand_part(part, total)
        if error:
            return [], error
        order.extend(expanded)

    if len(order) != len(set(order)):
        return [], "Each page may appear only once in the new order."
    missing = sorted(set(range(1, total + 1)) - set(order))
    if missing:
        return [], "Missing pages in the new order: " + ", ".join(map(str, missing))

    return [page - 1 for page in order], None
