"""
Distinct category/topic extraction for populating the filter controls.

Copyright (C) 2025 Maigie

Licensed under the Business Source License 1.1 (BUSL-1.1).
See LICENSE file in the repository root for details.
"""

from collections.abc import Iterable

from ..repositories.base import RawRecord


def distinct_values(records: Iterable[RawRecord], field_name: str) -> list[str]:
    """
    Sorted, duplicate-free non-blank string values of one stored field.

    Comparison is case-sensitive, so "Frameworks" and "frameworks" are both
    kept. Blank strings and non-string values are skipped.
    """
    values: set[str] = set()
    for record in records:
        value = record.data.get(field_name)
        if isinstance(value, str) and value.strip():
            values.add(value)
    return sorted(values)
