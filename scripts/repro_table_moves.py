import logging
import sys
from pathlib import Path

# Ensure we import the repo-local recorddiff (not a pip-installed one).
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from recorddiff import DiffOptions, build_diff, count_statuses, render_spans  # noqa: E402


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    before = {
        "number": "INV-0012",
        "goods": {
            "type": "table",
            "name": "Goods",
            "columns": ["name", "qty", "price"],
            "rows": [
                {"id": 1, "name": "Стол", "qty": 1, "price": 120},
                {"id": 2, "name": "Стул", "qty": 4, "price": 35},
                {"id": 3, "name": "Лампа", "qty": 2, "price": 18},
                {"id": 4, "name": "Полка", "qty": 1, "price": 40},
            ],
        },
    }
    after = {
        "number": "INV-0013",
        "goods": {
            "type": "table",
            "name": "Goods",
            "columns": ["name", "qty", "price"],
            "rows": [
                {"id": 3, "name": "Лампа", "qty": 2, "price": 18},
                {"id": 1, "name": "Стол", "qty": 1, "price": 120},
                {"id": 2, "name": "Стул", "qty": 6, "price": 35},
                {"id": 5, "name": "Ковёр", "qty": 1, "price": 210},
            ],
        },
    }

    result = build_diff(before, after, DiffOptions(log_decisions=True))
    for field in result.fields:
        print(field.key, field.status, render_spans(field.spans, fallback_text=field.right_text))
    for table in result.tables:
        print(table.path, count_statuses(table.rows))
        for row in table.rows:
            print("  ", row.status, row.id, row.group_id)


if __name__ == "__main__":
    main()
