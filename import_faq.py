# import_faq.py
# Usage: python import_faq.py <school_id> [path/to/faq.json]
import asyncio
import json
import sys
from pathlib import Path

from shared.db import AsyncSessionLocal
# registers every model
import create_db  # noqa: F401
from services.faq_management.controllers.faq_service import extract_payload, save_faq
from services.faq_management.tree import FaqValidationError, normalize_items, validate_items

IMPORT_USER = "import-script"


async def import_faq(school_id: str, path: Path):
    raw = json.loads(path.read_text(encoding="utf-8"))
    items, meta = extract_payload(raw)
    validate_items(items)

    async with AsyncSessionLocal() as db:
        faq, action = await save_faq(db, school_id, normalize_items(items), meta, IMPORT_USER)
    print(f"✅ FAQ {action} for {school_id} (v{faq.version}, {len(faq.items)} items)")


def main(argv: list[str]) -> int:
    if not argv:
        print("Usage: python import_faq.py <school_id> [path/to/faq.json]")
        return 2

    school_id = argv[0].strip()
    path = Path(argv[1]) if len(argv) > 1 else Path("data") / f"faq-{school_id}.json"
    if not path.exists():
        print(f"❌ File not found: {path}")
        return 1

    try:
        asyncio.run(import_faq(school_id, path))
    except (json.JSONDecodeError, FaqValidationError) as e:
        print(f"❌ Invalid FAQ file: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
