# services/faq_management/tree.py
"""
FAQ decision trees.

A tree is a list of root items. Each item is either a leaf question

    {"type": "question", "question": str, "answer": str, "url": str?}

or a branching select whose options point at the next item

    {"type": "select", "question": str, "answer": str?,
     "options": [{"label": str, "next": <item>}, ...]}

Selects may nest to any depth. A node is addressed by a path tuple: the root
item index followed by one option index per level.
"""
import hashlib
import re
from typing import Any, Iterator

QUESTION = "question"
SELECT = "select"

_HTTP_URL = re.compile(r"^https?://", re.IGNORECASE)


class FaqValidationError(ValueError):
    pass


# --- NORMALIZATION ---

def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return "" if value is None else str(value)


def normalize_item(raw: Any) -> dict:
    item = raw if isinstance(raw, dict) else {}
    if item.get("type") == SELECT:
        node = {"type": SELECT, "question": _text(item.get("question"))}
        if item.get("answer") is not None:
            node["answer"] = _text(item.get("answer"))
        raw_options = item.get("options") if isinstance(item.get("options"), list) else []
        node["options"] = [
            {
                "label": opt.get("label") if isinstance(opt, dict) and isinstance(opt.get("label"), str) else "",
                "next": normalize_item(opt.get("next") if isinstance(opt, dict) else None),
            }
            for opt in raw_options
        ]
        return node

    # anything that is not a select is served as a plain question
    node = {
        "type": QUESTION,
        "question": _text(item.get("question")),
        "answer": _text(item.get("answer")),
    }
    url = item.get("url")
    if isinstance(url, str) and url.strip():
        node["url"] = url
    return node


def normalize_items(raw: Any) -> list[dict]:
    if not isinstance(raw, list):
        return []
    return [normalize_item(item) for item in raw]


# --- STRICT VALIDATION (write path) ---

def _validate_item(item: Any):
    if not isinstance(item, dict):
        raise FaqValidationError("FAQ items must be objects")

    item_type = item.get("type")
    if not item_type or not item.get("question"):
        raise FaqValidationError("type and question are required")

    if item_type == QUESTION:
        if not isinstance(item.get("answer"), str):
            raise FaqValidationError("answer must be a string")
    elif item_type == SELECT:
        options = item.get("options")
        if not isinstance(options, list):
            raise FaqValidationError("select options must be a list")
        for opt in options:
            if not isinstance(opt, dict) or not isinstance(opt.get("label"), str):
                raise FaqValidationError("select option label must be a string")
            if not isinstance(opt.get("next"), dict):
                raise FaqValidationError("select option next must be an FAQ item")
            _validate_item(opt["next"])
    else:
        raise FaqValidationError(f"unknown type: {item_type}")


def validate_items(items: Any):
    if not isinstance(items, list):
        raise FaqValidationError("FAQ must be a list")
    for item in items:
        _validate_item(item)


# --- TRAVERSAL ---

def walk(items: list[dict]) -> Iterator[tuple[tuple[int, ...], dict]]:
    """Depth-first over every node, in document order."""
    def _walk(node, path):
        yield path, node
        if isinstance(node, dict) and node.get("type") == SELECT:
            for index, opt in enumerate(node.get("options") or []):
                if isinstance(opt, dict) and opt.get("next") is not None:
                    yield from _walk(opt["next"], path + (index,))

    for index, item in enumerate(items or []):
        yield from _walk(item, (index,))


def parse_path(raw: str) -> tuple[int, ...]:
    try:
        path = tuple(int(part) for part in raw.split("."))
    except ValueError:
        raise ValueError(f"invalid path: {raw!r}") from None
    if not path or any(index < 0 for index in path):
        raise ValueError(f"invalid path: {raw!r}")
    return path


def find_node(items: list[dict], path: tuple[int, ...]) -> dict:
    if not path:
        raise KeyError(path)
    try:
        node = items[path[0]]
        for index in path[1:]:
            if node.get("type") != SELECT:
                raise KeyError(path)
            node = node["options"][index]["next"]
    except (IndexError, TypeError, AttributeError):
        raise KeyError(path) from None
    return node


# --- ISSUE COUNTS (lint) ---

def count_issues(items: Any) -> dict[str, int]:
    issues = {
        "empty_question": 0,
        "empty_answer": 0,
        "unlabeled_option": 0,
        "invalid_url": 0,
    }
    roots = items if isinstance(items, list) else [items] if items else []

    for _, node in walk(roots):
        if not isinstance(node, dict):
            continue
        if not _text(node.get("question")).strip():
            issues["empty_question"] += 1

        if node.get("type") == SELECT:
            options = node.get("options")
            if not isinstance(options, list) or not options:
                issues["unlabeled_option"] += 1
                continue
            for opt in options:
                label = opt.get("label") if isinstance(opt, dict) else None
                if not isinstance(label, str) or not label.strip():
                    issues["unlabeled_option"] += 1
        else:
            if not _text(node.get("answer")).strip():
                issues["empty_answer"] += 1
            url = node.get("url")
            if url and not _HTTP_URL.match(_text(url)):
                issues["invalid_url"] += 1

    return issues


def total_issues(issues: dict[str, int]) -> int:
    return sum(issues.values())


def is_valid_document(doc: dict) -> bool:
    if not doc or not doc.get("school") or not doc.get("items"):
        return False
    return total_issues(count_issues(doc["items"])) == 0


def document_etag(school: str, version: int, updated_at: str) -> str:
    return hashlib.sha1(f"{school}:{version}:{updated_at}".encode("utf-8")).hexdigest()
