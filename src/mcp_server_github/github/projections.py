"""Reshape raw GitHub payloads into the minimal field sets tools return"""

from typing import Any, Dict, Iterable, List, Optional


def pick(data: Optional[Dict[str, Any]], *fields: str) -> Dict[str, Any]:
    data = data or {}
    return {field: data.get(field) for field in fields}


def user(data: Optional[Dict[str, Any]], with_type: bool = True) -> Optional[Dict[str, Any]]:
    if not data:
        return None
    if with_type:
        return pick(data, "login", "id", "type")
    return pick(data, "login", "id")


def users(items: Optional[Iterable[Dict[str, Any]]], with_type: bool = True) -> Optional[List[Dict[str, Any]]]:
    if items is None:
        return None
    return [user(item, with_type) for item in items]


def label(data: Any, with_description: bool = False) -> Any:
    # The issues API may return bare label names
    if isinstance(data, str):
        return data
    if with_description:
        return pick(data, "name", "color", "description")
    return pick(data, "name", "color")


def labels(items: Optional[Iterable[Any]], with_description: bool = False) -> Optional[List[Any]]:
    if items is None:
        return None
    return [label(item, with_description) for item in items]


def repository_ref(data: Optional[Dict[str, Any]], with_owner: bool = True) -> Optional[Dict[str, Any]]:
    """Short repository reference used inside issues, pull requests and search hits."""
    if not data:
        return None
    ref = pick(data, "name", "full_name")
    if with_owner:
        ref["owner"] = {"login": (data.get("owner") or {}).get("login")}
    return ref


def git_ref(data: Optional[Dict[str, Any]], with_owner: bool = True) -> Dict[str, Any]:
    """Head or base of a pull request."""
    data = data or {}
    return {
        "ref": data.get("ref"),
        "sha": data.get("sha"),
        "repo": repository_ref(data.get("repo"), with_owner),
    }


def pull_request_link(data: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not data:
        return None
    return {"url": data.get("html_url")}


def search_page(data: Dict[str, Any], items: List[Any]) -> Dict[str, Any]:
    return {
        "total_count": data.get("total_count"),
        "incomplete_results": data.get("incomplete_results"),
        "items": items,
    }
