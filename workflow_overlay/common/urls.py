"""Link helpers for CMS URLs."""

from typing import Optional


def join_links(*parts: Optional[str]) -> str:
    """Join URL fragments with single slashes.

    Empty fragments are skipped. A query string on an earlier fragment is
    carried to the end of the joined link.
    """
    path_parts = []
    queries = []
    for part in parts:
        if part is None:
            continue
        part = str(part)
        if "?" in part:
            part, query = part.split("?", 1)
            if query:
                queries.append(query)
        if not part:
            continue
        if path_parts:
            part = part.lstrip("/")
            path_parts[-1] = path_parts[-1].rstrip("/")
        if part:
            path_parts.append(part)

    link = "/".join(path_parts)
    if queries:
        link = f"{link}?{'&'.join(queries)}"
    return link
