from dataclasses import dataclass
from html import escape
from typing import Iterable
from urllib.parse import quote

STYLE_BASE = """
    :root { color-scheme: light dark; }
    *, *:before, *:after { box-sizing: border-box; margin: 0; padding: 0; }
    @media (prefers-color-scheme: dark) {
        body { color: #eee; background-color: #333; }
    }
"""

NOT_FOUND_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>404 Not Found</title>
<style>{style}
    body {{ height: 100vh; display: flex; flex-direction: column; justify-content: center;
           align-items: center; font-family: sans-serif; text-align: center; }}
    h1 {{ font-size: 120px; font-weight: 900; }}
    p {{ font-size: 24px; }}
    code {{ background: rgba(127, 127, 127, 0.25); padding: 2px 6px; border-radius: 4px; }}
</style>
</head>
<body>
<h1>404</h1>
<p>Page Not Found: <code>{path}</code></p>
</body>
</html>
"""

LISTING_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Index of {path}</title>
<style>{style}
    body {{ font-family: monospace; padding: 20px; display: flex; flex-direction: column; gap: 1rem; }}
    h1 {{ border-bottom: 1px solid #999; padding-bottom: 10px; }}
    ul {{ list-style: none; }}
    li {{ padding: 5px 0; }}
    a {{ text-decoration: none; color: #007bff; }}
    a:hover {{ text-decoration: underline; }}
</style>
</head>
<body>
<h1>{path}</h1>
<ul>
{items}
</ul>
</body>
</html>
"""

ITEM = '<li><a href="{href}">{label}</a></li>'


@dataclass(frozen=True)
class ListingEntry:
    name: str
    is_dir: bool

    @property
    def label(self) -> str:
        return self.name + "/" if self.is_dir else self.name

    def href(self, base: str) -> str:
        if not base.endswith("/"):
            base += "/"
        return base + quote(self.label)


def parent_href(path: str) -> str:
    head = path.rstrip("/").rsplit("/", 1)[0]
    return head + "/"


def render_not_found(path: str) -> str:
    return NOT_FOUND_PAGE.format(style=STYLE_BASE, path=escape(path))


def render_directory_listing(
    path: str, entries: Iterable[ListingEntry], show_parent: bool
) -> str:
    base = quote(path, safe="/")
    items = []
    if show_parent:
        items.append(ITEM.format(href=escape(parent_href(base)), label="../"))
    for entry in entries:
        items.append(ITEM.format(href=escape(entry.href(base)), label=escape(entry.label)))
    return LISTING_PAGE.format(
        style=STYLE_BASE, path=escape(path), items="\n".join(items)
    )
