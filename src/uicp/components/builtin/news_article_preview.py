"""NewsArticlePreview renderer: article card, clickable when a url is given."""

from html import escape
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

from uicp.components.base import BaseComponentRenderer

_SAFE_SCHEMES = ("http", "https")


def _safe_url(value: Any) -> Optional[str]:
    """Escaped ``value`` when it is an absolute http(s) URL, else None."""
    if not value:
        return None
    url = str(value).strip()
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if parts.scheme.lower() not in _SAFE_SCHEMES or not parts.netloc:
        return None
    return escape(url)


class NewsArticlePreviewRenderer(BaseComponentRenderer):

    @property
    def component_id(self) -> str:
        return "NewsArticlePreview"

    def render(self, data: Dict[str, Any]) -> str:
        headline = escape(str(data["headline"]))

        thumbnail = ""
        image_url = _safe_url(data.get("imageUrl"))
        if image_url:
            thumbnail = (
                f'<div class="uicp-article__thumb">'
                f'<img src="{image_url}" alt="{headline}"></div>'
            )

        meta = [
            f'<span class="uicp-article__source">{escape(str(data["source"]))}</span>',
            f"<span>{escape(str(data['publishedDate']))}</span>",
        ]
        if data.get("author"):
            meta.append(f"<span>By {escape(str(data['author']))}</span>")

        body = (
            f"{thumbnail}"
            f'<div class="uicp-article__content">'
            f'<h3 class="uicp-article__headline">{headline}</h3>'
            f'<p class="uicp-article__description">{escape(str(data["description"]))}</p>'
            f'<div class="uicp-article__meta">{" &bull; ".join(meta)}</div>'
            f"</div>"
        )

        attrs = f'class="uicp-component uicp-article" data-uicp-uid="{self.component_id}"'
        href = _safe_url(data.get("url"))
        if href:
            return f'<a {attrs} href="{href}" target="_blank" rel="noopener noreferrer">{body}</a>'
        return f"<div {attrs}>{body}</div>"
