"""
NBAGameScore renderer.

Scoreboard card with a status header, one row per team (leading team
highlighted) and an optional quarter/clock footer for live games.
"""

from html import escape
from typing import Any, Dict

from uicp.components.base import BaseComponentRenderer

_STATUS_LABELS = {
    "live": "LIVE",
    "final": "FINAL",
    "scheduled": "SCHEDULED",
}


def _team_row(team: str, score: Any, leading: bool) -> str:
    css = "uicp-team uicp-team--leading" if leading else "uicp-team"
    abbrev = escape(str(team)[:3].upper())
    return (
        f'<div class="{css}">'
        f'<span class="uicp-team__badge">{abbrev}</span>'
        f'<span class="uicp-team__name">{escape(str(team))}</span>'
        f'<span class="uicp-team__score">{escape(str(score))}</span>'
        f"</div>"
    )


def _as_number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


class NBAGameScoreRenderer(BaseComponentRenderer):

    @property
    def component_id(self) -> str:
        return "NBAGameScore"

    def render(self, data: Dict[str, Any]) -> str:
        home_team = data["homeTeam"]
        away_team = data["awayTeam"]
        home_score = data["homeScore"]
        away_score = data["awayScore"]
        status = str(data.get("gameStatus") or "final").lower()

        home_leading = _as_number(home_score) > _as_number(away_score)
        away_leading = _as_number(away_score) > _as_number(home_score)

        header = f'<span class="uicp-score__status">{_STATUS_LABELS.get(status, "FINAL")}</span>'
        if status == "live":
            header = '<span class="uicp-score__live-dot"></span>' + header
        if data.get("gameDate"):
            header += f'<span class="uicp-score__date">{escape(str(data["gameDate"]))}</span>'

        footer = ""
        clock = [escape(str(data[k])) for k in ("quarter", "timeRemaining") if data.get(k)]
        if clock:
            footer = f'<div class="uicp-score__footer">{" &bull; ".join(clock)}</div>'

        return (
            f'<div class="uicp-component uicp-score" data-uicp-uid="{self.component_id}">'
            f'<div class="uicp-score__header">{header}</div>'
            f'<div class="uicp-score__body">'
            f"{_team_row(away_team, away_score, away_leading)}"
            f"{_team_row(home_team, home_score, home_leading)}"
            f"</div>"
            f"{footer}"
            f"</div>"
        )
