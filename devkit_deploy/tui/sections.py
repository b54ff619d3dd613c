from typing import Iterable, Optional

from rich.panel import Panel

from devkit_deploy.models import HostResultStatus
from devkit_deploy.tui.enums import HOST_STATUS_STYLE, UIStyle


class UISection:
    @staticmethod
    def wrap(title: str, body, style: str = UIStyle.BLUE.value, subtitle: Optional[str] = None) -> Panel:
        return Panel(body, title=title, subtitle=subtitle, border_style=style, padding=(0, 1))

    @staticmethod
    def note(title: str, body: str, style: str) -> Panel:
        return Panel(body, title=title, border_style=style, padding=(0, 1))

    @staticmethod
    def bullets(title: str, headline: Optional[str], items: Iterable[str], style: str) -> Panel:
        lines = [headline] if headline else []
        lines.extend(f"- {item}" for item in items)
        return UISection.note(title, "\n".join(lines), style=style)

    @staticmethod
    def status_label(status: HostResultStatus) -> str:
        style = HOST_STATUS_STYLE.get(status, UIStyle.WHITE.value)
        return f"[{style}]{status.value}[/{style}]"
