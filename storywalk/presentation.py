"""Terminal rendering for story text, choice lists, and ending banners."""

from __future__ import annotations

import textwrap
from typing import Callable, Mapping

from storywalk.settings import Settings
from storywalk.story import Choice, EndingKind, Node

PrintFunc = Callable[[str], None]

BANNER_WIDTH = 60
TEXT_BORDER_WIDTH = 50

ENDING_BANNERS: Mapping[EndingKind, str] = {
    EndingKind.VICTORY: "CONGRATULATIONS! YOU ACHIEVED VICTORY!",
    EndingKind.DEFEAT: "GAME OVER - Better luck next time!",
    EndingKind.MYSTERY: "THE MYSTERY CONTINUES... What happens next?",
    EndingKind.WISDOM: "YOU HAVE GAINED GREAT WISDOM!",
    EndingKind.THE_END: "THE END",
}


def separator(width: int, settings: Settings, *, primary: bool) -> str:
    if settings.high_contrast:
        char = "#" if primary else "="
    else:
        char = "=" if primary else "-"
    return char * width


def format_heading(text: str, settings: Settings) -> str:
    return text.upper() if settings.high_contrast else text


def wrap_text(text: str, width: int) -> list[str]:
    lines: list[str] = []
    for paragraph in text.split("\n"):
        if paragraph.strip():
            lines.extend(textwrap.wrap(paragraph, width=width))
        else:
            lines.append("")
    return lines


class Presenter:
    """Owns every formatting decision; the engine hands it strings and ending kinds."""

    def __init__(self, settings: Settings | None = None, *, print_func: PrintFunc = print) -> None:
        self.settings = (settings or Settings()).copy().clamp()
        self.print = print_func

    @property
    def line_width(self) -> int:
        return self.settings.line_width

    def show_welcome(self, title: str) -> None:
        self.print(separator(BANNER_WIDTH, self.settings, primary=True))
        self.print(format_heading(f"WELCOME TO {title.upper()}", self.settings).center(BANNER_WIDTH).rstrip())
        self.print(separator(BANNER_WIDTH, self.settings, primary=True))
        self.print("Your choices will determine your fate in this magical world...")
        self.print("")

    def show_restart(self) -> None:
        self.print("")
        self.print(separator(BANNER_WIDTH, self.settings, primary=True))
        self.print("Starting a new adventure...")
        self.print(separator(BANNER_WIDTH, self.settings, primary=True))

    def show_farewell(self) -> None:
        self.print("")
        self.print("Thank you for playing! May your real adventures be as exciting!")

    def show_text(self, text: str, *, title: str | None = None) -> None:
        self.print("")
        self.print(separator(TEXT_BORDER_WIDTH, self.settings, primary=False))
        if title:
            self.print(format_heading(title, self.settings))
        for line in wrap_text(text, self.line_width):
            self.print(line)
        self.print(separator(TEXT_BORDER_WIDTH, self.settings, primary=False))

    def show_choices(self, node: Node) -> None:
        self.print("")
        self.print(format_heading("What do you choose?", self.settings))
        for idx, choice in node.choices.items():
            if self.settings.high_contrast:
                self.print(f"[{idx}] {choice.text.upper()}")
            else:
                self.print(f"{idx}. {choice.text}")

    def choice_prompt(self, node: Node) -> str:
        return f"\nEnter your choice ({node.choice_range()}): "

    def show_selection(self, choice: Choice) -> None:
        self.print("")
        self.print(f"> {choice.text}")

    def show_error(self, message: str) -> None:
        self.print(message)

    def show_ending(self, kind: EndingKind | None) -> None:
        banner = ENDING_BANNERS.get(EndingKind.parse(kind), ENDING_BANNERS[EndingKind.THE_END])
        self.print("")
        self.print("*" * BANNER_WIDTH)
        self.print(format_heading(banner, self.settings).center(BANNER_WIDTH).rstrip())
        self.print("*" * BANNER_WIDTH)
