"""Built-in snippets shipped with the desktop app."""

from __future__ import annotations

from datetime import date

from .engine import FALLBACK_MODE, SnippetEngine
from .prompts import PromptPolicy


def _python_class(prompts: PromptPolicy) -> str:
    base = prompts.choose("Base class", ["object", "Exception", "Protocol"], default="object")
    return f"class Name({base}):\n    pass\n"


def _python_main(_prompts: PromptPolicy) -> str:
    return 'def main() -> None:\n    ...\n\n\nif __name__ == "__main__":\n    main()\n'


def _markdown_heading(prompts: PromptPolicy) -> str:
    level = int(prompts.read_number("Heading level", default=2))
    return f"{'#' * max(1, min(level, 6))} Title"


def _markdown_table(prompts: PromptPolicy) -> str:
    columns = prompts.choose_many("Columns", ["Name", "Type", "Description"], default=["Name", "Description"])
    columns = columns or ["Column"]
    header = "| " + " | ".join(columns) + " |"
    rule = "|" + "|".join("---" for _ in columns) + "|"
    return f"{header}\n{rule}\n"


def _today(_prompts: PromptPolicy) -> str:
    return date.today().isoformat()


def build_sample_engine() -> SnippetEngine:
    """Return an engine preloaded with a handful of everyday snippets."""

    engine = SnippetEngine()
    engine.set_parents("python", "prog")
    engine.set_parents("markdown", "text")

    engine.define("todo", "TODO: ", mode="prog", description="Todo marker")
    engine.define("fixme", "FIXME: ", mode="prog", description="Fixme marker")

    engine.define("class", _python_class, mode="python", key="cls", description="Class definition")
    engine.define("main", _python_main, mode="python", description="Script entry point")
    engine.define("def", "def name():\n    pass", mode="python", description="Function definition")

    engine.define("heading", _markdown_heading, mode="markdown", key="h", description="Heading")
    engine.define("table", _markdown_table, mode="markdown", key="tbl", description="Table skeleton")
    engine.define("link", "[text](https://)", mode="markdown", description="Inline link")

    engine.define("date", _today, mode=FALLBACK_MODE, description="Today's date")
    engine.define(
        "lorem",
        "Lorem ipsum dolor sit amet, consectetur adipiscing elit.",
        mode=FALLBACK_MODE,
        description="Filler text",
    )
    return engine


__all__ = ["build_sample_engine"]
