from markdown_it import MarkdownIt

from ..core.ports import ProseRenderer


class MarkdownRenderer(ProseRenderer):
    """
    CommonMark -> HTML with raw HTML disabled, so inline tags in the source
    are escaped instead of passed through.
    """

    def __init__(self, tables: bool = True):
        self.md = MarkdownIt("commonmark", {"html": False})
        if tables:
            self.md.enable("table")

    def render(self, text: str) -> str:
        return self.md.render(text)
