"""
Markdown to slide transformation.

Only a small part of Markdown carries meaning here:
- `# Heading`    -> intro slide (the paragraph right after it is the subtitle)
- `## Heading`   -> text slide, collects the following paragraphs and lists
- `> quote`      -> standalone quote slide
Everything else is ignored. Inline markers (**bold**, __underline__) are kept
raw in the slide text for the rich-text composer.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from markdown_it import MarkdownIt

from carousel.design import BULLET, SMALL_QUOTE_THRESHOLD, get_final_slide_template
from carousel.errors import InvalidInput
from carousel.models import Slide

logger = logging.getLogger(__name__)

LIST_OPEN = ("bullet_list_open", "ordered_list_open")


@dataclass
class BlockToken:
    """One top-level Markdown block."""
    kind: str  # heading | paragraph | list | blockquote | other
    text: str = ""
    depth: int = 0
    items: List[str] = field(default_factory=list)
    tokens: List["BlockToken"] = field(default_factory=list)


def _closing_index(tokens, start: int) -> int:
    if tokens[start].nesting != 1:
        return start
    depth = 0
    for index in range(start, len(tokens)):
        depth += tokens[index].nesting
        if depth == 0:
            return index
    return len(tokens) - 1


def _inline_text(tokens, level: Optional[int] = None) -> str:
    parts = [t.content for t in tokens if t.type == "inline" and (level is None or t.level == level)]
    return "\n".join(parts)


def _list_items(tokens, level: int) -> List[str]:
    items = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token.type == "list_item_open" and token.level == level + 1:
            end = _closing_index(tokens, index)
            # Direct paragraphs of the item only, nested lists are skipped
            items.append(_inline_text(tokens[index + 1:end], level + 3))
            index = end
        index += 1
    return items


def _fold(tokens, level: int = 0) -> List[BlockToken]:
    blocks = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token.level != level or token.nesting == -1:
            index += 1
            continue

        end = _closing_index(tokens, index)
        inner = tokens[index + 1:end]

        if token.type == "heading_open":
            blocks.append(BlockToken("heading", text=_inline_text(inner), depth=int(token.tag[1:])))
        elif token.type == "paragraph_open":
            blocks.append(BlockToken("paragraph", text=_inline_text(inner)))
        elif token.type in LIST_OPEN:
            blocks.append(BlockToken("list", items=_list_items(inner, level)))
        elif token.type == "blockquote_open":
            blocks.append(BlockToken("blockquote", tokens=_fold(inner, level + 1)))
        else:
            blocks.append(BlockToken("other", text=token.content))

        index = end + 1
    return blocks


def tokenize(markup: str) -> List[BlockToken]:
    """Flat stream of top-level blocks (heading, paragraph, list, blockquote, other)."""
    md = MarkdownIt("commonmark")
    return _fold(md.parse(markup))


@dataclass
class _TextSlideDraft:
    slide: Slide
    paragraphs: List[str] = field(default_factory=list)
    lists: List[List[str]] = field(default_factory=list)

    def finish(self):
        text = "\n\n".join(self.paragraphs)
        items = [f"{BULLET} {item}" for items in self.lists for item in items]
        if items:
            if text:
                text += "\n\n"
            text += "\n".join(items)
        self.slide.text = text


def quote_size(text: str) -> str:
    return "small" if len(text) > SMALL_QUOTE_THRESHOLD else "large"


def markdown_to_slides(markup: str, tokenizer: Callable[[str], List[BlockToken]] = tokenize) -> List[Slide]:
    """Group Markdown blocks into an ordered list of slides."""
    start_time = time.perf_counter()
    logger.info(f"Parsing markdown to slides ({len(markup)} chars)")

    try:
        blocks = tokenizer(markup)
    except Exception as e:
        logger.error(f"Markdown parsing failed: {e}")
        raise InvalidInput(
            "Could not process markdown text",
            details={"originalError": str(e)},
        ) from e

    slides = []
    drafts = []
    current = None
    index = 0

    while index < len(blocks):
        block = blocks[index]

        if block.kind == "heading" and block.depth == 1:
            subtitle = ""
            following = blocks[index + 1] if index + 1 < len(blocks) else None
            if following is not None and following.kind == "paragraph":
                subtitle = following.text
                index += 1
            slides.append(Slide("intro", title=block.text, text=subtitle, color="accent"))

        elif block.kind == "heading" and block.depth == 2:
            current = _TextSlideDraft(Slide("text", title=block.text, text="", color="default"))
            drafts.append(current)
            slides.append(current.slide)

        elif block.kind == "blockquote":
            quote = next((child.text for child in block.tokens if child.text), "")
            slides.append(Slide("quote", text=quote, color="accent", size=quote_size(quote)))

        elif current is not None and block.kind == "paragraph":
            current.paragraphs.append(block.text)

        elif current is not None and block.kind == "list":
            current.lists.append(block.items)

        index += 1

    for draft in drafts:
        draft.finish()

    elapsed = (time.perf_counter() - start_time) * 1000
    logger.info(f"Markdown parsing completed: {len(slides)} slides from {len(blocks)} blocks ({elapsed:.0f}ms)")
    return slides


def add_final_slide(slides: List[Slide], final_slide: Optional[dict]) -> List[Slide]:
    """Append the configured closing slide; returns a new list."""
    if not final_slide or not final_slide.get("enabled"):
        return list(slides)

    template = get_final_slide_template(final_slide.get("type") or "cta")
    slide = Slide(
        "text",
        title=final_slide.get("title") or template["title"],
        text=final_slide.get("text") or template["text"],
        color=final_slide.get("color") or template["color"],
    )
    logger.info(f"Final slide added ({final_slide.get('type') or 'cta'})")
    return [*slides, slide]
