"""
Pass Pipeline

PassManager runs registered passes strictly in registration order. A gate may
stop the run after any pass; a stopped run returns None, which callers treat
as "nothing to publish" rather than as an error.
"""

from typing import Callable, List, Optional

from markdown_it.token import Token

from marksite.contexts.rendering.context import Flag, RenderingContext
from marksite.contexts.rendering.passes import (
    assign_header_id,
    convert_math_pass,
    get_title_pass,
    highlight_code_pass,
    image_convert_pass,
    link_adjust_pass,
    read_header_pass,
    table_wrapper_pass,
    toc_pass,
)

EventPass = Callable[[List[Token], RenderingContext], List[Token]]
Gate = Callable[[EventPass, RenderingContext], bool]


class PassManager:
    """Ordered list of token passes sharing one RenderingContext per run."""

    def __init__(self):
        self._passes: List[EventPass] = []

    def register(self, event_pass: EventPass) -> "PassManager":
        self._passes.append(event_pass)
        return self

    @property
    def passes(self) -> List[EventPass]:
        return list(self._passes)

    def run(
        self,
        events: List[Token],
        ctx: RenderingContext,
        gate: Optional[Gate] = None,
    ) -> Optional[List[Token]]:
        """
        Apply every pass in order.

        Args:
            events: Token stream of one document
            ctx: That document's rendering context
            gate: Called after each pass; returning True stops the run

        Returns:
            Rewritten token stream, or None if the gate stopped the run
        """
        for event_pass in self._passes:
            events = event_pass(events, ctx)
            if gate is not None and gate(event_pass, ctx):
                return None
        return events


def draft_gate(render_draft: bool) -> Gate:
    """Stop right after the front matter is read when the page is an unpublished draft."""

    def gate(event_pass: EventPass, ctx: RenderingContext) -> bool:
        return (
            event_pass is read_header_pass
            and not render_draft
            and ctx.has_flag(Flag.DRAFT)
        )

    return gate


def default_pass_manager() -> PassManager:
    """The fixed page pipeline (ReadHeader must stay first)."""
    manager = PassManager()
    (
        manager.register(read_header_pass)
        .register(get_title_pass)
        .register(link_adjust_pass)
        .register(image_convert_pass)
        .register(convert_math_pass)
        .register(highlight_code_pass)
        .register(assign_header_id)
        .register(table_wrapper_pass)
        .register(toc_pass)
    )
    return manager
