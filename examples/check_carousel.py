"""Carousel checks for the 'Why choose us' section."""

from pagecheck import dom, scenario, tag


CARD = ".carousel-card"
NEXT_ARROW = 'button[title="Go to next slide"]'
PREV_ARROW = 'button[title="Go to previous slide"]'
ACTIVE_TRANSFORM = "scale(1) rotateX(0deg)"


async def scroll_to_carousel(page) -> None:
    await page.locator("#why-choose-us").scroll_into_view_if_needed()


@tag("carousel", "smoke")
@scenario(
    "CAR-001",
    "Navigation arrows are visible",
    category="Navigation",
    steps=["Scroll to 'Why choose us'", "Look below the cards"],
    expected=["Previous and next arrows are shown"],
)
async def check_arrows_visible(ctx):
    await scroll_to_carousel(ctx.page)
    prev_visible = await dom.is_visible(ctx.page, PREV_ARROW)
    next_visible = await dom.is_visible(ctx.page, NEXT_ARROW)
    ctx.expect(
        "Arrow visibility",
        prev_visible and next_visible,
        f"Previous: {prev_visible}, Next: {next_visible}",
    )


@tag("carousel")
@scenario(
    "CAR-002",
    "Next arrow advances the active card",
    category="Navigation",
    viewports=["tablet", "desktop", "desktop-large"],
    steps=["Scroll to 'Why choose us'", "Click the next arrow"],
    expected=["The second card becomes the active card"],
)
async def check_next_arrow(ctx):
    await scroll_to_carousel(ctx.page)
    await ctx.page.click(NEXT_ARROW)
    await ctx.settle(600)
    transform = await ctx.page.locator(CARD).nth(1).evaluate("el => el.style.transform")
    ctx.expect(
        "Next arrow functionality",
        transform == ACTIVE_TRANSFORM,
        f"transform: {transform or 'none'}",
    )


@tag("carousel", "layout")
@scenario(
    "CAR-003",
    "Cards keep a 3:4 aspect ratio",
    category="Layout",
    steps=["Scroll to 'Why choose us'", "Compare the width and height of each card"],
    expected=["Every card is three units wide for four units tall"],
)
async def check_card_aspect_ratio(ctx):
    await scroll_to_carousel(ctx.page)
    boxes = await dom.bounding_boxes(ctx.page, CARD)
    if not boxes:
        ctx.expect("Cards rendered", False, f"no elements match {CARD}")
        return
    for index, box in enumerate(boxes, start=1):
        ratio = dom.aspect_ratio(box)
        ctx.expect(
            f"Card {index} aspect ratio",
            dom.within_tolerance(ratio, dom.EXPECTED_CARD_RATIO),
            f"ratio: {ratio:.3f}" if ratio is not None else "zero height",
        )
