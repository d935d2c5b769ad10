"""Background video checks.

The zero-risk card and the solutions section play muted, looping videos
with no controls. On phones they must also play inline.
"""

from pagecheck import dom, requirement, scenario, tag


requirement(
    "VID-001",
    "Videos autoplay silently",
    "Background videos autoplay muted, loop, show no controls and play inline on mobile",
    category="Video",
)

MOBILE = ["mobile-small", "mobile", "mobile-large"]


@tag("video", "smoke")
@scenario(
    "VID-001",
    "Zero-risk card video is set up for autoplay",
    category="Video",
    settle_ms=2_000,
    expected=["The card video starts playing without sound and without controls"],
)
async def check_card_video_attributes(ctx):
    state = await dom.video_state(ctx.page, ".carousel-card-zero-risk video")
    ctx.expect("Card video autoplay attributes", dom.autoplay_ready(state), dom.describe(state))
    pointer_events = await dom.inline_style(
        ctx.page, ".carousel-card-zero-risk video", "pointer-events"
    )
    ctx.expect(
        "Card video ignores clicks",
        pointer_events == "none",
        f"pointer-events: {pointer_events or 'unset'}",
    )


@tag("video", "mobile")
@scenario(
    "VID-001",
    "Mobile solutions video plays inline",
    category="Video",
    viewports=MOBILE,
    settle_ms=3_000,
    steps=["Open the page on a phone", "Scroll to the solutions section"],
    expected=["The video plays inline without a 'Tap to play' overlay"],
)
async def check_mobile_video_playing(ctx):
    selector = "#solutions video.lg\\:hidden"
    state = await dom.video_state(ctx.page, selector)
    ctx.expect("Mobile video autoplay attributes", dom.autoplay_ready(state), dom.describe(state))
    ctx.expect("Mobile video is playing", dom.is_playing(state), dom.describe(state))
    return await dom.count(ctx.page, "text=/Tap to play/") == 0
