"""Dashboard image renderer."""

import logging
import re
import uuid
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from hackagoal.goals.models import ChartPoint, DerivedMetrics, GoalConfig, GoalMode

logger = logging.getLogger(__name__)

BACKGROUND = (17, 17, 27)
PANEL = (34, 34, 48)
TEXT = (255, 255, 255)
MUTED = (156, 163, 175)
POSITIVE = (74, 222, 128)
NEGATIVE = (248, 113, 113)


class DashboardRenderer:
    """Renders coding-goal dashboard to image."""

    def __init__(self, output_dir: str = "static/images"):
        """
        Initialize renderer.

        Args:
            output_dir: Directory to save generated images
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        # Try to load fonts, fall back to default
        self.fonts = self._load_fonts()

    def _load_fonts(self) -> dict:
        """Load fonts for rendering."""
        fonts = {}

        # Try to find system fonts
        font_paths = [
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/System/Library/Fonts/Helvetica.ttc",  # macOS
        ]

        try:
            for path in font_paths:
                if Path(path).exists():
                    fonts["header"] = ImageFont.truetype(path, 26)
                    fonts["value"] = ImageFont.truetype(path, 30)
                    fonts["normal"] = ImageFont.truetype(path, 14)
                    fonts["small"] = ImageFont.truetype(path, 11)
                    logger.info(f"Loaded fonts from {path}")
                    break
        except OSError as e:
            logger.warning(f"Could not load TrueType fonts: {e}, using default")
            fonts = {}

        # Fall back to default fonts
        if not fonts:
            default_font = ImageFont.load_default()
            fonts["header"] = default_font
            fonts["value"] = default_font
            fonts["normal"] = default_font
            fonts["small"] = default_font

        return fonts

    def render(
        self,
        metrics: DerivedMetrics,
        config: GoalConfig,
        username: str,
        width: int = 800,
        height: int = 480,
    ) -> tuple[str, str]:
        """
        Render the dashboard.

        Args:
            metrics: Metrics computed for the current snapshot
            config: Goal configuration the metrics were computed with
            username: Tracked Hackatime user
            width: Image width
            height: Image height

        Returns:
            Tuple of (filename, file_path)
        """
        logger.info(f"Rendering dashboard for {username}")

        image = Image.new("RGB", (width, height), BACKGROUND)
        draw = ImageDraw.Draw(image)

        self._draw_header(draw, username, width)
        self._draw_cards(draw, metrics, config, width)
        self._draw_chart(draw, metrics, width, height)

        # One file per user, replaced whole
        filename = f"dashboard-{re.sub(r'[^A-Za-z0-9_-]', '_', username)}"
        file_path = self.output_dir / f"{filename}.png"
        tmp_path = self.output_dir / f".{filename}-{uuid.uuid4().hex}.png"

        image.save(tmp_path, "PNG")
        tmp_path.replace(file_path)
        logger.info(f"Saved dashboard to {file_path}")

        return filename, str(file_path)

    def _draw_header(self, draw: ImageDraw.ImageDraw, username: str, width: int):
        """Draw title and tracked user."""
        draw.text((20, 12), "HackaGoal", fill=TEXT, font=self.fonts["header"])

        user_text = f"Tracking {username}"
        bbox = draw.textbbox((0, 0), user_text, font=self.fonts["normal"])
        text_width = bbox[2] - bbox[0]
        draw.text((width - text_width - 20, 20), user_text, fill=MUTED, font=self.fonts["normal"])

        draw.line([20, 50, width - 20, 50], fill=PANEL, width=2)

    def _card_values(self, metrics: DerivedMetrics, config: GoalConfig) -> list[tuple[str, str, str]]:
        """Title, value and caption for each card."""
        if config.mode == GoalMode.DAILY:
            goal_card = (
                "PROJECTION",
                f"{metrics.projection_or_deviation:.0f}h",
                f"At {config.daily_goal_hours:g}h/day",
            )
            total_caption = "Recorded this year"
        else:
            goal_card = (
                "DAILY TARGET",
                f"{metrics.required_daily_hours:.2f}h",
                f"To hit {config.target_total_hours:g}h",
            )
            total_caption = (
                f"{metrics.hours_to_target:.1f}h left to {config.target_total_hours:g}h"
            )

        return [
            ("TIME LEFT", str(metrics.days_remaining), "Days until New Year"),
            ("TODAY'S GRIND", f"{metrics.today_hours:.1f}h", "Hours coded today"),
            ("STREAK", str(metrics.current_streak), f"Days > {config.streak_min_minutes} min"),
            ("TOTAL HOURS", f"{metrics.total_hours:.1f}", total_caption),
            goal_card,
            ("HIGH SCORE", f"{metrics.high_score_hours:.1f}h", "Best single day"),
            ("STREAK AVG", f"{metrics.streak_average_hours:.1f}h", "During current streak"),
        ]

    def _draw_cards(self, draw: ImageDraw.ImageDraw, metrics: DerivedMetrics, config: GoalConfig, width: int):
        """Draw metric cards in a 4-column grid."""
        columns = 4
        gap = 10
        card_width = (width - 40 - gap * (columns - 1)) // columns
        card_height = 95

        for i, (title, value, caption) in enumerate(self._card_values(metrics, config)):
            x = 20 + (i % columns) * (card_width + gap)
            y = 62 + (i // columns) * (card_height + gap)

            draw.rounded_rectangle(
                [x, y, x + card_width, y + card_height], radius=8, fill=PANEL
            )
            draw.text((x + 10, y + 8), title, fill=MUTED, font=self.fonts["small"])
            draw.text((x + 10, y + 28), value, fill=TEXT, font=self.fonts["value"])
            draw.text((x + 10, y + 72), caption, fill=MUTED, font=self.fonts["small"])

    def _draw_chart(self, draw: ImageDraw.ImageDraw, metrics: DerivedMetrics, width: int, height: int):
        """
        Draw the 7-day deviation chart.

        Bars grow up (green) when a day beat the required rate and down
        (red) when it fell short.
        """
        top = 272
        bottom = height - 15
        draw.rounded_rectangle([20, top, width - 20, bottom], radius=8, fill=PANEL)

        draw.text((30, top + 8), "LAST 7 DAYS PERFORMANCE", fill=MUTED, font=self.fonts["small"])
        baseline_text = f"Baseline: {metrics.required_daily_hours:.2f}h / day"
        bbox = draw.textbbox((0, 0), baseline_text, font=self.fonts["small"])
        draw.text((width - 30 - (bbox[2] - bbox[0]), top + 8), baseline_text, fill=MUTED, font=self.fonts["small"])

        if not metrics.chart:
            return

        label_height = 18
        zero_y = (top + 30 + bottom - label_height) // 2
        half_height = (bottom - label_height - top - 30) // 2
        slot_width = (width - 60) / len(metrics.chart)

        draw.line([30, zero_y, width - 30, zero_y], fill=MUTED, width=1)

        for i, point in enumerate(metrics.chart):
            center_x = int(30 + slot_width * (i + 0.5))
            self._draw_bar(draw, point, center_x, zero_y, half_height)

            bbox = draw.textbbox((0, 0), point.weekday, font=self.fonts["small"])
            label_width = bbox[2] - bbox[0]
            draw.text(
                (center_x - label_width // 2, bottom - label_height),
                point.weekday,
                fill=MUTED,
                font=self.fonts["small"],
            )

    def _draw_bar(self, draw: ImageDraw.ImageDraw, point: ChartPoint, center_x: int, zero_y: int, half_height: int):
        """Draw one deviation bar, 20% of the half-height per hour, capped at 80%."""
        bar_length = int(half_height * min(abs(point.deviation) * 20, 80) / 100)
        if bar_length == 0:
            return

        bar_half_width = 8
        if point.deviation >= 0:
            box = [center_x - bar_half_width, zero_y - bar_length, center_x + bar_half_width, zero_y]
            fill = POSITIVE
        else:
            box = [center_x - bar_half_width, zero_y, center_x + bar_half_width, zero_y + bar_length]
            fill = NEGATIVE

        draw.rectangle(box, fill=fill)


async def demo_render():
    """Demo: Render dashboard image."""
    import os

    from dotenv import load_dotenv

    from hackagoal.dashboard.state import DashboardState

    load_dotenv()

    username = os.getenv("HACKATIME_USERNAME")
    if not username:
        print("Error: HACKATIME_USERNAME must be set in .env file")
        return

    state = DashboardState(
        os.getenv("HACKATIME_API_BASE", "https://hackatime.hackclub.com/api/v1/users"),
        os.getenv("TIMEZONE", "UTC"),
    )
    await state.load(username)

    config = GoalConfig()
    renderer = DashboardRenderer()
    filename, file_path = renderer.render(state.metrics(config), config, username)

    print("\n" + "=" * 60)
    print("DASHBOARD RENDERED")
    print("=" * 60)
    print(f"\nImage saved to: {file_path}")
    print(f"\nView it with: xdg-open {file_path}")


if __name__ == "__main__":
    import asyncio

    logging.basicConfig(level=logging.INFO)
    asyncio.run(demo_render())
