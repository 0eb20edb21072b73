"""
Mark sprites for the TicTacToe UI.
Draws the O and X images with Pillow so the UI needs no image files.
"""

from PIL import Image, ImageDraw

from logic.game_state import Mark, Outcome


# Colors (RGBA)
PLAYER_COLOR = (16, 185, 129, 255)   # Green for the human (O)
AI_COLOR = (248, 113, 113, 255)      # Red for the computer (X)
TRANSPARENT = (0, 0, 0, 0)


def render_mark(mark: Mark, size: int = 96) -> Image.Image:
    """
    Draw a mark on a transparent square.

    Args:
        mark: The mark to draw. EMPTY gives a blank image.
        size: Width and height in pixels.

    Returns:
        RGBA image.
    """
    if size <= 0:
        raise ValueError(f"size must be positive, got {size}")

    image = Image.new("RGBA", (size, size), TRANSPARENT)
    if mark == Mark.EMPTY:
        return image

    draw = ImageDraw.Draw(image)
    margin = size // 6
    width = max(1, size // 10)
    box = (margin, margin, size - margin - 1, size - margin - 1)

    if mark == Mark.PLAYER:
        draw.ellipse(box, outline=PLAYER_COLOR, width=width)
    else:
        draw.line((box[0], box[1], box[2], box[3]), fill=AI_COLOR, width=width)
        draw.line((box[0], box[3], box[2], box[1]), fill=AI_COLOR, width=width)

    return image


def winner_banner(outcome: Outcome, size: int = 64) -> Image.Image:
    """Result sprite: the winner's mark, or blank for a draw or ongoing game."""
    winner = outcome.winner
    return render_mark(winner if winner is not None else Mark.EMPTY, size)
