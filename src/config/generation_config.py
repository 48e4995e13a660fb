"""Constants for the Stability image generation endpoint and its parameters."""

from __future__ import annotations

from typing import Dict, Tuple

DEFAULT_API_URL = "https://api.stability.ai/v2beta/stable-image/generate/sd3"
DEFAULT_HTTP_TIMEOUT = 120.0

OUTPUT_FORMAT = "png"

# Largest of the SD3.5 models (large, large-turbo, medium, flash)
DEFAULT_MODEL = "sd3.5-large"

# Form defaults for values that are recorded but not sent to the API
DEFAULT_STEPS = 30
DEFAULT_CFG_SCALE = 7.5

SQUARE_ASPECT_RATIO = "1:1"

# Exact sizes mapped before the nearest-ratio search
SPECIAL_ASPECT_RATIOS: Dict[Tuple[int, int], str] = {
    (1152, 896): "9:7",
    (896, 1152): "7:9",
}

# Order matters: the first candidate wins a tie
ASPECT_RATIO_CANDIDATES: Tuple[Tuple[str, float], ...] = (
    ("16:9", 16 / 9),
    ("9:16", 9 / 16),
    ("4:3", 4 / 3),
    ("3:4", 3 / 4),
    ("3:2", 3 / 2),
    ("2:3", 2 / 3),
    ("5:4", 5 / 4),
    ("4:5", 4 / 5),
)
