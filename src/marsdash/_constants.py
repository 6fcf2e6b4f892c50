"""Internal constants shared across the package."""

from __future__ import annotations

from typing import Any

NASA_API_URL = "https://api.nasa.gov"
IMAGES_API_URL = "https://images-api.nasa.gov"
DEFAULT_API_KEY = "DEMO_KEY"
DEFAULT_PROXY_URL = "http://localhost:3000"
DEFAULT_PORT = 3000
DEFAULT_USER_NAME = "Explorer"
USER_AGENT = "marsdash/0.1"

PHOTO_ROVERS: tuple[str, ...] = ("Curiosity", "Opportunity", "Spirit")
SEARCH_ROVERS: tuple[str, ...] = ("Curiosity", "Opportunity", "Spirit", "Perseverance")
DEFAULT_ROVER = "Curiosity"

PHOTO_GALLERY_LIMIT = 12
SEARCH_GALLERY_LIMIT = 24
DESCRIPTION_LIMIT = 150

PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/400x300?text=Image+Not+Available"

# ------------------------------------------------------------------
# Static rover facts (search variant has no manifest to read them from)
# ------------------------------------------------------------------

ROVER_FACTS: dict[str, dict[str, Any]] = {
    "Curiosity": {
        "launch": "2011-11-26",
        "landing": "2012-08-06",
        "status": "Active",
        "description": (
            "Part of NASA's Mars Science Laboratory mission, Curiosity is the largest "
            "and most capable rover ever sent to Mars."
        ),
    },
    "Opportunity": {
        "launch": "2003-07-07",
        "landing": "2004-01-25",
        "status": "Complete",
        "description": "Opportunity operated for almost 15 years, far exceeding its planned 90-day mission.",
    },
    "Spirit": {
        "launch": "2003-06-10",
        "landing": "2004-01-04",
        "status": "Complete",
        "description": (
            "Spirit operated for over six years, discovering evidence that Mars was once "
            "much wetter than it is today."
        ),
    },
    "Perseverance": {
        "launch": "2020-07-30",
        "landing": "2021-02-18",
        "status": "Active",
        "description": (
            "The newest Mars rover, seeking signs of ancient life and collecting samples "
            "for future return to Earth."
        ),
    },
}
