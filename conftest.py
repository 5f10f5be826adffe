from __future__ import annotations

import os

# Keep test runs away from the user's real history file and cloud settings.
os.environ.setdefault("LINGUA_LENS_STORAGE", "memory")
os.environ.setdefault("GOOGLE_GENAI_USE_VERTEXAI", "false")
