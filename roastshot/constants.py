"""All magic values live here — no inline literals anywhere else."""

# Tone
DEFAULT_TONE = "Brutal"
TONE_MAX_LENGTH = 40
TONES = (
    "Brutal",
    "Friendly",
    "Aussie",
    "Corporate",
    "Shakespearean",
    "Villain Monologue",
)

# Image data URLs
DATA_URL_PREFIX = "data:image/"
DATA_URL_PATTERN = r"data:(image/[a-zA-Z0-9.+-]+);base64,(.+)"
PNG_MIME = "image/png"

# Upstream model
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_OPENAI_TIMEOUT = "60"
RESPONSES_PATH = "/responses"
RESPONSE_FORMAT = {"format": {"type": "json_object"}}

SYSTEM_PROMPT = (
    "You are a witty comedian. You roast the USER'S MOBILE SCREENSHOT in a playful, "
    "non-hateful way. Never include slurs. Avoid harassment. Do not mention real private "
    "data. Do NOT include the app name, headings, or any scores/ratings inside the roast "
    "text. If the screenshot appears to include private chats or personal info, warn the "
    "user to crop/blur next time and keep the roast generic. Output JSON only."
)
USER_PROMPT = (
    "Tone: %s. Produce: (1) a short roast (max 4 lines), (2) a score 0-100 (chaosScore), "
    "(3) 3 short tags. Return JSON ONLY with exactly these keys: roast, chaosScore, tags."
)

# Response shapes, in priority order
ENVELOPE_FLAT_TEXT_KEY = "output_text"
ENVELOPE_OUTPUT_KEY = "output"
ENVELOPE_CONTENT_KEY = "content"
ENVELOPE_FALLBACK_TEXT_KEY = "text"
TEXT_BLOCK_TYPES = frozenset({"output_text", "text"})

# Normalization
MAX_TAGS = 6
MSG_NO_TEXT_ROAST = "(No text returned from model — check model response format)"
MSG_NO_ROAST_FALLBACK = "(No roast text returned — try a different screenshot or tone)"

# Server
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = "8787"
DEFAULT_MAX_BODY_BYTES = str(15 * 1024 * 1024)
DEFAULT_LOG_LEVEL = "INFO"
API_PREFIX = "/api"
HEADER_USER_KEY = "X-User-OpenAI-Key"
HEADER_SERVER_VERSION = "X-Server-Version"
CORS_METHODS = ["POST", "GET", "OPTIONS"]
CORS_HEADERS = ["Content-Type", HEADER_USER_KEY]

# Error kinds (wire values)
ERR_BAD_REQUEST = "bad_request"
ERR_BAD_IMAGE = "bad_image"
ERR_MISSING_CONFIG = "missing_config"
ERR_UPSTREAM = "upstream_error"
ERR_SERVER = "server_error"

MSG_ERR_BAD_JSON = "Request body must be a JSON object"
MSG_ERR_TOO_LARGE = "Request body exceeds %d bytes"
MSG_ERR_IMAGE_URL = "imageDataUrl must be a data:image/* data URL"
MSG_ERR_BAD_IMAGE = "imageDataUrl is not a valid base64 image data URL"
MSG_ERR_TONE = "tone must be 1-%d characters" % TONE_MAX_LENGTH
MSG_ERR_MISSING_KEY = "Missing OPENAI_API_KEY (or provide X-User-OpenAI-Key)"
MSG_ERR_UPSTREAM = "Model provider returned HTTP %d"

# Log messages
MSG_SERVER_STARTING = "Roast server listening on http://%s:%d (version %s)"
MSG_ROAST_REQUEST = "Roast requested: tone=%s, image=%s (%dKB base64)"
MSG_ROAST_OK = "✓ Roast ready (%.1fs, chaosScore=%s, %d tags)"
MSG_UPSTREAM_FAILED = "✗ Upstream returned HTTP %d (%.1fs)"
MSG_EMPTY_OUTPUT = "No text returned from model (empty_outputText)"
MSG_NON_JSON_OUTPUT = "Model returned non-JSON output (non_json_output), passing it through"
MSG_REQUEST_REJECTED = "Rejected roast request: %s (%s)"
MSG_UNEXPECTED_ERROR = "Unexpected error while roasting"

# Client
DEFAULT_API_BASE = "http://localhost:8787/api"
DEFAULT_DAILY_LIMIT = "3"
DEFAULT_USAGE_PATH = ".roast_usage.json"
DEFAULT_CLIENT_TIMEOUT = 90.0
DAY_KEY_FORMAT = "%Y-%m-%d"
DEFAULT_BLUR_PX = 10
MAX_BLUR_PX = 24
DEFAULT_CARD_PATH = "roast-card.png"

MSG_NOT_AN_IMAGE = "Please choose an image file."
MSG_DAILY_LIMIT = "Daily limit: %d/%d used (%d remaining)"
MSG_LIMIT_REACHED = "Daily limit reached (%d/day). Try again tomorrow."
MSG_USAGE_RECORDED = "Roast OK. Daily usage now: %d/%d"
MSG_USAGE_LOAD_FAILED = "Usage load failed: %s, starting fresh"
MSG_CARD_WRITTEN = "Share card written to %s"
MSG_BLUR_APPLIED = "Applied privacy blur (%dpx) before upload"
MSG_REQUEST_FAILED = "Request failed"

# Share card
CARD_SIZE = (1080, 1920)
CARD_GRADIENT = ("#0f172a", "#1f2937")
CARD_TITLE = "Roast My Screenshot"
CARD_FOOTER = "Made with Bob & Me (POC)"
CARD_MARGIN_X = 80
CARD_TITLE_Y = 140
CARD_TITLE_FONT_SIZE = 64
CARD_PILL_Y = 200
CARD_PILL_HEIGHT = 70
CARD_PILL_PADDING = 30
CARD_PILL_RADIUS = 18
CARD_PILL_FONT_SIZE = 44
CARD_PILL_TEXT_BASELINE = 50
CARD_PILL_FILL = (255, 255, 255, 31)
CARD_PANEL_BOX = (80, 330, 920, 520)
CARD_PANEL_RADIUS = 28
CARD_PANEL_FILL = (255, 255, 255, 26)
CARD_ROAST_X = 120
CARD_ROAST_Y = 420
CARD_ROAST_WRAP_WIDTH = 880
CARD_ROAST_FONT_SIZE = 52
CARD_ROAST_LINE_HEIGHT = 70
CARD_ROAST_MAX_LINES = 10
CARD_TAGS_Y = 920
CARD_TAGS_FONT_SIZE = 38
CARD_TAGS_FILL = (255, 255, 255, 191)
CARD_TAG_SEPARATOR = "  "
CARD_FOOTER_Y = 1840
CARD_FOOTER_FONT_SIZE = 34
CARD_FOOTER_FILL = (255, 255, 255, 153)
CARD_TEXT_FILL = (255, 255, 255, 255)
CARD_FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "DejaVuSans-Bold.ttf",
    "arial.ttf",
)
CARD_PILL_SCORE = "Chaos: %s/100"
CARD_PILL_UNKNOWN = "Chaos: ?"
