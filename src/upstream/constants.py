"""Constants for the Hacker News upstream API."""

HACKER_NEWS_BASE_URL = "https://hacker-news.firebaseio.com/v0"
BEST_STORIES_PATH = "/beststories.json"
ITEM_PATH_TEMPLATE = "/item/{item_id}.json"

DEFAULT_USER_AGENT = "best-stories/1.0"
DEFAULT_TIMEOUT_SECONDS = 30.0

# One pooled connection per concurrent item fetch of the largest request
DEFAULT_MAX_CONNECTIONS = 500

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_SERVER_ERROR_MIN = 500
HTTP_STATUS_SERVER_ERROR_MAX = 600
