"""Internal constants shared across the package."""

USER_AGENT = "carnabot-poller/1.0"

ONESIGNAL_API_URL = "https://onesignal.com/api/v1/notifications"
DEFAULT_SEGMENT = "Total Subscriptions"
DEFAULT_LOCALES: tuple[str, ...] = ("en", "pt")

DEFAULT_SNAPSHOT_PATH = "carnabot_db.json"
DEFAULT_IDENTIFIER_COLUMN = "bloco"
DEFAULT_TITLE = "Carnabot Avisa! 🥁"
DEFAULT_HTTP_TIMEOUT = 30.0

# ------------------------------------------------------------------
# Message templates (``str.format`` with ``{entity}`` + field names)
# ------------------------------------------------------------------

LOCATION_TEMPLATE = '📍 O bloco "{entity}" mudou de lugar! Novo local: {location}.'
TIME_TEMPLATE = '⏰ O bloco "{entity}" mudou de horário! Agora é às: {time}.'
COMBINED_TEMPLATE = '🎊 O bloco "{entity}" mudou tudo! Novo local: {location} às {time}.'
