"""Translation assets settings."""

from server.settings.components import config

# Page size used by `get_sections` when the caller passes no count
ASSETS_DEFAULT_PAGE_SIZE = config(
    'ASSETS_DEFAULT_PAGE_SIZE',
    cast=int,
    default=0,
)
