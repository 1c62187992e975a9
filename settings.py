from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Logging
LOG_LEVEL = config.get("LOG_LEVEL", "info")
DEBUG_LOG_FILE = config.get("DEBUG_LOG_FILE", "launcher_debug.log")

# HTTP transport timeouts (seconds). Redirect waits in the browser have no timeout.
CONNECT_TIMEOUT = config.get("CONNECT_TIMEOUT", 10.0)
REQUEST_TIMEOUT = config.get("REQUEST_TIMEOUT", 30.0)

# Jagex Account OpenID Connect provider
OIDC_DISCOVERY_URL = config.get(
    "OIDC_DISCOVERY_URL", "https://account.jagex.com/.well-known/openid-configuration"
)

# Launcher login (authorization code + PKCE)
AUTH_CODE_CLIENT_ID = config.get("AUTH_CODE_CLIENT_ID", "com_jagex_auth_desktop_launcher")
AUTH_CODE_REDIRECT_URI = config.get(
    "AUTH_CODE_REDIRECT_URI", "https://secure.runescape.com/m=weblogin/launcher-redirect"
)
AUTH_CODE_SCOPE = config.get(
    "AUTH_CODE_SCOPE",
    "openid offline gamesso.token.create user.profile.read user.entitlement.read "
    "user.game.read user.sku.read user.voucher.redeem",
)

# Game session (hybrid flow with id_token_hint)
SESSION_CLIENT_ID = config.get("SESSION_CLIENT_ID", "1fddee4e-b100-4f4e-b2b0-097f9088f9d2")
SESSION_REDIRECT_URI = config.get("SESSION_REDIRECT_URI", "http://localhost")
SESSION_SCOPE = config.get("SESSION_SCOPE", "openid offline")

# Game session service and account API
GAME_SESSION_URL = config.get("GAME_SESSION_URL", "https://auth.jagex.com/game-session/v1/sessions")
CHARACTERS_URL = config.get("CHARACTERS_URL", "https://auth.jagex.com/game-session/v1/accounts")
DISPLAY_NAME_URL = config.get("DISPLAY_NAME_URL", "https://api.jagex.com/v1/users/{sub}/displayName")

# Browser surfaces
AUTH_WINDOW_WIDTH = config.get("AUTH_WINDOW_WIDTH", 480)
AUTH_WINDOW_HEIGHT = config.get("AUTH_WINDOW_HEIGHT", 700)
AUTH_WINDOW_OFFSET = config.get("AUTH_WINDOW_OFFSET", 32)
SESSION_WINDOW_SIZE = config.get("SESSION_WINDOW_SIZE", 500)
BROWSER_EXECUTABLE_PATH = config.get_optional("BROWSER_EXECUTABLE_PATH")
BROWSER_POLL_INTERVAL = config.get("BROWSER_POLL_INTERVAL", 0.5)
