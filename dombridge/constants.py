"""Platform, build-mode and contract names shared across dombridge."""

PLATFORM_IOS = "ios"
PLATFORM_ANDROID = "android"
PLATFORM_WEB = "web"
PLATFORMS = (PLATFORM_IOS, PLATFORM_ANDROID, PLATFORM_WEB)

MODE_DEVELOPMENT = "development"
MODE_PRODUCTION = "production"
BUILD_MODES = (MODE_DEVELOPMENT, MODE_PRODUCTION)

# Read by the export step; both phases must agree on this name.
DOM_COMPONENT_REFERENCE_KEY = "expoDomComponentReference"

DEFAULT_HOST_MODULE = "expo/dom/internal"
