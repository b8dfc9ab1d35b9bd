DOMAIN = "modern_forms_fan"

PLATFORMS = ["fan", "light", "button"]

CONF_POLL_INTERVAL   = "poll_interval_secs"
CONF_LOG_ENABLE      = "log_enable"

# default values
DEFAULT_POLL_INTERVAL = 30      # seconds
DEFAULT_LOG_ENABLE    = False
DEFAULT_TIMEOUT       = 10      # seconds, per request
REBOOT_TIMEOUT        = 1       # the fan drops the connection on reboot

ENDPOINT_PATH        = "/mf"

# hub-side attribute names
ATTR_SWITCH          = "switch"              # "on"/"off"
ATTR_SPEED           = "speed"               # speed label
ATTR_DIRECTION       = "direction"           # "forward"/"reverse"
ATTR_SUPPORTED_SPEEDS = "supportedFanSpeeds" # JSON-encoded list
ATTR_LEVEL           = "level"               # 0-100

LIGHT_ID_SUFFIX      = "-light"
LIGHT_NAME_SUFFIX    = " - Light"
LIGHT_DEVICE_TYPE    = "Generic Component Dimmer"

SERVICE_SET_SPEED         = "set_speed"
SERVICE_CYCLE_SPEED       = "cycle_speed"
SERVICE_REVERSE_DIRECTION = "reverse_direction"
SERVICE_REBOOT            = "reboot"
SERVICE_REFRESH           = "refresh"
