"""Constants for the House automation integration."""

DOMAIN = "house_automation"

# Configuration keys
CONF_TICK_INTERVAL = "tick_interval"  # Seconds between controller ticks
CONF_TIMER_FORCES_LIGHT_ON = (
    "timer_forces_light_on"  # Confirming a timer also switches the light on
)

# Service attributes
ATTR_CONFIG_ENTRY_ID = "config_entry_id"
ATTR_SECONDS = "seconds"

# Default values
DEFAULT_NAME = "House"
DEFAULT_TICK_INTERVAL = 1
DEFAULT_TIMER_FORCES_LIGHT_ON = False
DEFAULT_TIMER_SECONDS = 60  # One minute preset

MIN_TICK_INTERVAL = 1
MAX_TICK_INTERVAL = 60

# Controller constants
INITIAL_TEMPERATURE = 22
MIN_TEMPERATURE = 5
TEMP_ADJUST_TICKS = 3

# Temperature bands used by the room view
COOL_TEMPERATURE_MAX = 18  # At or below is "cool"
WARM_TEMPERATURE_MIN = 27  # At or above is "warm"
