"""Constants for the emulated Hue bridge."""

# Bridge identity, as in the Philips Hue bridge 2012 description document
HUE_UUID = "2f402f80-da50-11e1-9b23-001788102201"
HUE_SERIAL_NUMBER = "0017880ae670"
HUE_FRIENDLY_NAME = "Fake Hue Bridge"
HUE_SERVER_BANNER = "Linux/3.14.0 UPnP/1.0 IpBridge/1.65.0"

# Hue API
HUE_API_USERNAME = "fakehueuser"

# Light metadata
LIGHT_NAME_TEMPLATE = "Fake Hue Light {index}"
LIGHT_TYPE = "Extended color light"
LIGHT_MODEL_ID = "LCT016"
LIGHT_MANUFACTURER = "Philips"
LIGHT_SW_VERSION = "1.65.11_r26581"
LIGHT_ARCHETYPE = "sultan_bulb"
LIGHT_UNIQUE_ID_TEMPLATE = "00:17:88:01:00:bd:ab:{index:02x}-0b"

# Hue API min/max values — https://developers.meethue.com/develop/hue-api/lights-api/
HUE_API_STATE_BRI_MIN = 1
HUE_API_STATE_BRI_MAX = 254
HUE_API_STATE_HUE_MIN = 0
HUE_API_STATE_HUE_MAX = 65535
HUE_API_STATE_SAT_MIN = 0
HUE_API_STATE_SAT_MAX = 254
HUE_API_STATE_CT_MIN = 153
HUE_API_STATE_CT_MAX = 500

# Default light state
DEFAULT_BRI = HUE_API_STATE_BRI_MAX
DEFAULT_CT = 366

# CLIP v2 gamut C triangle
HUE_GAMUT_C = {
    "red": {"x": 0.675, "y": 0.322},
    "green": {"x": 0.409, "y": 0.518},
    "blue": {"x": 0.167, "y": 0.04},
}
HUE_GAMUT_TYPE = "C"

# SSDP
SSDP_MULTICAST_ADDR = "239.255.255.250"
SSDP_PORT = 1900
SSDP_SEARCH_METHOD = "M-SEARCH"
SSDP_ROOT_DEVICE = "upnp:rootdevice"
# Any routable address works, nothing is sent when resolving the source IP
SOURCE_IP_PROBE = ("8.8.8.8", 80)

# Configuration keys
CONF_LIGHTS = "lights"
CONF_LISTEN_HOST = "listen_host"
CONF_LISTEN_PORT = "listen_port"
CONF_ADVERTISE_IP = "advertise_ip"
CONF_ADVERTISE_PORT = "advertise_port"
CONF_ENABLE_V2 = "enable_v2"
CONF_ENABLE_DISCOVERY = "enable_discovery"
CONF_UPNP_BIND_MULTICAST = "upnp_bind_multicast"
CONF_SSL_CERTFILE = "ssl_certfile"
CONF_SSL_KEYFILE = "ssl_keyfile"

# Default values
DEFAULT_LIGHTS = 3
DEFAULT_LISTEN_HOST = "0.0.0.0"
DEFAULT_LISTEN_PORT = 8043

# Presentation colours
RGB_OFF = (30, 30, 30)
RGB_WARM_WHITE = (255, 220, 180)
