"""Constants for the Wireless Tags client library."""

import logging
from typing import Final

_LOGGER = logging.getLogger(__package__)

# --- HTTP API Constants ---
BASE_URL: Final = "https://www.mytaglist.com"
URL_SIGNIN: Final = "/ethAccount.asmx/Signin"
URL_SIGNOUT: Final = "/ethClient.asmx/SignOut"
URL_IS_SIGNED_IN: Final = "/ethAccount.asmx/IsSignedIn"
URL_GET_TAG_MANAGERS: Final = "/ethAccount.asmx/GetTagManagers"
URL_SELECT_TAG_MANAGER: Final = "/ethAccount.asmx/SelectTagManager"
URL_GET_TAG_LIST: Final = "/ethClient.asmx/GetTagManagerTagList"
URL_GET_TAG: Final = "/ethClient.asmx/GetTagForSlaveId"
URL_LIVE_UPDATE: Final = "/ethClient.asmx/RequestImmediatePostback"
URL_SET_POSTBACK_INTERVAL: Final = "/ethClient.asmx/SetPostbackIntervalFor"
URL_SET_LOW_POWER: Final = "/ethClient.asmx/SetLowPowerWOR"
URL_SET_OOR_GRACE: Final = "/ethClient.asmx/SetOutOfRangeGrace"
URL_SET_THERMOSTAT_TARGET: Final = "/ethClient.asmx/SetThermostatTarget"
URL_THERMOSTAT_FAN: Final = "/ethClient.asmx/ThermostatFanOnOff"
URL_THERMOSTAT_ON_OFF: Final = "/ethClient.asmx/ThermostatOnOff"

DEFAULT_HEADERS: Final = {
    "Accept": "application/json",
    "Content-Type": "application/json; charset=utf-8",
}
HEADER_SET_MAC: Final = "X-Set-Mac"

# --- Transport retry (network errors, 5xx) ---
DEFAULT_REQUEST_TIMEOUT: Final = 30
API_MAX_RETRIES: Final = 3
API_RETRY_BASE_DELAY: Final = 1.0
API_RETRY_MAX_DELAY: Final = 10.0
WAIT_BEFORE_RETRY: Final = 8.0  # after TagDidNotRespond

# --- State confirmation retry (arm/disarm, tag settings) ---
ARM_RETRY_ATTEMPTS: Final = 2
ARM_RETRY_DELAY: Final = 5.0

# --- Tag auto-update loop (seconds) ---
MIN_UPDATE_LOOP_WAIT: Final = 3.0
MAX_UPDATE_LOOP_WAIT: Final = 1800.0
CLOUD_DATA_DELAY: Final = 55.0  # until posted data show up in the cloud

# --- Vendor data keys ---
KEY_CONFIG_TYPE: Final = "__type"
KEY_THERMOSTAT: Final = "thermostat"

# Modification mark used when a config with no fields is marked as a whole
MODIFIED_ALL: Final = "__ALL__"

# --- Events ---
EVENT_CONFIG: Final = "config"
EVENT_DATA: Final = "data"
EVENT_UPDATE: Final = "update"
EVENT_DISCOVER: Final = "discover"
EVENT_CONNECT: Final = "connect"
EVENT_DISCONNECT: Final = "disconnect"

CONFIG_ACTION_SET: Final = "set"
CONFIG_ACTION_UPDATE: Final = "update"
CONFIG_ACTION_SAVE: Final = "save"

# --- Temperature units ---
UNIT_CELSIUS: Final = "degC"
UNIT_FAHRENHEIT: Final = "degF"

# Event state labels meaning "not armed"
UNMONITORED_STATES: Final = ("Disarmed", "Not Monitoring", "N.A.")

# Tag type codes
TAG_TYPE_KUMOSTAT: Final = 62
TAG_TYPE_WEMO: Final = 82
TAG_TYPE_CAMERA: Final = 92
TAG_TYPE_OUTDOOR: Final = 42
