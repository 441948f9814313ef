# -------------------------------------------------------------------------------
# MIT License
#
# Copyright (c) 2023 - 2026 Advanced Micro Devices, Inc. All Rights Reserved.
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
# -------------------------------------------------------------------------------

import configparser
import importlib.metadata
import logging
import os

DEVICE_SECTION = "switchstat.device"
COLLECTOR_SECTION = "switchstat.collectors"

DEFAULT_POLL_RATE_SECS = 10
DEFAULT_TIMEOUT_SECS = 5
DEFAULT_PORT = 8080


class ConfigError(Exception):
    """Missing or invalid runtime configuration."""


class PrefixFilter(logging.Filter):
    """Prepend a fixed prefix to every log record passing through a logger."""

    def __init__(self, prefix):
        super().__init__()
        self.prefix = prefix

    def filter(self, record):
        record.msg = f"{self.prefix}{record.msg}"
        return True


def removeQuotes(string):
    if len(string) > 1 and string[0] == string[-1] and string[0] in ("'", '"'):
        return string[1:-1]
    return string


def getVersion():
    """Return installed package version (or Unknown if not installed)."""
    try:
        return importlib.metadata.version("switchstat")
    except importlib.metadata.PackageNotFoundError:
        return "Unknown"


def resolveConfigFile(configfile=None):
    if configfile:
        return configfile
    return os.environ.get("SWITCHSTAT_CONFIG", "switchstat.config")


def readConfig(configfile):
    """Read runtime configuration.

    Settings are checked later by validateConfig (called from Monitor).

    Args:
        configfile (str): Path to INI-style runtime config file.

    Returns:
        configparser.ConfigParser: Parsed configuration.

    Raises:
        ConfigError: file missing, unreadable or unparsable.
    """
    if not os.path.isfile(configfile):
        raise ConfigError(f"Unable to access runtime config file: {configfile}")

    config = configparser.ConfigParser(interpolation=None)
    try:
        config.read(configfile)
    except configparser.Error as e:
        raise ConfigError(f"Unable to parse runtime config file {configfile}: {e}") from e

    return config


def _readPositive(section, key, default):
    raw = section.get(key, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"Invalid value for {key}: {raw}") from e
    if value < 0:
        raise ConfigError(f"Invalid value for {key}: {raw}")
    # zero means "not set"
    if value == 0:
        return default
    return value


def validateConfig(config: configparser.ConfigParser):
    """Verify required device settings and fill in defaults for optional ones.

    The validated values are written back into the config so downstream
    collectors can read them without re-checking.
    """
    if not config.has_section(DEVICE_SECTION):
        raise ConfigError(f"Missing [{DEVICE_SECTION}] section in runtime config")

    device = config[DEVICE_SECTION]
    for key in ["address", "username", "password"]:
        value = device.get(key, "").strip()
        if value:
            value = removeQuotes(value)
        if not value:
            raise ConfigError(f"Missing required configuration field: {key}")
        device[key] = value

    device["poll_rate_seconds"] = str(_readPositive(device, "poll_rate_seconds", DEFAULT_POLL_RATE_SECS))
    device["timeout_seconds"] = str(_readPositive(device, "timeout_seconds", DEFAULT_TIMEOUT_SECS))

    if not config.has_section(COLLECTOR_SECTION):
        config.add_section(COLLECTOR_SECTION)

    port = config[COLLECTOR_SECTION].get("port", str(DEFAULT_PORT))
    try:
        port = int(port)
    except ValueError as e:
        raise ConfigError(f"Invalid exporter port: {port}") from e
    if port <= 0 or port > 65535:
        raise ConfigError(f"Invalid exporter port: {port}")
    config[COLLECTOR_SECTION]["port"] = str(port)

    return config
