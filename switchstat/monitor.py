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

# Prometheus exporter for web-managed network switches.
#
# Supporting monitor class to implement a prometheus data collector with one
# or more custom collector(s).
# --

import configparser
import importlib
import logging
import os
import platform
import re
import sys
import threading

from prometheus_client import CollectorRegistry, generate_latest

from switchstat import utils
from switchstat.collector_definitions import COLLECTORS


class Monitor:
    def __init__(self, config: configparser.ConfigParser, logFile=None):

        self.config = config  # cache runtime configuration

        logLevel = os.environ.get("SWITCHSTAT_LOG_LEVEL", "INFO").upper()
        if logFile:
            hostname = platform.node().split(".", 1)[0]
            logging.basicConfig(
                format=f"[{hostname}: %(asctime)s] %(message)s",
                level=logLevel,
                filename=logFile,
                datefmt="%H:%M:%S",
            )
        else:
            logging.basicConfig(format="%(message)s", level=logLevel, stream=sys.stdout)

        # raises utils.ConfigError; callers decide whether that is fatal
        utils.validateConfig(self.config)

        allowed_ips = self.config[utils.COLLECTOR_SECTION].get("allowed_ips", "").strip()
        self.allowed_ips = [ip for ip in re.split(r",\s*", allowed_ips) if ip]
        if self.allowed_ips:
            logging.info("Allowed query IPs = %s" % self.allowed_ips)

        # metrics live in a registry owned by this monitor, not the global one
        self.registry = CollectorRegistry()

        # initialize collection of data collectors
        self.__collectors = []

        # one scrape at a time, from collector updates through exposition text
        self.__scrape_lock = threading.Lock()

        logging.debug("Completed collector initialization (base class)")
        return

    @property
    def collectors(self):
        return list(self.__collectors)

    def initMetrics(self):
        """Instantiate enabled collectors and register their metrics."""

        for collector in COLLECTORS:
            runtime_option = collector["runtime_option"]
            default = collector["enabled_by_default"]
            if runtime_option:
                enabled = self.config[utils.COLLECTOR_SECTION].getboolean(runtime_option, default)
            else:
                enabled = default
            if enabled:
                module = importlib.import_module(collector["file"])
                cls = getattr(module, collector["className"])
                self.__collectors.append(cls(config=self.config, registry=self.registry))

        # Initialize all metrics
        prefix_filter = utils.PrefixFilter("   ")
        for collector in self.__collectors:
            logging.info("\nRegistering metrics for collector: %s" % collector.__class__.__name__)
            logging.getLogger().addFilter(prefix_filter)
            try:
                collector.registerMetrics()
            finally:
                logging.getLogger().removeFilter(prefix_filter)

    def updateAllMetrics(self):
        """Run one collection pass over all collectors and return exposition text."""

        with self.__scrape_lock:
            for collector in self.__collectors:
                collector.updateMetrics()

            return generate_latest(self.registry)
