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

"""Info metric

Implements an info metric recording exporter version and the monitored switch
address. Example:

switchstat_info{address="192.168.1.10",version="1.0.0"} 1.0
"""

import configparser
import logging

from prometheus_client import CollectorRegistry, Gauge

from switchstat import utils
from switchstat.collector_base import Collector


class INFO(Collector):
    def __init__(self, config: configparser.ConfigParser, registry: CollectorRegistry):
        """Initialize info metric.

        Args:
            config (configparser.ConfigParser): Cached copy of runtime configuration.
            registry (CollectorRegistry): Registry owning this collector's metrics.
        """
        logging.debug(f"Initializing {self.__class__.__name__} data collector")

        self.__registry = registry
        self.__version = utils.getVersion()
        self.__address = config[utils.DEVICE_SECTION]["address"]

    def registerMetrics(self):
        """Register metrics of interest"""

        self.__info = Gauge("switchstat_info", "Info metric", labelnames=["version", "address"], registry=self.__registry)
        self.__info.labels(version=self.__version, address=self.__address).set(1)
        logging.info("--> [registered] switchstat_info (gauge)")

    def updateMetrics(self):
        """Update registered metrics of interest"""

        return
