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

"""Switch port statistics

Implements per-port gauges scraped from the switch web UI, plus scrape
bookkeeping metrics. Example output:

port_state{port="Port 1"} 1.0
port_link_status{port="Port 1"} 1.0
port_tx_good_pkt{port="Port 1"} 100.0
port_rx_good_pkt{port="Port 1"} 200.0
port_tx_good_bytes{port="Port 1"} 400.0
port_rx_good_bytes{port="Port 1"} 300.0
exporter_last_scrape_duration_seconds 0.0421
exporter_scrape_errors_total 0.0

A failed scrape leaves port gauges untouched; only the error counter moves.
"""

import configparser
import logging
import threading
import time

from prometheus_client import CollectorRegistry, Counter, Gauge

from switchstat import utils
from switchstat.collector_base import Collector
from switchstat.device import DeviceClient, TransportError
from switchstat.parser import ParseError, parse_port_statistics

STATE_VALUES = {"Enable": 1.0, "Disable": 0.0}
LINK_VALUES = {"Link Up": 1.0, "Link Down": 0.0}


def encode_state(state: str) -> float:
    # unknown -> 0.0
    return STATE_VALUES.get(state, 0.0)


def encode_link(status: str) -> float:
    # unknown -> 0.0
    return LINK_VALUES.get(status, 0.0)


# fmt: off
PORT_METRICS = [
    {"metricName":"state",         "description":"State of the port",                             "value":lambda p: encode_state(p.state)},
    {"metricName":"link_status",   "description":"Link status of the port",                       "value":lambda p: encode_link(p.link_status)},
    {"metricName":"tx_good_pkt",   "description":"Number of good packets transmitted on the port", "value":lambda p: float(p.tx_good_pkt)},
    {"metricName":"rx_good_pkt",   "description":"Number of good packets received on the port",    "value":lambda p: float(p.rx_good_pkt)},
    {"metricName":"tx_good_bytes", "description":"Number of good bytes transmitted on the port",   "value":lambda p: float(p.tx_good_bytes)},
    {"metricName":"rx_good_bytes", "description":"Number of good bytes received on the port",      "value":lambda p: float(p.rx_good_bytes)},
]
# fmt: on


class PORTSTATS(Collector):
    def __init__(self, config: configparser.ConfigParser, registry: CollectorRegistry, client: DeviceClient = None):
        """Initialize the PORTSTATS data collector.

        Args:
            config (configparser.ConfigParser): Cached copy of runtime configuration.
            registry (CollectorRegistry): Registry owning this collector's metrics.
            client (DeviceClient): Optional pre-built device client.
        """
        logging.debug(f"Initializing {self.__class__.__name__} data collector")

        device = config[utils.DEVICE_SECTION]
        if client is None:
            client = DeviceClient(
                device["address"],
                device["username"],
                device["password"],
                timeout=device.getfloat("timeout_seconds", utils.DEFAULT_TIMEOUT_SECS),
            )

        self.__client = client
        self.__registry = registry
        self.__prefix = "port_"
        self.__metrics = {}
        self.__lastScrapeDuration = None
        self.__scrapeErrors = None

        # serializes whole fetch/parse/publish cycles
        self.__lock = threading.Lock()

    def registerMetrics(self):
        """Register metrics of interest"""

        for item in PORT_METRICS:
            metricName = self.__prefix + item["metricName"]
            self.__metrics[item["metricName"]] = Gauge(
                metricName, item["description"], labelnames=["port"], registry=self.__registry
            )
            logging.info("--> [registered] %s -> %s (gauge)" % (metricName, item["description"]))

        metricName = "exporter_last_scrape_duration_seconds"
        self.__lastScrapeDuration = Gauge(metricName, "Duration of the last scrape", registry=self.__registry)
        logging.info("--> [registered] %s (gauge)" % metricName)

        metricName = "exporter_scrape_errors_total"
        self.__scrapeErrors = Counter(metricName, "Total number of scrape errors", registry=self.__registry)
        logging.info("--> [registered] %s (counter)" % metricName)

    def updateMetrics(self):
        """Update registered metrics of interest"""

        with self.__lock:
            start_time = time.perf_counter()
            try:
                ports = parse_port_statistics(self.__client.fetch())
            except (TransportError, ParseError) as e:
                self.__scrapeErrors.inc()
                logging.error(f"Error fetching port statistics: {e}")
                return

            # ports missing from this scrape must not stay exposed
            for gauge in self.__metrics.values():
                gauge.clear()

            seen = set()
            for port in ports:
                if port.name in seen:
                    logging.debug(f"Duplicate port name {port.name!r}; later row overwrites earlier samples")
                seen.add(port.name)
                for item in PORT_METRICS:
                    self.__metrics[item["metricName"]].labels(port=port.name).set(item["value"](port))

            # success only; failed cycles keep the previous duration
            self.__lastScrapeDuration.set(time.perf_counter() - start_time)
