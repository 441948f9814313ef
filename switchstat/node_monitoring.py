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
# Serves /metrics over plain HTTP; every request triggers one collection pass
# against the switch before the response is written.
# --

import argparse
import logging
import sys

import gunicorn.app.base
from flask import Flask, abort, request

from switchstat import utils
from switchstat.monitor import Monitor

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


class SwitchstatServer(gunicorn.app.base.BaseApplication):
    def __init__(self, app, options=None):
        self.options = options or {}
        self.application = app
        super().__init__()

    def load_config(self):
        config = {key: value for key, value in self.options.items() if key in self.cfg.settings and value is not None}
        for key, value in config.items():
            self.cfg.set(key.lower(), value)

    def load(self):
        return self.application


def create_app(monitor: Monitor) -> Flask:
    """Build the Flask app exposing monitor metrics on /metrics."""
    app = Flask("switchstat")

    @app.before_request
    def restrict_remote_addr():
        if monitor.allowed_ips and request.remote_addr not in monitor.allowed_ips:
            abort(403)

    @app.route("/metrics")
    def metrics():
        return monitor.updateAllMetrics(), 200, {"Content-Type": CONTENT_TYPE}

    return app


def main():
    parser = argparse.ArgumentParser(description="Prometheus exporter for web-managed switches")
    parser.add_argument("--configfile", type=str, help="runtime config file", default=None)
    parser.add_argument("--port", type=int, help="port to listen on (overrides runtime config)", default=None)
    parser.add_argument("--logfile", type=str, help="write log output to file", default=None)
    parser.add_argument("--threads", type=int, help="number of request handler threads", default=4)
    args = parser.parse_args()

    configFile = utils.resolveConfigFile(args.configfile)
    try:
        config = utils.readConfig(configFile)
        monitor = Monitor(config, logFile=args.logfile)
    except utils.ConfigError as e:
        # logging may not be configured yet
        logging.basicConfig(format="%(message)s", stream=sys.stderr)
        logging.error(f"[ERROR]: {e}")
        sys.exit(1)

    port = args.port if args.port else int(config[utils.COLLECTOR_SECTION]["port"])
    logging.info(f"Reading runtime-config from {configFile}")

    app = create_app(monitor)

    def post_fork(server, worker):
        monitor.initMetrics()

    options = {
        "bind": f"0.0.0.0:{port}",
        "workers": 1,
        "threads": args.threads,
        "worker_class": "gthread",
        "post_fork": post_fork,
    }
    logging.info(f"Starting Prometheus exporter on :{port}/metrics")
    SwitchstatServer(app, options).run()


if __name__ == "__main__":
    main()
