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

"""Switch web management client

Fetches the port statistics page from the switch web UI. The device has no
SNMP agent, so the authenticated status page is the only data source.

The device's legacy login scheme expects an MD5 digest of username+password
both as the "admin" session cookie and as the "Response" form field. The
form body is sent on a GET request; the firmware requires it.
"""

import hashlib
import logging
import time

import requests

STATS_PATH = "/port.cgi"
STATS_PARAMS = {"page": "stats"}


class TransportError(Exception):
    """Device request could not be built, sent, or completed in time."""


def digest(username: str, password: str) -> str:
    """Session credential for the device login scheme (lowercase hex MD5)."""
    return hashlib.md5((username + password).encode("utf-8")).hexdigest()


class DeviceClient:
    def __init__(self, address: str, username: str, password: str, timeout: float = 5.0):
        """Initialize client for a single switch.

        Args:
            address (str): Host (and optional :port) of the switch web UI.
            username (str): Web UI login name.
            password (str): Web UI password.
            timeout (float): Upper bound in seconds for connect + response read.
        """
        self.__url = f"http://{address}{STATS_PATH}"
        self.__username = username
        self.__password = password
        self.__timeout = float(timeout)

        # connection reuse across scrapes is fine; nothing else is kept
        self.__session = requests.Session()

    @property
    def url(self):
        return self.__url

    def __form(self, response_digest):
        return {
            "username": self.__username,
            "password": self.__password,
            "language": "EN",
            "Response": response_digest,
        }

    def fetch(self) -> bytes:
        """Request the port statistics page and return the raw body.

        Status codes are not inspected; whatever the device returns is handed
        to the parser.

        Raises:
            TransportError: connection failure or timeout elapsed.
        """
        response_digest = digest(self.__username, self.__password)
        deadline = time.monotonic() + self.__timeout

        try:
            with self.__session.get(
                self.__url,
                params=STATS_PARAMS,
                data=self.__form(response_digest),
                cookies={"admin": response_digest},
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self.__timeout,
                stream=True,
            ) as response:
                logging.debug(f"Device responded with HTTP {response.status_code}")
                chunks = []
                for chunk in response.iter_content(chunk_size=8192):
                    chunks.append(chunk)
                    if time.monotonic() > deadline:
                        raise TransportError(f"timeout after {self.__timeout}s reading {self.__url}")
                if time.monotonic() > deadline:
                    raise TransportError(f"timeout after {self.__timeout}s reading {self.__url}")
                return b"".join(chunks)
        except requests.RequestException as e:
            raise TransportError(f"error sending request: {e}") from e
