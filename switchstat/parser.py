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

"""Port statistics page parser

Converts the switch's port statistics HTML into Port records. Example table
layout served by the device:

  Port    | State  | Link Status | TxGoodPkt | RxGoodPkt | RxGoodBytes | TxGoodBytes
  Port 1  | Enable | Link Up     | 100       | 200       | 300         | 400

The first row found under any table is always treated as the header and
dropped, whatever it contains. Data cells are read by position.
"""

import logging
import re
from dataclasses import dataclass
from typing import List

from bs4 import BeautifulSoup

COUNTER_MAX = 2**64 - 1

_DIGITS = re.compile(r"[0-9]+")


class ParseError(Exception):
    """Response body does not contain a table to read port rows from."""


@dataclass
class Port:
    name: str = ""
    state: str = ""
    link_status: str = ""
    tx_good_pkt: int = 0
    rx_good_pkt: int = 0
    rx_good_bytes: int = 0
    tx_good_bytes: int = 0


def parse_counter(text: str) -> int:
    """Parse an unsigned 64-bit decimal counter cell.

    Anything that is not a plain run of digits after trimming (empty cells,
    "--", signs, overflow) yields 0.
    """
    value = text.strip()
    if _DIGITS.fullmatch(value):
        number = int(value)
        if number <= COUNTER_MAX:
            return number
    logging.debug(f"Unable to parse counter value {text!r}, using 0")
    return 0


# cell index -> (field, converter)
# fmt: off
CELL_FIELDS = [
    ("name",          str),
    ("state",         str),
    ("link_status",   str),
    ("tx_good_pkt",   parse_counter),
    ("rx_good_pkt",   parse_counter),
    ("rx_good_bytes", parse_counter),
    ("tx_good_bytes", parse_counter),
]
# fmt: on


def parse_row(cells: List[str]) -> Port:
    """Build a Port from ordered cell texts; missing trailing cells keep defaults."""
    port = Port()
    for (field, convert), text in zip(CELL_FIELDS, cells):
        setattr(port, field, convert(text))
    return port


def parse_port_statistics(document) -> List[Port]:
    """Parse the port statistics page.

    Args:
        document (bytes | str): Raw response body from the device.

    Returns:
        list[Port]: One record per data row, in document order.

    Raises:
        ParseError: body is empty or holds no table.
    """
    if not document or not document.strip():
        raise ParseError("empty response body")

    soup = BeautifulSoup(document, "html.parser")
    if soup.find("table") is None:
        raise ParseError("no table found in response body")

    ports = []
    for index, row in enumerate(soup.select("table tr")):
        if index == 0:
            continue
        # text is kept as-is; only counters are trimmed
        cells = [td.get_text() for td in row.find_all("td")]
        ports.append(parse_row(cells))

    logging.debug(f"Parsed {len(ports)} port row(s)")
    return ports
