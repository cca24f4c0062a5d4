#
# Copyright (c) 2023  The opmodels authors.
# All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
""" Byte-size units and formatting helpers for the drive records. """

import re

RE_LEADING_INT = re.compile(r'\s*([+-]?[0-9]+)')

KiB = 1024
MiB = 1024 ** 2
GiB = 1024 ** 3
TiB = 1024 ** 4

UNITS = ["B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB", "YiB"]
K8S_UNITS = ["Ki", "Mi", "Gi", "Ti", "Pi", "Ei"]
K8S_CALC_UNITS = ["B"] + K8S_UNITS


def nice_bytes(value, k8s_units=False):
    """ Format a size in bytes with one decimal digit and a 1024-based unit.

    Only the leading integer part of the value is used, so "1536.7" is
    1536 bytes; a value that does not start with an integer is zero. """
    match = RE_LEADING_INT.match(str(value))
    num = int(match.group(1)) if match else 0

    level = 0
    while num >= 1024 and level < len(UNITS) - 1:
        num = num / 1024
        level += 1

    units = K8S_CALC_UNITS if k8s_units else UNITS
    unit = units[level] if level < len(units) else UNITS[level]
    return "{num:.1f} {unit}".format(num=num, unit=unit)


def get_bytes(value, unit, from_k8s=False):
    """ Convert a value in the specified unit to a number of bytes.

    An unknown unit yields zero. """
    units = K8S_CALC_UNITS if from_k8s else UNITS
    try:
        power = units.index(unit)
    except ValueError:
        return 0
    return float(value) * 1024 ** power


def used_ratio(used, total):
    """ Return the used fraction of a drive, or None for an unknown size. """
    if not total:
        return None
    return used / total
