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
""" Records exchanged with the cluster management API.

Every attribute defaults to its zero value (0, "", false or an empty
collection) and is left out of the JSON representation while it holds
that value; a drive with no free space and a drive whose free space is
unknown look the same on the wire.

    >>> from opmodels import optypes
    >>> drive = optypes.ServerDrives(drivePath='/mnt/disk1', state='ok')
    >>> drive.to_binary()
    b'{"drivePath":"/mnt/disk1","state":"ok"}'
    >>> drive.from_binary(b'{"uuid":"0e7f...","healing":true}').healing
    True
"""

from .opdoc import ModelsDoc
from .optype import JsonObject


VERSION = '1.0.0'


@JsonObject(
    availableSpace=0,
    drivePath='',
    endpoint='',
    healing=False,
    model='',
    rootDisk=False,
    state='',
    totalSpace=0,
    usedSpace=0,
    uuid='',
)
class ServerDrives(object):
    '''
    The status of a single drive as reported by the server that hosts it.

    availableSpace: The number of bytes free on the drive.
    drivePath: The filesystem or device path identifying the drive.
    endpoint: The network address of the node hosting the drive.
    healing: Whether the data on the drive is currently being healed.
    model: The drive's manufacturer and model.
    rootDisk: Whether the drive holds the operating system's root filesystem.
    state: The drive's current state, e.g. "ok" or "offline"; not limited to a fixed set of values.
    totalSpace: The total capacity of the drive in bytes.
    usedSpace: The number of bytes used on the drive.
    uuid: The drive's globally unique identifier.
    '''


@JsonObject(
    commitID='',
    drives=[ServerDrives],
    endpoint='',
    network={str: str},
    poolNumber=0,
    state='',
    uptime=0,
    version='',
)
class ServerProperties(object):
    '''
    A server of the cluster and the drives attached to it.

    commitID: The source revision the server software was built from.
    drives: The status of each drive attached to the server.
    endpoint: The network address of the server.
    network: The connection state of each of the server's peers, by address.
    poolNumber: The index of the server pool the server belongs to.
    state: The server's current state, e.g. "online" or "offline".
    uptime: The number of seconds since the server was started.
    version: The server software version.
    '''

    def total_space(self):
        """ Sum up the capacity of the server's drives. """
        return sum(drive.totalSpace for drive in self.drives)

    def used_space(self):
        """ Sum up the used space on the server's drives. """
        return sum(drive.usedSpace for drive in self.drives)


MODELS = (ServerDrives, ServerProperties)


def reference():
    """ Build the reference documentation of all the record types. """
    spDoc = ModelsDoc(
        "Drive status records",
        "The records exchanged with the object-storage cluster management "
        "API to describe its servers and their drives.")
    for model in MODELS:
        spDoc.add_model(model)
    return spDoc
