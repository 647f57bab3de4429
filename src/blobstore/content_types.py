# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""
Content types of uploaded streaming media.

Browsers only play HTML5 video inline when it is served with the proper content type, so
uploads of these files override the backend's default content type inference.
"""

import types
from typing import Mapping

from .utils import common


VIDEO_CONTENT_TYPES: Mapping[str, str] = types.MappingProxyType({
    'ogv': 'video/ogg',
    'mp4': 'video/mp4',
    'webm': 'video/webm',
})


def resolve_content_type(filename: str) -> str | None:
    """
    Returns the content type to upload a file with, or None to let the backend decide.

    The extension is matched literally, so ``movie.MP4`` is not overridden.
    """
    return VIDEO_CONTENT_TYPES.get(common.file_extension(filename))
