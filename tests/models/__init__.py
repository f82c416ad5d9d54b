#  *******************************************************************************
#  Copyright (c) 2024-2025 Eclipse Foundation and others.
#  This program and the accompanying materials are made available
#  under the terms of the Eclipse Public License 2.0
#  which is available at http://www.eclipse.org/legal/epl-v20.html
#  SPDX-License-Identifier: EPL-2.0
#  *******************************************************************************

import json
import os
from typing import Any


def load_json_resource(file: str) -> dict[str, Any]:
    filename = os.path.join(os.path.dirname(os.path.realpath(__file__)), f"resources/{file}")
    with open(filename) as fp:
        return json.load(fp)
