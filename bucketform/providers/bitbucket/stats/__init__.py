#  *******************************************************************************
#  Copyright (c) 2024-2025 Eclipse Foundation and others.
#  This program and the accompanying materials are made available
#  under the terms of the Eclipse Public License 2.0
#  which is available at http://www.eclipse.org/legal/epl-v20.html
#  SPDX-License-Identifier: EPL-2.0
#  *******************************************************************************

from __future__ import annotations

import dataclasses


@dataclasses.dataclass
class RequestStatistics:
    total_requests: int = 0
    failed_requests: int = 0

    def sent_request(self) -> None:
        self.total_requests += 1

    def received_failed_response(self) -> None:
        self.failed_requests += 1
