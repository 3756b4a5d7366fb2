"""Machine-readable JSON reporter."""

from __future__ import annotations

import json

from vitals.reporters.base import BaseReporter


class JsonReporter(BaseReporter):
    def render(self) -> str:
        return json.dumps(self.report.to_dict(), indent=2)
