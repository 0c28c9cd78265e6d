import json
from pathlib import Path
from typing import Any, Dict, Optional


class ActionOutputs:
    """Collects key=value pipeline outputs and appends them to the CI output file.

    Without an output file the values are only kept in memory.
    """

    def __init__(self, output_file: Optional[Path] = None):
        self.output_file = Path(output_file) if output_file else None
        self.values: Dict[str, str] = {}

    def set(self, key: str, value: Any) -> None:
        if isinstance(value, bool):
            text = "true" if value else "false"
        elif isinstance(value, str):
            text = value
        else:
            text = json.dumps(value, separators=(",", ":"))

        if "\n" in text:
            raise ValueError(f"Output '{key}' must be a single line")

        self.values[key] = text
        if self.output_file is not None:
            with open(self.output_file, "a", encoding="utf-8") as f:
                f.write(f"{key}={text}\n")
