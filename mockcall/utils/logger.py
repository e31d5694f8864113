import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from colorama import Fore, Style, init

init(autoreset=True)


class CallLogger:
    """Colored per-component call log.

    Events are kept in memory for the lifetime of a call. When ``log_dir`` is
    given, the whole log (events, transcript, metrics) is also mirrored into a
    JSON file, one file per call.
    """

    COLORS = {
        "Controller": Fore.CYAN,
        "Provider": Fore.BLUE,
        "Transcript": Fore.GREEN,
        "Extractor": Fore.YELLOW,
        "Generator": Fore.MAGENTA,
        "Feedback": Fore.MAGENTA,
        "Terminal": Fore.RED,
        "System": Fore.WHITE
    }

    PREFIXES = {
        "Controller": "[LOG :: CONTROLLER]",
        "Provider": "[LOG :: PROVIDER]",
        "Transcript": "[LOG :: TRANSCRIPT]",
        "Extractor": "[LOG :: EXTRACTOR]",
        "Generator": "[LOG :: GENERATOR]",
        "Feedback": "[LOG :: FEEDBACK]",
        "Terminal": "[LOG :: TERMINAL]",
        "System": "[LOG :: SYSTEM]"
    }

    def __init__(self, log_dir: str | None = None, session_id: str | None = None):
        self.log_dir = Path(log_dir) if log_dir else None
        self.log_file = None
        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        self.reset(session_id)
        self._setup_logger()

    def _setup_logger(self):
        logger = logging.getLogger("mockcall.calls")
        logger.setLevel(logging.INFO)
        logger.propagate = False
        if not logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            formatter = logging.Formatter('%(message)s')
            handler.setFormatter(formatter)
            logger.addHandler(handler)
        self.logger = logger

    def reset(self, session_id: str | None = None):
        stamp = datetime.now(timezone.utc)
        if self.log_dir is not None:
            suffix = session_id or stamp.strftime('%Y%m%d_%H%M%S')
            self.log_file = self.log_dir / f"call_log_{suffix}.json"
        self.log_data = {
            "session_id": session_id,
            "timestamp": stamp.isoformat(),
            "events": [],
            "transcript": [],
            "metrics": {
                "total_tokens": 0,
                "prompt_tokens": 0,
                "completion_tokens": 0,
                "latency_ms": []
            }
        }

    def log(self, component: str, message: str, data: Dict[str, Any] | None = None, level: int = logging.INFO):
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "component": component,
            "message": message,
            "data": data or {}
        }
        self.log_data["events"].append(entry)

        color = self.COLORS.get(component, Fore.WHITE)
        prefix = self.PREFIXES.get(component, f"[LOG :: {component.upper()}]")
        formatted_msg = f"{color}{prefix}{Style.RESET_ALL} {message}"
        if data:
            formatted_msg += f" | Data: {json.dumps(data, ensure_ascii=False, default=str)}"

        self.logger.log(level, formatted_msg)
        self._save_log()

    def error(self, component: str, message: str, data: Dict[str, Any] | None = None):
        self.log(component, message, data, level=logging.ERROR)

    def log_state_transition(self, from_state: str, to_state: str, reason: str = ""):
        self.log("Controller", f"State transition: {from_state} → {to_state}", {"reason": reason})

    def log_tokens(self, prompt_tokens: int, completion_tokens: int):
        metrics = self.log_data["metrics"]
        metrics["prompt_tokens"] += prompt_tokens
        metrics["completion_tokens"] += completion_tokens
        metrics["total_tokens"] += prompt_tokens + completion_tokens
        self.log("System", f"[METRIC :: TOKENS] +{prompt_tokens} prompt, +{completion_tokens} completion")

    def log_latency(self, latency_ms: float):
        self.log_data["metrics"]["latency_ms"].append(latency_ms)
        self.log("System", f"[METRIC :: LATENCY] {latency_ms:.2f}ms")

    def save_transcript(self, messages: List[Dict[str, str]]):
        self.log_data["transcript"] = [dict(m) for m in messages]
        self._save_log()

    def get_log_data(self) -> Dict[str, Any]:
        return self.log_data.copy()

    def _save_log(self):
        if self.log_file is None:
            return
        try:
            with open(self.log_file, 'w', encoding='utf-8') as f:
                json.dump(self.log_data, f, ensure_ascii=False, indent=2, default=str)
        except OSError as e:
            self.logger.warning(f"Error saving call log {self.log_file}: {e}")
