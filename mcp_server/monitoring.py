"""Monitoring and metrics for MCP server."""
from chartfit.core.logging_config import get_logger
from datetime import datetime
from typing import Any, Callable, Awaitable
import time
from functools import wraps

logger = get_logger(__name__)


class MetricsCollector:
    """Collect per-tool render metrics for monitoring."""

    def __init__(self) -> None:
        self.tool_calls: dict[str, dict[str, int]] = {}
        self.errors: dict[str, int] = {}
        self.latencies: dict[str, list[float]] = {}
        self.svgs_rendered = 0

    def record_tool_call(self, tool_name: str, duration: float, success: bool) -> None:
        """Record tool call metrics."""
        calls = self.tool_calls.setdefault(
            tool_name, {"total": 0, "success": 0, "failure": 0}
        )
        calls["total"] += 1
        calls["success" if success else "failure"] += 1
        self.latencies.setdefault(tool_name, []).append(duration)

    def record_error(self, error_type: str, tool_name: str) -> None:
        """Record error metrics."""
        key = f"{tool_name}:{error_type}"
        self.errors[key] = self.errors.get(key, 0) + 1

    def record_svgs(self, count: int) -> None:
        self.svgs_rendered += count

    def reset(self) -> None:
        self.tool_calls.clear()
        self.errors.clear()
        self.latencies.clear()
        self.svgs_rendered = 0

    def get_metrics(self) -> dict[str, Any]:
        """Get current metrics snapshot."""
        return {
            "timestamp": datetime.now().isoformat(),
            "tool_calls": self.tool_calls,
            "errors": self.errors,
            "svgs_rendered": self.svgs_rendered,
            "latencies": {
                tool: {
                    "avg": sum(times) / len(times),
                    "max": max(times),
                    "min": min(times),
                    "count": len(times)
                }
                for tool, times in self.latencies.items()
            }
        }


# Global metrics collector
metrics = MetricsCollector()


def track_tool_execution(func: Callable[..., Awaitable[dict[str, Any]]]) -> Callable[..., Awaitable[dict[str, Any]]]:
    """Decorator to track tool execution metrics."""
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> dict[str, Any]:
        start = time.time()
        success = False

        try:
            result = await func(*args, **kwargs)
            success = result.get("success", False)
            return result
        except Exception:
            logger.exception(f"Tool {func.__name__} failed")
            raise
        finally:
            duration = time.time() - start
            metrics.record_tool_call(func.__name__, duration, success)

    return wrapper
